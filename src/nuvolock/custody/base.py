"""
Token Custodian interface.

The lock ledger never moves balances itself; it delegates every transfer
into and out of custody to a TokenCustodian.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class TokenCustodian(ABC):
    """
    Abstract fungible-token holder/mover used by the lock ledger.

    Implementations must raise CustodyTransferFailedError (or a subclass)
    when a transfer is refused, and must not move any tokens in that case.
    """

    @abstractmethod
    async def pull(self, account: str, amount: int, reference: str | None = None) -> None:
        """
        Move amount token units from the account into ledger custody.

        A transfer with a reference that already completed is not repeated.

        Raises:
            CustodyTransferFailedError: If balance/allowance is insufficient
                or the transfer could not be performed
        """
        ...

    @abstractmethod
    async def push(self, account: str, amount: int, reference: str | None = None) -> None:
        """
        Move amount token units from ledger custody to the account.

        A transfer with a reference that already completed is not repeated.

        Raises:
            CustodyTransferFailedError: If the transfer could not be performed
        """
        ...

    @abstractmethod
    async def balance_of(self, account: str) -> int:
        """Return the account's external token balance."""
        ...

    @abstractmethod
    async def custody_balance(self) -> int:
        """Return the token balance held on the ledger's behalf."""
        ...

    @property
    def transfer_timeout(self) -> float | None:
        """Upper bound in seconds on one pull or push, None if transfers are local."""
        return None

    async def close(self) -> None:
        """Release any connections held by the custodian."""
        return None
