"""
In-memory fungible token acting as the ledger's custodian.

Behaves like a minimal ERC-20 where the ledger is the only spender:
holders mint, approve the ledger, and the ledger pulls within allowance.
"""

from __future__ import annotations

from nuvolock.core.exceptions import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    ValidationError,
)
from nuvolock.core.logging import get_logger
from nuvolock.core.types import normalize_account
from nuvolock.custody.base import TokenCustodian

logger = get_logger("custody.memory")


def _check_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise ValidationError("Token amount must be a non-negative integer", details={"amount": amount})
    return amount


class InMemoryTokenCustodian(TokenCustodian):
    """
    In-memory token with balances and allowances.

    Data is lost when the process ends. Intended for development, tests
    and simulations.

    Example:
        >>> token = InMemoryTokenCustodian()
        >>> token.mint("0xabc", 1000)
        >>> token.approve("0xabc", 1000)
        >>> await token.pull("0xabc", 100)
        >>> await token.custody_balance()
        100
    """

    def __init__(self, symbol: str = "NUVO", custody_account: str = "nuvolock:custody") -> None:
        self._symbol = symbol
        self._custody_account = custody_account
        self._balances: dict[str, int] = {}
        self._allowances: dict[str, int] = {}
        # references of completed transfers
        self._completed: set[str] = set()

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def custody_account(self) -> str:
        return self._custody_account

    @property
    def total_supply(self) -> int:
        return sum(self._balances.values())

    def mint(self, account: str, amount: int) -> None:
        """Create new token units in the account's balance."""
        account = normalize_account(account)
        amount = _check_amount(amount)
        self._balances[account] = self._balances.get(account, 0) + amount

    def approve(self, account: str, amount: int) -> None:
        """Set how many units the ledger may pull from the account."""
        account = normalize_account(account)
        self._allowances[account] = _check_amount(amount)

    def allowance(self, account: str) -> int:
        return self._allowances.get(normalize_account(account), 0)

    async def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_account(account), 0)

    async def custody_balance(self) -> int:
        return self._balances.get(self._custody_account, 0)

    def _already_done(self, reference: str | None) -> bool:
        if reference is not None and reference in self._completed:
            logger.debug(f"Transfer {reference} already completed, skipping")
            return True
        return False

    def _mark_done(self, reference: str | None) -> None:
        if reference is not None:
            self._completed.add(reference)

    async def pull(self, account: str, amount: int, reference: str | None = None) -> None:
        """Move tokens from account into custody, consuming allowance."""
        account = normalize_account(account)
        amount = _check_amount(amount)
        if self._already_done(reference):
            return

        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalanceError("pull", account, amount, balance)

        allowance = self._allowances.get(account, 0)
        if allowance < amount:
            raise InsufficientAllowanceError(account, amount, allowance)

        self._balances[account] = balance - amount
        self._allowances[account] = allowance - amount
        self._balances[self._custody_account] = self._balances.get(self._custody_account, 0) + amount
        self._mark_done(reference)
        logger.debug(f"Pulled {amount} {self._symbol} from {account} into custody")

    async def push(self, account: str, amount: int, reference: str | None = None) -> None:
        """Move tokens from custody back to account."""
        account = normalize_account(account)
        amount = _check_amount(amount)
        if self._already_done(reference):
            return

        held = self._balances.get(self._custody_account, 0)
        if held < amount:
            raise InsufficientBalanceError("push", self._custody_account, amount, held)

        self._balances[self._custody_account] = held - amount
        self._balances[account] = self._balances.get(account, 0) + amount
        self._mark_done(reference)
        logger.debug(f"Pushed {amount} {self._symbol} from custody to {account}")
