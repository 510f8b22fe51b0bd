"""
HTTP token service client used as the ledger's custodian.

Talks to a REST token service that holds the ledger's custody account:

    POST /transfers/pull   {"from", "amount", "idempotencyKey"}
    POST /transfers/push   {"to", "amount", "idempotencyKey"}
    GET  /balances/{account}
    GET  /custody/balance

Amounts travel as decimal strings of integer token units. The service
performs a transfer at most once per idempotencyKey; a key is consumed only
by a completed transfer.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any

import httpx

from nuvolock.core.exceptions import (
    CustodyTransferFailedError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
)
from nuvolock.core.logging import get_logger
from nuvolock.core.types import normalize_account
from nuvolock.custody.base import TokenCustodian
from nuvolock.resilience.retry import execute_with_retry


class HttpTokenCustodian(TokenCustodian):
    """
    Custodian backed by a remote token service.

    Transfers are sent once and never retried here. Callers pass a stable
    reference so that repeating a transfer after an ambiguous failure reuses
    its idempotency key. Balance reads retry transient failures.

    Example:
        >>> custodian = HttpTokenCustodian("https://tokens.example.com/v1", api_key="...")
        >>> await custodian.balance_of("0xabc")
        1000
    """

    COMPLETED = "completed"

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the token service client.

        Args:
            base_url: Token service base URL
            api_key: Optional bearer token
            timeout: Request timeout in seconds, also the bound on a whole transfer
            transport: Custom httpx transport (e.g. httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._logger = get_logger("custody.http")
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._http_client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http_client

    @property
    def transfer_timeout(self) -> float:
        return self._timeout

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _get(self, path: str) -> dict[str, Any]:
        client = await self._get_client()
        self._logger.debug(f"GET {self._base_url}{path}")
        response = await client.get(path)
        response.raise_for_status()
        return response.json()

    async def _transfer(
        self,
        operation: str,
        account: str,
        amount: int,
        reference: str | None = None,
    ) -> None:
        account = normalize_account(account)
        party = "from" if operation == "pull" else "to"
        body = {
            party: account,
            "amount": str(amount),
            "idempotencyKey": reference or str(uuid.uuid4()),
        }

        client = await self._get_client()
        self._logger.debug(f"POST {self._base_url}/transfers/{operation} ({amount} units, {account})")
        try:
            # httpx timeouts apply per phase; bound the whole request
            response = await asyncio.wait_for(
                client.post(f"/transfers/{operation}", json=body),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise CustodyTransferFailedError(
                f"Token service did not answer within {self._timeout}s",
                operation,
                account=account,
                amount=amount,
                details={"idempotency_key": body["idempotencyKey"]},
            ) from e
        except httpx.HTTPError as e:
            raise CustodyTransferFailedError(
                f"Token service unreachable: {e}",
                operation,
                account=account,
                amount=amount,
                details={"error": str(e), "idempotency_key": body["idempotencyKey"]},
            ) from e

        if response.is_error:
            raise self._error_from_response(operation, account, amount, response)

        data = response.json()
        status = data.get("status")
        if status != self.COMPLETED:
            raise CustodyTransferFailedError(
                f"Transfer not completed (status: {status})",
                operation,
                account=account,
                amount=amount,
                details={"response": data},
            )

    def _error_from_response(
        self,
        operation: str,
        account: str,
        amount: int,
        response: httpx.Response,
    ) -> CustodyTransferFailedError:
        """Map an error reply from the token service to a custody exception."""
        try:
            error = response.json().get("error", {})
        except ValueError:
            error = {}

        code = error.get("code")
        if code == "insufficient_balance":
            return InsufficientBalanceError(
                operation, account, amount, int(error.get("balance", 0))
            )
        if code == "insufficient_allowance":
            return InsufficientAllowanceError(account, amount, int(error.get("allowance", 0)))

        return CustodyTransferFailedError(
            error.get("message") or f"Token service returned HTTP {response.status_code}",
            operation,
            account=account,
            amount=amount,
            details={"status_code": response.status_code, "code": code},
        )

    async def pull(self, account: str, amount: int, reference: str | None = None) -> None:
        await self._transfer("pull", account, amount, reference)

    async def push(self, account: str, amount: int, reference: str | None = None) -> None:
        await self._transfer("push", account, amount, reference)

    async def balance_of(self, account: str) -> int:
        data = await execute_with_retry(self._get, f"/balances/{normalize_account(account)}")
        return int(data.get("balance", "0"))

    async def custody_balance(self) -> int:
        data = await execute_with_retry(self._get, "/custody/balance")
        return int(data.get("balance", "0"))
