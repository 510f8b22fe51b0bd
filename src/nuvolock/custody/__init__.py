"""
Custody module - token custodians the lock ledger delegates transfers to.

- TokenCustodian: abstract pull/push interface
- InMemoryTokenCustodian: in-process token with balances and allowances
- HttpTokenCustodian: client for a remote token service
"""

from nuvolock.custody.base import TokenCustodian
from nuvolock.custody.http import HttpTokenCustodian
from nuvolock.custody.memory import InMemoryTokenCustodian

__all__ = [
    "TokenCustodian",
    "InMemoryTokenCustodian",
    "HttpTokenCustodian",
]
