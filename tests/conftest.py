import pytest

from nuvolock.custody.memory import InMemoryTokenCustodian
from nuvolock.ledger import LedgerConfig, LockLedger
from nuvolock.storage.memory import InMemoryStorage
from nuvolock.utils.clock import FixedClock

# 18-decimal token, like the NUVO ERC-20
UNIT = 10**18
DAY = 24 * 60 * 60
WEEK = 7 * DAY
START = 1_700_000_000

OWNER = "0x00000000000000000000000000000000000000aa"
ADDR1 = "0x1111111111111111111111111111111111111111"
ADDR2 = "0x2222222222222222222222222222222222222222"
ADDR3 = "0x3333333333333333333333333333333333333333"


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def token() -> InMemoryTokenCustodian:
    """Token with 1000 units minted to and approved by ADDR1 and ADDR2."""
    token = InMemoryTokenCustodian()
    for account in (ADDR1, ADDR2):
        token.mint(account, 1000 * UNIT)
        token.approve(account, 1000 * UNIT)
    return token


@pytest.fixture
def ledger(token, storage, clock) -> LockLedger:
    return LockLedger(
        LedgerConfig(custodian=token, owner=OWNER, min_lock_duration=WEEK),
        storage=storage,
        clock=clock,
    )
