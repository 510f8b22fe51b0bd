"""
Example: Lock Lifecycle

Walks one account through lock, early unlock attempt, and unlock after the
lock period, using the in-memory token and a manually driven clock.
"""

import asyncio

from dotenv import load_dotenv

load_dotenv()

from nuvolock import (  # noqa: E402
    Config,
    FixedClock,
    InMemoryTokenCustodian,
    NuvoLock,
    StillLockedError,
)

UNIT = 10**18
WEEK = 7 * 24 * 60 * 60
ALICE = "0x742d35Cc6634C0532925a3b844Bc9e7595f5e4a0"


async def main():
    """
    Lock example showing:
    1. Locking tokens for a week
    2. Rejected early unlock
    3. Unlock after the period and reconciliation
    """
    print("=== NuvoLock Lifecycle Example ===\n")

    token = InMemoryTokenCustodian()
    token.mint(ALICE, 1000 * UNIT)
    token.approve(ALICE, 1000 * UNIT)

    clock = FixedClock(1_700_000_000)

    async with NuvoLock(Config(owner="0xadmin"), custodian=token, clock=clock) as nuvo:
        # ========================================
        # Lock
        # ========================================
        print("--- Locking ---")
        event = await nuvo.lock(ALICE, 100 * UNIT, WEEK)
        print(f"  Locked {event.amount // UNIT} NUVO until {event.unlock_time}")
        print(f"  Balance: {await token.balance_of(ALICE) // UNIT} NUVO")

        # ========================================
        # Too early
        # ========================================
        print("\n--- Early unlock ---")
        clock.advance(3 * 24 * 60 * 60)
        try:
            await nuvo.unlock(ALICE)
        except StillLockedError as e:
            print(f"  Rejected: {e.message} ({e.remaining}s remaining)")

        # ========================================
        # After the lock period
        # ========================================
        print("\n--- Unlock ---")
        clock.advance(4 * 24 * 60 * 60)
        event = await nuvo.unlock(ALICE)
        print(f"  Unlocked {event.amount // UNIT} NUVO")
        print(f"  Balance: {await token.balance_of(ALICE) // UNIT} NUVO")

        info = await nuvo.get_lock_info(ALICE)
        print(f"  Record: amount={info.amount}, original_lock_time={info.original_lock_time}s")

        report = await nuvo.reconcile()
        print(f"\n  Custody balanced: {report.is_balanced}")

    print("\n=== Lifecycle Example Complete ===")


if __name__ == "__main__":
    asyncio.run(main())
