"""
test_local.py — Run a full session WITHOUT a ledger
===================================================

Two players and a host share one in-memory ledger. Time is simulated,
so the whole three-round session runs instantly.

Run with:  python test_local.py
"""

import sys
import os
import asyncio
import logging

# Add parent to path so we can import quiz_sync
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from quiz_sync import DEFAULT_QUESTIONS, MemoryLedger, MemoryLedgerStore, RoundRunner

logging.basicConfig(level=logging.WARNING)

T0 = 1_700_000_000_000
ROUND_MS = 20_000


class SimulatedClock:
    def __init__(self):
        self.now = T0

    def __call__(self):
        return self.now


async def main():
    clock = SimulatedClock()
    store = MemoryLedgerStore(clock=clock)
    host = MemoryLedger(store, "0xhost")
    alice = MemoryLedger(store, "0xalice")
    bob = MemoryLedger(store, "0xbob")

    print("=" * 60)
    print("  quiz_sync local test")
    print("=" * 60)

    session_id = await host.write_create_session(prize=100, round_count=3, round_duration_ms=ROUND_MS)
    await alice.write_join_session(session_id)
    await bob.write_join_session(session_id)
    await host.write_start_session(session_id)
    print(f"\n  Session {session_id} started at {clock.now}")

    runners = {}
    for ledger in (host, alice, bob):
        runners[ledger.account_id] = RoundRunner(
            {"session_id": session_id, "account_id": ledger.account_id, "log_file": None},
            ledger, clock=clock,
        )
        await runners[ledger.account_id].wait_for_start()

    # Alice answers fast and right; Bob answers slowly, and wrong in round 2
    for r, question in enumerate(DEFAULT_QUESTIONS):
        clock.now = T0 + r * ROUND_MS
        for runner in runners.values():
            runner.tick()
        clock.now += 1_000
        runners["0xalice"].select(question.correct)
        clock.now += 8_000
        runners["0xbob"].select(question.correct if r != 1 else question.correct + 1)
        clock.now = T0 + r * ROUND_MS + 16_000
        for runner in runners.values():
            runner.tick()
        print(f"  Round {r + 1}: alice={runners['0xalice'].cumulative_score} "
              f"bob={runners['0xbob'].cumulative_score}")

    clock.now = T0 + 3 * ROUND_MS
    for runner in runners.values():
        runner.tick()
    for name in ("0xalice", "0xbob"):
        status = await runners[name].wait_for_submission()
        print(f"  {name} submission: {status.value}")

    standing = await runners["0xhost"].poll_leaderboard()
    print("\n  Leaderboard:")
    for rank, entry in enumerate(standing, start=1):
        print(f"    {rank}. {entry.player_id:<10} {entry.score}")

    status = await runners["0xhost"].finalize()
    print(f"\n  Finalize: {status.value}, winners {store.winners(session_id)}")


asyncio.run(main())
