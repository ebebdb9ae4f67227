"""
main.py — Play a live quiz session
==================================

This is the entry point for a real session. Configure the ledger
gateway, your account and the session you were invited to, and run.

    python main.py

The runner will:
  1. Join the session and wait until the host starts it
  2. Tick once per second, showing each question
  3. Submit your score once when the last round ends
  4. Show the leaderboard until the host sends the rewards

Type 1-4 and Enter to answer. Press Ctrl+C to stop.
"""

import asyncio
import logging
import sys

from quiz_sync import HttpLedger, Phase, RoundRunner

# ── Setup logging (so you can see what's happening) ──
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)

# ── Configuration ──
config = {
    # Ledger gateway and your account address
    "ledger_url": "https://ledger.example.com/api",
    "account_id": "0xYOUR_ADDRESS",
    "api_token": "your-api-token",

    # The session you were invited to
    "session_id": "0xSESSION_ID",

    # Must match what every other client uses
    "round_duration_ms": 20_000,
    "feedback_window_sec": 5,
}


def show(runner, state):
    if state.phase is Phase.QUESTION:
        question = runner.current_question()
        print(f"\nQ{state.round_index + 1}: {question.text}")
        for i, option in enumerate(question.options, start=1):
            print(f"   {i}) {option}")
    elif state.phase is Phase.LEADERBOARD:
        print(f"\nFinal score: {runner.cumulative_score}")


async def answers_from_stdin(runner):
    while not runner.finalized:
        line = await asyncio.to_thread(sys.stdin.readline)
        if line.strip().isdigit():
            runner.select(int(line) - 1)


async def main():
    ledger = HttpLedger(config["ledger_url"], config["account_id"], api_token=config["api_token"])
    runner = RoundRunner(config=config, ledger=ledger)
    runner.on_phase = lambda state: show(runner, state)
    runner.on_standing = lambda standing: print(
        "  " + "  ".join(f"{e.player_id}:{e.score}" for e in standing)
    )

    await runner.join()
    reader = asyncio.create_task(answers_from_stdin(runner))
    try:
        await runner.run()
    finally:
        reader.cancel()


asyncio.run(main())
