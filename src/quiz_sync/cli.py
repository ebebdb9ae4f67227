# Area: Shared
"""
quiz_sync.cli — Command-line interface
======================================

Usage:
    python -m quiz_sync --demo                       # Offline simulated session
    python -m quiz_sync --config config.json         # Live session over HTTP
    python -m quiz_sync --config config.json --join  # Join first, then play

Live mode reads configuration from a JSON file, then from environment
variables (a .env file in the working directory is loaded first).
While a round runs, type 1-4 and Enter to answer. The host types `f`
on the leaderboard to finalize rewards.

Demo mode can be enabled via:
    1. CLI flag: --demo
    2. Config key: demo_mode: True
    3. Environment variable: DEMO_MODE=true
"""

import argparse
import asyncio
import json
import logging
import os
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ._shared.logging_config import setup_logging
from .demo_scores import placeholder_score
from .errors import LedgerError
from .http_ledger import HttpLedger
from .memory_ledger import MemoryLedger, MemoryLedgerStore
from .questions import DEFAULT_QUESTIONS, load_questions
from .runner import RoundRunner
from .types import FinalizeStatus, LeaderboardEntry, Notice, Phase, PhaseState


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Synchronized multi-player quiz client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m quiz_sync --demo
  python -m quiz_sync --demo --players 5 --round-duration-ms 8000
  python -m quiz_sync --config config.json --join
  QUIZ_SESSION_ID=0x51 python -m quiz_sync --config config.json
        """,
    )

    parser.add_argument("--demo", action="store_true",
                        help="Run an offline session against an in-memory ledger")
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--questions", type=str, help="Path to a JSON question bank")
    parser.add_argument("--join", action="store_true", help="Join the session before playing")
    parser.add_argument("--start", action="store_true", help="Host: start the session")
    parser.add_argument("--players", type=int, default=4,
                        help="Demo: number of players including you (default: 4)")
    parser.add_argument("--round-duration-ms", type=int, help="Override the round duration")
    parser.add_argument("--seed", type=int, help="Demo: seed for simulated answers")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")

    return parser.parse_args(argv)


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load config from file, then override from the environment."""
    load_dotenv()
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = json.load(f)

    env_mappings = {
        "QUIZ_LEDGER_URL": "ledger_url",
        "QUIZ_ACCOUNT_ID": "account_id",
        "QUIZ_API_TOKEN": "api_token",
        "QUIZ_SESSION_ID": "session_id",
        "QUIZ_ROUND_DURATION_MS": "round_duration_ms",
        "QUIZ_WINNER_COUNT": "winner_count",
        "QUIZ_LOG_FILE": "log_file",
    }
    int_keys = {"round_duration_ms", "winner_count"}

    for env_key, config_key in env_mappings.items():
        if env_key in os.environ:
            value = os.environ[env_key]
            if config_key in int_keys:
                value = int(value)
            config[config_key] = value

    return config


def is_demo_mode(args: argparse.Namespace, config: Dict[str, Any]) -> bool:
    """Check if demo mode is enabled via CLI, config, or environment."""
    if args.demo:
        return True
    if config.get("demo_mode"):
        return True
    if os.environ.get("DEMO_MODE", "").lower() in ("true", "1", "yes"):
        return True
    return False


# ── Terminal display ─────────────────────────────────────────────

def print_notice(notice: Notice) -> None:
    marker = {"error": "!!", "success": "OK"}.get(notice.level, "--")
    print(f"  [{marker}] {notice.message}")


def print_standing(standing: List[LeaderboardEntry], you: str) -> None:
    print("  LEADERBOARD")
    for rank, entry in enumerate(standing, start=1):
        mark = " (YOU)" if entry.player_id.lower() == you.lower() else ""
        print(f"  {rank:>2}. {entry.player_id:<12} {entry.score:>6} PTS{mark}")


def make_phase_printer(runner: RoundRunner):
    def on_phase(state: PhaseState) -> None:
        if state.phase is Phase.QUESTION:
            question = runner.questions[state.round_index]
            print(f"\nQUESTION {state.round_index + 1} / {runner.round_count}"
                  f"  // SCORE: {runner.cumulative_score}")
            print(f"  {question.text}")
            for i, option in enumerate(question.options, start=1):
                print(f"    0{i} // {option}")
        elif state.phase is Phase.FEEDBACK:
            question = runner.questions[state.round_index]
            points = runner.capture.points_for(state.round_index)
            print(f"  ANSWER: {question.options[question.correct]}  (+{points or 0})")
        elif state.phase is Phase.LEADERBOARD:
            print(f"\nMISSION COMPLETE // FINAL SCORE: {runner.cumulative_score}")
    return on_phase


# ── Demo mode ────────────────────────────────────────────────────

async def _autoplay(runner: RoundRunner, rng: random.Random, tick_seconds: float) -> None:
    """Answer each round after a random delay, like a human would."""
    answered = set()
    while not runner.state.is_terminal:
        state = runner.state
        if state.phase is Phase.QUESTION and state.round_index not in answered:
            answered.add(state.round_index)
            await asyncio.sleep(rng.uniform(0, tick_seconds * 3))
            choice = rng.randrange(len(runner.questions[state.round_index].options))
            if runner.select(choice) is not None:
                print(f"  YOU PICKED 0{choice + 1} // WAITING FOR SLOWPOKES...")
        await asyncio.sleep(tick_seconds / 4)


async def _simulated_peers(
    peers: List[MemoryLedger], session_id: str, runner: RoundRunner, done: asyncio.Event,
) -> None:
    while not runner.state.is_terminal:
        await asyncio.sleep(0.2)
    for peer in peers:
        try:
            await peer.write_submit_score(session_id, placeholder_score(session_id, peer.account_id))
        except LedgerError as e:
            print(f"  [!!] peer {peer.account_id}: {e}")
    done.set()


async def _host_finalizes(
    host_runner: RoundRunner, player_runner: RoundRunner, peers_done: asyncio.Event,
) -> None:
    await peers_done.wait()
    while player_runner.submitter is None or player_runner.submitter.status is None:
        await asyncio.sleep(0.2)
    # Let the host's leaderboard poll pick up the last writes
    await asyncio.sleep(host_runner.config["leaderboard_poll_seconds"] + 0.5)
    if await host_runner.finalize() is not FinalizeStatus.FINALIZED:
        host_runner.stop()
        player_runner.stop()


async def run_demo(args: argparse.Namespace) -> int:
    round_duration_ms = args.round_duration_ms or 10_000
    questions = load_questions(args.questions) if args.questions else DEFAULT_QUESTIONS
    rng = random.Random(args.seed)

    store = MemoryLedgerStore()
    host = MemoryLedger(store, "0xh0st", latency_seconds=0.05)
    you = MemoryLedger(store, "0xy0u", latency_seconds=0.05)
    peers = [MemoryLedger(store, f"0xpeer{i}", latency_seconds=0.05)
             for i in range(1, max(1, args.players))]

    session_id = await host.write_create_session(
        prize=100, round_count=len(questions), round_duration_ms=round_duration_ms,
    )
    for client in [you] + peers:
        await client.write_join_session(session_id)

    common = {
        "session_id": session_id,
        "round_duration_ms": round_duration_ms,
        "feedback_window_sec": max(1, round_duration_ms // 4000),
        "log_file": None,
    }
    player_runner = RoundRunner({**common, "account_id": you.account_id}, you, questions,
                                notice_handler=print_notice)
    player_runner.on_phase = make_phase_printer(player_runner)
    player_runner.on_standing = lambda standing: print_standing(standing, you.account_id)
    host_runner = RoundRunner({**common, "account_id": host.account_id}, host, questions)

    print(f"SESSION {session_id} // {len(peers) + 1} OPERATIVES // HOST {host.account_id}")
    await host_runner.start()
    peers_done = asyncio.Event()

    await asyncio.gather(
        player_runner.run(),
        host_runner.run(),
        _autoplay(player_runner, rng, player_runner.config["tick_interval_seconds"]),
        _simulated_peers(peers, session_id, player_runner, peers_done),
        _host_finalizes(host_runner, player_runner, peers_done),
    )

    winners = store.winners(session_id)
    did_win = bool(winners) and winners[0].lower() == you.account_id.lower()
    print(f"\nWINNERS: {', '.join(winners) or '-'}")
    print("YOU WON THE PRIZE!" if did_win else f"FINAL SCORE: {player_runner.cumulative_score}")
    return 0


# ── Live mode ────────────────────────────────────────────────────

async def _read_commands(runner: RoundRunner) -> None:
    """Feed stdin lines to the runner: 1-4 answers, `f` finalizes (host)."""
    while not runner.finalized:
        line = await asyncio.to_thread(sys.stdin.readline)
        if not line:
            return
        command = line.strip().lower()
        if command.isdigit():
            if runner.select(int(command) - 1) is None:
                print("  (answer not accepted)")
        elif command == "f" and runner.is_host:
            status = await runner.finalize()
            print(f"  finalize: {status.value}")


async def run_live(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    ledger = HttpLedger(
        base_url=config["ledger_url"],
        account_id=config["account_id"],
        api_token=config.get("api_token"),
        timeout_seconds=float(config.get("ledger_timeout_seconds", 10.0)),
    )
    questions = load_questions(args.questions) if args.questions else DEFAULT_QUESTIONS
    runner = RoundRunner(config, ledger, questions, notice_handler=print_notice)
    runner.on_phase = make_phase_printer(runner)
    runner.on_standing = lambda standing: print_standing(standing, runner.account_id)

    if args.join and not await runner.join():
        return 1
    if args.start and not await runner.start():
        return 1

    commands = asyncio.create_task(_read_commands(runner))
    try:
        await runner.run()
    finally:
        commands.cancel()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)
    config = load_config(args.config)
    if args.round_duration_ms:
        config["round_duration_ms"] = args.round_duration_ms

    level = logging.DEBUG if args.verbose else logging.INFO

    if is_demo_mode(args, config):
        setup_logging(log_file_path=config.get("log_file", "quiz_sync.log"), level=level, terminal=args.verbose)
        return asyncio.run(run_demo(args))

    required = ["ledger_url", "account_id", "session_id"]
    missing = [k for k in required if not config.get(k)]
    if missing:
        print(f"Error: Missing required config: {', '.join(missing)}", file=sys.stderr)
        print("Set via config file or environment variables.", file=sys.stderr)
        return 1

    setup_logging(log_file_path=config.get("log_file", "quiz_sync.log"), level=level)
    try:
        return asyncio.run(run_live(args, config))
    except KeyboardInterrupt:
        return 130
