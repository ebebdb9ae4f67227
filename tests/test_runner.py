# Area: Runner Tests
"""Tests for RoundRunner against an in-memory ledger."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from quiz_sync.memory_ledger import MemoryLedger, MemoryLedgerStore
from quiz_sync.questions import DEFAULT_QUESTIONS
from quiz_sync.runner import RoundRunner
from quiz_sync.types import FinalizeStatus, Phase, SubmissionStatus

T0 = 1_700_000_000_000
D = 20_000
HOST = "0xHOST"


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now


def make_game(players=("0xa", "0xb"), start=True):
    store = MemoryLedgerStore(clock=lambda: T0)
    sid = store.create_session(HOST, 10, 3, D)
    for p in players:
        store.join_session(sid, p)
    if start:
        store.start_session(sid, HOST)
    return store, sid


def make_runner(store, sid, account_id="0xa", clock=None, **config):
    base = {
        "session_id": sid,
        "account_id": account_id,
        "round_duration_ms": D,
        "tick_interval_seconds": 0.01,
        "leaderboard_poll_seconds": 0.01,
        "lobby_poll_seconds": 0.01,
        "log_file": None,
    }
    base.update(config)
    return RoundRunner(base, MemoryLedger(store, account_id), clock=clock or FakeClock())


class TestConstruction:
    """Config and question bank checks."""

    def test_round_count_defaults_to_question_count(self):
        store, sid = make_game()
        assert make_runner(store, sid).round_count == len(DEFAULT_QUESTIONS)

    def test_round_count_cannot_exceed_questions(self):
        store, sid = make_game()
        with pytest.raises(ValueError, match="exceeds"):
            make_runner(store, sid, round_count=10)

    def test_invalid_config_rejected(self):
        store, sid = make_game()
        with pytest.raises(ValueError):
            make_runner(store, sid, feedback_window_sec=30)

    def test_unbound_runner_is_inert(self):
        store, sid = make_game()
        runner = make_runner(store, sid)
        assert runner.tick(T0).phase is Phase.UNSTARTED
        assert runner.select(0, T0) is None
        assert runner.current_question() is None
        assert runner.cumulative_score == 0


class TestTicking:
    """tick(), select() and the single submission."""

    def test_player_round_trip(self):
        store, sid = make_game()
        runner = make_runner(store, sid)

        async def play():
            await runner.wait_for_start()
            runner.tick(T0)
            assert runner.current_question() == DEFAULT_QUESTIONS[0]
            answer = runner.select(DEFAULT_QUESTIONS[0].correct, T0 + 2_000)
            assert answer.locked_score == 690

            assert runner.tick(T0 + 16_000).phase is Phase.FEEDBACK
            assert runner.cumulative_score == 690

            assert runner.tick(T0 + 3 * D).phase is Phase.LEADERBOARD
            status = await runner.wait_for_submission()
            for extra in range(5):
                runner.tick(T0 + 3 * D + extra * 1_000)
            return status

        status = asyncio.run(play())

        assert status is SubmissionStatus.SUBMITTED
        assert store.score_entry(store.score_table_id(sid), "0xa") == 690
        assert [w for w in store.writes if w[0] == "submit_score"] == [("submit_score", sid, "0xa")]

    def test_back_to_back_terminal_ticks_write_once(self):
        store, sid = make_game()
        config = {"session_id": sid, "account_id": "0xa", "round_duration_ms": D, "log_file": None}
        runner = RoundRunner(config, MemoryLedger(store, "0xa", latency_seconds=0.05),
                             clock=FakeClock())

        async def play():
            await runner.wait_for_start()
            runner.tick(T0 + 70_000)
            runner.tick(T0 + 70_000)
            return await runner.wait_for_submission()

        status = asyncio.run(play())

        assert status is SubmissionStatus.SUBMITTED
        assert runner.submitter.status is SubmissionStatus.SUBMITTED
        assert [w for w in store.writes if w[0] == "submit_score"] == [("submit_score", sid, "0xa")]

    def test_host_never_submits(self):
        store, sid = make_game()
        runner = make_runner(store, sid, account_id=HOST)

        async def play():
            await runner.wait_for_start()
            assert runner.is_host
            assert runner.select(0, T0 + 1_000) is None
            runner.tick(T0 + 3 * D)
            return await runner.wait_for_submission()

        assert asyncio.run(play()) is None
        assert not any(w[0] == "submit_score" for w in store.writes)

    def test_on_phase_called_on_changes_only(self):
        store, sid = make_game()
        runner = make_runner(store, sid)
        runner.on_phase = Mock()

        async def play():
            await runner.wait_for_start()
            runner.tick(T0)
            runner.tick(T0 + 1_000)
            runner.tick(T0 + 15_000)
            runner.tick(T0 + D)

        asyncio.run(play())

        phases = [c.args[0].phase for c in runner.on_phase.call_args_list]
        assert phases == [Phase.QUESTION, Phase.FEEDBACK, Phase.QUESTION]

    def test_select_uses_runner_clock(self):
        store, sid = make_game()
        clock = FakeClock(T0 + 4_000)
        runner = make_runner(store, sid, clock=clock)

        async def play():
            await runner.wait_for_start()
            runner.tick()
            return runner.select(1)

        answer = asyncio.run(play())
        assert answer.time_taken_ms == 4_000

    def test_current_round_offset(self):
        store, sid = make_game()
        runner = make_runner(store, sid)

        async def play():
            await runner.wait_for_start()
            runner.tick(T0 + D + 500)
            return runner.current_round()

        current = asyncio.run(play())
        assert current.index == 1
        assert current.start_offset_ms == D


class TestLeaderboardAndFinalize:
    """poll_leaderboard() and finalize()."""

    def test_host_finalizes_winner(self):
        store, sid = make_game()
        store.submit_score(sid, "0xa", 300)
        store.submit_score(sid, "0xb", 900)
        runner = make_runner(store, sid, account_id=HOST)
        runner.on_standing = Mock()

        async def host():
            await runner.wait_for_start()
            runner.tick(T0 + 3 * D)
            standing = await runner.poll_leaderboard()
            status = await runner.finalize()
            return standing, status

        standing, status = asyncio.run(host())

        assert [e.player_id for e in standing] == ["0xb", "0xa"]
        runner.on_standing.assert_called_once_with(standing)
        assert status is FinalizeStatus.FINALIZED
        assert store.winners(sid) == ["0xb"]
        assert runner.finalized

    def test_player_cannot_finalize(self):
        store, sid = make_game()
        runner = make_runner(store, sid)

        async def player():
            await runner.wait_for_start()
            await runner.poll_leaderboard()
            return await runner.finalize()

        assert asyncio.run(player()) is FinalizeStatus.NOT_HOST
        assert store.winners(sid) == []

    def test_finalize_before_bind(self):
        store, sid = make_game()
        runner = make_runner(store, sid, account_id=HOST)
        assert asyncio.run(runner.finalize()) is FinalizeStatus.NO_STANDING


class TestRun:
    """The full asyncio loop."""

    def test_run_until_finalized(self):
        store, sid = make_game(start=False)
        clock = FakeClock(T0 + 3 * D + 1)
        runner = make_runner(store, sid, clock=clock)

        async def host_side():
            await asyncio.sleep(0.03)
            store.start_session(sid, HOST)
            while not any(w[0] == "submit_score" for w in store.writes):
                await asyncio.sleep(0.01)
            store.finalize(sid, HOST, ["0xa"])

        async def play():
            await asyncio.wait_for(asyncio.gather(runner.run(), host_side()), timeout=5)

        asyncio.run(play())

        assert runner.finalized
        assert runner.submitter.status is SubmissionStatus.SUBMITTED
        assert store.score_entry(store.score_table_id(sid), "0xa") == 0

    def test_stop_mid_round(self):
        store, sid = make_game()
        runner = make_runner(store, sid, clock=FakeClock(T0 + 1_000))

        async def play():
            async def stopper():
                await asyncio.sleep(0.05)
                runner.stop()

            await asyncio.wait_for(asyncio.gather(runner.run(), stopper()), timeout=5)

        asyncio.run(play())

        assert runner.state.phase is Phase.QUESTION
        assert runner.submitter.submitted is False

    def test_unexpected_submission_error_does_not_escape_run(self):
        store, sid = make_game()
        runner = make_runner(store, sid, clock=FakeClock(T0 + 3 * D))

        async def play():
            await runner.wait_for_start()
            runner.submitter.send = AsyncMock(side_effect=RuntimeError("ledger client bug"))

            async def stopper():
                await asyncio.sleep(0.05)
                runner.stop()

            await asyncio.wait_for(asyncio.gather(runner.run(), stopper()), timeout=5)

        asyncio.run(play())

        runner.submitter.send.assert_awaited_once()
        assert runner.submitter.submitted
