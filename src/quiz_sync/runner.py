# Area: Runner
"""
quiz_sync.runner — Round runner
===============================

Drives one client through one session on an asyncio loop:

  1. wait in the lobby until the session has a start timestamp
  2. tick every second: clock → phase controller → score capture
  3. on reaching the leaderboard, submit the local score once
  4. poll the score table every two seconds until the session is
     finalized or the runner is stopped

Answers come in through `select()`, which never waits. Ledger calls run
as separate tasks so a slow request never delays a tick.

Usage:
    runner = RoundRunner(config={"session_id": sid, "account_id": me}, ledger=ledger)
    await runner.run()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from ._core.capture import ScoreCapture
from ._core.clock import wall_clock_ms
from ._core.finalizer import RewardFinalizer
from ._core.leaderboard import LeaderboardAggregator
from ._core.lobby import LobbyWatcher
from ._core.phase import PhaseController
from ._core.submitter import ScoreSubmitter
from ._runner_config import resolve_config
from ._shared.notices import NoticeBoard, NoticeHandler
from .errors import LedgerError
from .ledger import Ledger
from .questions import DEFAULT_QUESTIONS
from .types import (
    FinalizeStatus,
    LeaderboardEntry,
    Phase,
    PhaseState,
    PlayerAnswer,
    Question,
    Round,
    Session,
    SubmissionStatus,
)

logger = logging.getLogger("quiz_sync.runner")


class RoundRunner:
    """
    One client's view of one session.

    The capture, phase controller, submitter, aggregator and finalizer
    exist once the session has been read (`bind`).
    """

    def __init__(
        self,
        config: Dict[str, Any],
        ledger: Ledger,
        questions: Optional[Sequence[Question]] = None,
        clock: Callable[[], int] = wall_clock_ms,
        notice_handler: Optional[NoticeHandler] = None,
        on_phase: Optional[Callable[[PhaseState], None]] = None,
        on_standing: Optional[Callable[[List[LeaderboardEntry]], None]] = None,
    ) -> None:
        self.config = resolve_config(config)
        self.ledger = ledger
        self.session_id: str = self.config["session_id"]
        self.account_id: str = self.config["account_id"]
        self.questions: List[Question] = list(questions or DEFAULT_QUESTIONS)
        self.round_count: int = self.config["round_count"] or len(self.questions)
        if self.round_count > len(self.questions):
            raise ValueError(
                f"round_count {self.round_count} exceeds the {len(self.questions)} available questions"
            )
        self.clock = clock
        self.notices = NoticeBoard(notice_handler)
        self.on_phase = on_phase
        self.on_standing = on_standing

        self.session: Optional[Session] = None
        self.capture: Optional[ScoreCapture] = None
        self.controller: Optional[PhaseController] = None
        self.submitter: Optional[ScoreSubmitter] = None
        self.aggregator: Optional[LeaderboardAggregator] = None
        self.finalizer: Optional[RewardFinalizer] = None

        self._tick_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None
        self._submission_task: Optional[asyncio.Task] = None
        self._stopping: Optional[asyncio.Event] = None

    # ── Session ──────────────────────────────────────────────────

    @property
    def is_host(self) -> bool:
        return self.session is not None and self.session.is_host(self.account_id)

    @property
    def state(self) -> PhaseState:
        if self.controller is None:
            return PhaseState(Phase.UNSTARTED)
        return self.controller.state

    def bind(self, session: Session) -> None:
        """Build the per-session components from the first snapshot."""
        if self.controller is not None:
            self.controller.update_session(session)
            self.session = self.controller.session
            return

        self.session = session
        is_host = session.is_host(self.account_id)
        self.capture = ScoreCapture(
            player_id=self.account_id,
            questions=self.questions[: self.round_count],
            feedback_window_ms=self.config["feedback_window_sec"] * 1000,
            is_host=is_host,
        )
        self.controller = PhaseController(
            self.capture, self.config["feedback_window_sec"] * 1000, session,
        )
        self.submitter = ScoreSubmitter(self.ledger, self.session_id, is_host, self.notices)
        self.aggregator = LeaderboardAggregator(self.ledger, session, self.notices)
        self.finalizer = RewardFinalizer(self.ledger, self.aggregator, self.notices)
        logger.info("[%s] Bound as %s (%s)", self.session_id, self.account_id,
                    "host" if is_host else "player")

    async def join(self) -> bool:
        try:
            await self.ledger.write_join_session(self.session_id)
        except LedgerError as e:
            self.notices.failure("Could not join session", e)
            return False
        self.notices.success("Joined session", "join_session")
        return True

    async def start(self) -> bool:
        """Host only: activate the session, fixing its start timestamp."""
        try:
            await self.ledger.write_start_session(self.session_id)
        except LedgerError as e:
            self.notices.failure("Failed to start game", e)
            return False
        self.notices.success("Game started", "start_session")
        return True

    async def wait_for_start(self) -> Session:
        watcher = LobbyWatcher(
            self.ledger,
            self.session_id,
            self.config["round_duration_ms"],
            self.round_count,
            poll_seconds=self.config["lobby_poll_seconds"],
            notices=self.notices,
        )
        session = await watcher.wait_until_started()
        self.bind(session)
        return session

    # ── Round play ───────────────────────────────────────────────

    def tick(self, now_ms: Optional[int] = None) -> PhaseState:
        """
        Evaluate the phase once. On the first terminal tick the score
        submission is dispatched as a task; later ticks cannot repeat it.
        Must be called from the running event loop.
        """
        if self.controller is None:
            return self.state

        previous = self.controller.state
        state = self.controller.tick(self.clock() if now_ms is None else now_ms)

        if self._submission_task is None and self.submitter.begin(state):
            self._submission_task = asyncio.get_running_loop().create_task(
                self.submitter.send(self.capture.cumulative_score)
            )
        changed = (state.phase, state.round_index) != (previous.phase, previous.round_index)
        if self.on_phase is not None and changed:
            self.on_phase(state)
        return state

    def select(self, choice_index: int, now_ms: Optional[int] = None) -> Optional[PlayerAnswer]:
        """Answer the current round. Ignored if not allowed right now."""
        if self.capture is None or self.session is None:
            return None
        return self.capture.select(
            self.session, choice_index, self.clock() if now_ms is None else now_ms,
        )

    def current_round(self) -> Optional[Round]:
        state = self.state
        if state.round_index is None or self.session is None:
            return None
        return Round(
            index=state.round_index,
            question=self.questions[state.round_index],
            start_offset_ms=state.round_index * self.session.round_duration_ms,
        )

    def current_question(self) -> Optional[Question]:
        current = self.current_round()
        return current.question if current else None

    @property
    def cumulative_score(self) -> int:
        return self.capture.cumulative_score if self.capture else 0

    async def wait_for_submission(self) -> Optional[SubmissionStatus]:
        if self._submission_task is None:
            return None
        return await self._submission_task

    # ── Leaderboard ──────────────────────────────────────────────

    async def poll_leaderboard(self) -> List[LeaderboardEntry]:
        if self.aggregator is None:
            return []
        standing = await self.aggregator.poll()
        if self.on_standing is not None:
            self.on_standing(standing)
        return standing

    async def finalize(self, winner_count: Optional[int] = None) -> FinalizeStatus:
        if self.finalizer is None:
            return FinalizeStatus.NO_STANDING
        count = winner_count or self.config["winner_count"]
        status = await self.finalizer.finalize(count)
        if status is FinalizeStatus.FINALIZED:
            self.stop()
        return status

    @property
    def finalized(self) -> bool:
        return self.aggregator is not None and self.aggregator.finalized

    # ── Loop ─────────────────────────────────────────────────────

    async def run(self) -> None:
        """Run until the session is finalized or `stop()` is called."""
        self._stopping = asyncio.Event()
        if self.session is None or not self.session.is_started:
            await self.wait_for_start()

        self._tick_task = asyncio.create_task(self._tick_loop())
        try:
            await self._stopping.wait()
        finally:
            await self._teardown()

    def stop(self) -> None:
        if self._stopping is not None:
            self._stopping.set()

    async def _tick_loop(self) -> None:
        interval = self.config["tick_interval_seconds"]
        while True:
            try:
                state = self.tick()
            except Exception:
                logger.exception("[%s] Tick failed", self.session_id)
                state = self.state
            if state.is_terminal:
                self._poll_task = asyncio.create_task(self._poll_loop())
                return
            await asyncio.sleep(interval)

    async def _poll_loop(self) -> None:
        interval = self.config["leaderboard_poll_seconds"]
        while not self.finalized:
            try:
                await self.poll_leaderboard()
            except Exception:
                logger.exception("[%s] Leaderboard poll failed", self.session_id)
            if self.finalized:
                break
            await asyncio.sleep(interval)
        logger.info("[%s] Session finalized, leaderboard polling stopped", self.session_id)
        self.stop()

    async def _teardown(self) -> None:
        for task in (self._tick_task, self._poll_task):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        # An initiated submission is never cancelled
        if self._submission_task is not None:
            try:
                await asyncio.shield(self._submission_task)
            except Exception:
                logger.exception("[%s] Score submission failed", self.session_id)
        logger.info("[%s] Runner stopped", self.session_id)
