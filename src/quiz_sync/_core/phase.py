# Area: Core
"""
quiz_sync._core.phase — Phase controller
========================================

Derives the local phase from the round clock on every tick:

    UNSTARTED            no start timestamp yet
    QUESTION(r)          round r running, answers accepted
    FEEDBACK(r)          last FEEDBACK_WINDOW_SEC of round r
    LEADERBOARD          round index past the last round (terminal)

The controller only computes local state. It never writes to the ledger;
two clients reading the same start timestamp at the same moment derive
the same (round, phase) pair.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..types import Phase, PhaseState, Session
from .capture import ScoreCapture
from .clock import read_round_clock

logger = logging.getLogger("quiz_sync.phase")

DEFAULT_FEEDBACK_WINDOW_SEC = 5


class PhaseController:
    """
    Tick-driven phase state machine for one session instance.

    Attributes:
        state: The PhaseState derived on the last tick
        last_evaluated_round: Highest round whose score has been credited
    """

    def __init__(
        self,
        capture: ScoreCapture,
        feedback_window_ms: int = DEFAULT_FEEDBACK_WINDOW_SEC * 1000,
        session: Optional[Session] = None,
    ) -> None:
        self.capture = capture
        self.feedback_window_ms = feedback_window_ms
        self.session: Optional[Session] = None
        self.state = PhaseState(Phase.UNSTARTED)
        self.last_evaluated_round = -1
        self._observed_round: Optional[int] = None
        if session is not None:
            self.update_session(session)

    def update_session(self, session: Session) -> None:
        """
        Adopt a fresher session snapshot.

        The start timestamp is fixed once known; a snapshot carrying a
        different one is ignored for timing purposes.
        """
        current = self.session
        if (
            current is not None
            and current.start_timestamp_ms is not None
            and session.start_timestamp_ms != current.start_timestamp_ms
        ):
            logger.warning(
                "[%s] Ignoring start timestamp change %s → %s",
                session.session_id, current.start_timestamp_ms, session.start_timestamp_ms,
            )
            return
        self.session = session

    def tick(self, now_ms: int) -> PhaseState:
        """Recompute the phase for `now_ms` and return it."""
        session = self.session
        if session is None or session.start_timestamp_ms is None:
            return self.state
        if self.state.is_terminal:
            return self.state

        reading = read_round_clock(
            session.start_timestamp_ms, now_ms,
            session.round_duration_ms, session.round_count,
        )

        if reading.terminal:
            self._evaluate_through(session.round_count - 1)
            return self._advance(PhaseState(Phase.LEADERBOARD))

        round_index = reading.round_index
        if round_index != self._observed_round:
            # Rounds whose feedback window was never observed still count once
            self._evaluate_through(round_index - 1)
            self.capture.start_round(round_index)
            self._observed_round = round_index

        if reading.remaining_ms <= self.feedback_window_ms:
            self._evaluate_through(round_index)
            phase = Phase.FEEDBACK
        else:
            phase = Phase.QUESTION
        return self._advance(PhaseState(phase, round_index, reading.remaining_ms))

    def _evaluate_through(self, round_index: int) -> None:
        for r in range(self.last_evaluated_round + 1, round_index + 1):
            self.capture.accumulate(r)
            self.last_evaluated_round = r

    def _advance(self, new_state: PhaseState) -> PhaseState:
        old = self.state
        if old.phase != new_state.phase or old.round_index != new_state.round_index:
            logger.info(
                "Phase: %s → %s",
                _describe(old), _describe(new_state),
            )
        self.state = new_state
        return new_state


def _describe(state: PhaseState) -> str:
    if state.round_index is None:
        return state.phase.value
    return f"{state.phase.value}({state.round_index})"
