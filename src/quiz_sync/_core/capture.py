# Area: Core
"""
quiz_sync._core.capture — Answer capture and score locking
==========================================================

Records the local player's single answer per round. The score is
computed from the exact click time and locked into the answer; it is
only added to the cumulative score later, once per round, when the
phase controller reaches that round's feedback window and the answer
turns out to be correct.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from ..types import PlayerAnswer, Question, Session
from .clock import read_round_clock, round_start_ms
from .scoring import score_for

logger = logging.getLogger("quiz_sync.capture")


class ScoreCapture:
    """
    Per-client answer lock and cumulative score for one player.

    Attributes:
        player_id: The local player's ledger address
        is_host: Hosts are spectators; their selections are ignored
        cumulative_score: Sum of locked scores of correctly answered rounds
    """

    def __init__(
        self,
        player_id: str,
        questions: Sequence[Question],
        feedback_window_ms: int,
        is_host: bool = False,
    ) -> None:
        self.player_id = player_id
        self.is_host = is_host
        self.cumulative_score = 0
        self._questions = list(questions)
        self._feedback_window_ms = feedback_window_ms
        self._answers: Dict[int, PlayerAnswer] = {}
        self._round_points: Dict[int, int] = {}
        self._current_round: Optional[int] = None

    @property
    def current_round(self) -> Optional[int]:
        return self._current_round

    def start_round(self, round_index: int) -> None:
        """Open the answer lock for a newly observed round."""
        self._current_round = round_index
        logger.debug("Answer lock open for round %d", round_index)

    def answer_for(self, round_index: int) -> Optional[PlayerAnswer]:
        return self._answers.get(round_index)

    def has_answered(self, round_index: int) -> bool:
        return round_index in self._answers

    def points_for(self, round_index: int) -> Optional[int]:
        """Points credited for a round, or None if not yet evaluated."""
        return self._round_points.get(round_index)

    def select(self, session: Session, choice_index: int, now_ms: int) -> Optional[PlayerAnswer]:
        """
        Record the player's answer for the round running at `now_ms`.

        Returns the new PlayerAnswer, or None when the selection is ignored:
        the player is the host, the session has not started or is over,
        the round's feedback window has begun, this round already has
        an answer, or `choice_index` is not one of the round's options.
        """
        if self.is_host:
            logger.debug("Host selection ignored")
            return None
        if session.start_timestamp_ms is None:
            return None

        reading = read_round_clock(
            session.start_timestamp_ms, now_ms,
            session.round_duration_ms, session.round_count,
        )
        if reading.terminal:
            return None
        if reading.remaining_ms <= self._feedback_window_ms:
            logger.debug("Selection in feedback window of round %d ignored", reading.round_index)
            return None
        if reading.round_index in self._answers:
            logger.debug("Round %d already answered, ignoring", reading.round_index)
            return None
        if not self._is_valid_choice(reading.round_index, choice_index):
            logger.debug("Choice %d out of range for round %d, ignoring",
                         choice_index, reading.round_index)
            return None

        started_at = round_start_ms(
            session.start_timestamp_ms, reading.round_index, session.round_duration_ms
        )
        time_taken = now_ms - started_at
        answer = PlayerAnswer(
            player_id=self.player_id,
            round_index=reading.round_index,
            choice_index=choice_index,
            click_timestamp_ms=now_ms,
            time_taken_ms=time_taken,
            locked_score=score_for(time_taken),
        )
        self._answers[reading.round_index] = answer
        logger.info(
            "Round %d: choice %d locked after %dms (worth %d if correct)",
            answer.round_index, choice_index, time_taken, answer.locked_score,
        )
        return answer

    def accumulate(self, round_index: int) -> int:
        """
        Credit the locked score of `round_index` if its answer was correct.

        Uses the score captured at click time. Returns the points added.
        """
        if round_index in self._round_points:
            return 0

        answer = self._answers.get(round_index)
        points = 0
        if answer is not None and self._is_correct(answer):
            points = answer.locked_score
        self._round_points[round_index] = points
        self.cumulative_score += points

        logger.info(
            "Round %d evaluated: +%d (total %d)",
            round_index, points, self.cumulative_score,
        )
        return points

    def _is_valid_choice(self, round_index: int, choice_index: int) -> bool:
        if round_index >= len(self._questions):
            return False
        return 0 <= choice_index < len(self._questions[round_index].options)

    def _is_correct(self, answer: PlayerAnswer) -> bool:
        if answer.round_index >= len(self._questions):
            return False
        return answer.choice_index == self._questions[answer.round_index].correct
