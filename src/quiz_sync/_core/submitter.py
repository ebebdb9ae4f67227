# Area: Core
"""
quiz_sync._core.submitter — Final score submission
==================================================

Writes the local player's cumulative score to the ledger once, when the
session reaches its terminal phase. The guard flag is set before the
write is dispatched, so re-evaluating the terminal condition on later
ticks can never produce a second write, even while the first is still
in flight. A failed write is reported and not repeated.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import LedgerError
from ..ledger import Ledger
from ..types import PhaseState, SubmissionStatus
from .._shared.notices import NoticeBoard

logger = logging.getLogger("quiz_sync.submitter")


class ScoreSubmitter:
    """
    One-shot score submission for one session instance.

    Attributes:
        submitted: Guard flag; set once, never reset
        status: Outcome of the single write, None until it finishes
    """

    def __init__(
        self,
        ledger: Ledger,
        session_id: str,
        is_host: bool,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        self.ledger = ledger
        self.session_id = session_id
        self.is_host = is_host
        self.notices = notices or NoticeBoard()
        self.submitted = False
        self.status: Optional[SubmissionStatus] = None

    def should_submit(self, state: PhaseState) -> bool:
        return state.is_terminal and not self.is_host and not self.submitted

    async def submit_final(self, cumulative_score: int, state: PhaseState) -> SubmissionStatus:
        """Submit `cumulative_score` if this client may and has not yet."""
        if self.is_host:
            return SubmissionStatus.HOST_SPECTATOR
        if not state.is_terminal:
            return SubmissionStatus.NOT_TERMINAL
        if self.submitted:
            logger.debug("[%s] Submission already made, skipping", self.session_id)
            return SubmissionStatus.DUPLICATE

        self.submitted = True
        return await self.send(cumulative_score)

    def begin(self, state: PhaseState) -> bool:
        """
        Claim the single submission synchronously.

        Returns True exactly once, on the first terminal state; the caller
        must then dispatch `send()`.
        """
        if not self.should_submit(state):
            return False
        self.submitted = True
        return True

    async def send(self, cumulative_score: int) -> SubmissionStatus:
        """Issue the one score write claimed by `begin()` or `submit_final()`."""
        logger.info("[%s] Submitting final score %d", self.session_id, cumulative_score)
        try:
            await self.ledger.write_submit_score(self.session_id, cumulative_score)
        except LedgerError as e:
            self.status = SubmissionStatus.FAILED
            self.notices.failure("Score submission failed", e)
            return self.status

        self.status = SubmissionStatus.SUBMITTED
        self.notices.success(f"Score {cumulative_score} recorded", "submit_score")
        return self.status
