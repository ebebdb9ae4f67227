# Area: Core
"""
quiz_sync._core.finalizer — Host reward finalization
====================================================

The host names the top `winner_count` players of the latest standing as
winners in a single ledger write. Nothing here prevents a second write
if the host asks twice; the ledger's own guard decides.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..errors import LedgerError
from ..ledger import Ledger
from ..types import FinalizeStatus
from .._shared.notices import NoticeBoard
from .leaderboard import LeaderboardAggregator

logger = logging.getLogger("quiz_sync.finalizer")


class RewardFinalizer:
    """
    Host-only winner selection.

    Attributes:
        winners: Player ids sent in the last successful finalize
    """

    def __init__(
        self,
        ledger: Ledger,
        aggregator: LeaderboardAggregator,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        self.ledger = ledger
        self.aggregator = aggregator
        self.notices = notices or NoticeBoard()
        self.winners: List[str] = []

    def select_winners(self, winner_count: int) -> List[str]:
        return [entry.player_id for entry in self.aggregator.latest[:max(0, winner_count)]]

    async def finalize(self, winner_count: int) -> FinalizeStatus:
        session = self.aggregator.session
        if not session.is_host(self.ledger.account_id):
            logger.warning("[%s] %s is not the host, finalize refused",
                           session.session_id, self.ledger.account_id)
            return FinalizeStatus.NOT_HOST

        winners = self.select_winners(winner_count)
        if not winners:
            self.notices.info("No standing yet, nothing to finalize", "finalize")
            return FinalizeStatus.NO_STANDING

        logger.info("[%s] Finalizing with winners %s", session.session_id, winners)
        try:
            await self.ledger.write_finalize(session.session_id, winners)
        except LedgerError as e:
            self.notices.failure("Finalize failed; try again", e)
            return FinalizeStatus.FAILED

        self.winners = winners
        self.aggregator.mark_finalized()
        self.notices.success(f"Rewards sent to {len(winners)} winner(s)", "finalize")
        return FinalizeStatus.FINALIZED
