# Area: Core
"""
quiz_sync._core.leaderboard — Leaderboard reconciliation
========================================================

Merges the session's player list with the ledger's score table. A
player without an entry has simply not submitted yet and stands at 0.
Standings are sorted by score, highest first; equal scores keep the
players' join order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Sequence

from ..errors import LedgerError, NotFoundError
from ..ledger import Ledger
from ..types import LeaderboardEntry, Session, SessionState
from .._shared.notices import NoticeBoard

logger = logging.getLogger("quiz_sync.leaderboard")


def build_standing(players: Sequence[str], scores: Dict[str, int]) -> List[LeaderboardEntry]:
    """Sort players by score (descending), join order breaking ties."""
    entries = [LeaderboardEntry(p, scores.get(p, 0)) for p in players]
    return sorted(entries, key=lambda entry: -entry.score)


class LeaderboardAggregator:
    """
    Polls the remote score table for one session.

    Attributes:
        session: Latest session snapshot (player list source)
        latest: Standing produced by the last poll
        finalized: True once the ledger reports the session ENDED
    """

    def __init__(
        self,
        ledger: Ledger,
        session: Session,
        notices: Optional[NoticeBoard] = None,
    ) -> None:
        self.ledger = ledger
        self.session = session
        self.notices = notices or NoticeBoard()
        self.latest: List[LeaderboardEntry] = []
        self.finalized = session.state is SessionState.ENDED

    def mark_finalized(self) -> None:
        self.finalized = True

    async def refresh_session(self) -> Session:
        """Re-read the session; keep the cached snapshot if that fails."""
        try:
            record = await self.ledger.read_session(self.session.session_id)
        except LedgerError as e:
            logger.warning("[%s] Session refresh failed, using cached players: %s",
                           self.session.session_id, e)
            return self.session

        self.session = record.to_session(
            self.session.session_id,
            self.session.round_duration_ms,
            self.session.round_count,
        )
        if self.session.state is SessionState.ENDED and not self.finalized:
            logger.info("[%s] Session finalized on the ledger", self.session.session_id)
            self.finalized = True
        return self.session

    async def poll(self, refresh: bool = True) -> List[LeaderboardEntry]:
        """Read every player's score entry and rebuild the standing."""
        if refresh:
            await self.refresh_session()

        players = list(self.session.players)
        results = await asyncio.gather(*(self._score_of(p) for p in players))
        scores = {player: score for player, (score, _) in zip(players, results)}
        failures = [player for player, (_, ok) in zip(players, results) if not ok]

        if failures:
            self.notices.info(f"Could not read {len(failures)} score(s); showing 0", "read_score_entry")

        self.latest = build_standing(players, scores)
        logger.debug("[%s] Standing: %s", self.session.session_id,
                     [(e.player_id, e.score) for e in self.latest])
        return self.latest

    async def _score_of(self, player_id: str):
        """Return (score, read_ok). A missing entry is a normal 0."""
        try:
            score = await self.ledger.read_score_entry(self.session.score_table_id, player_id)
        except NotFoundError:
            return 0, True
        except LedgerError as e:
            logger.warning("Score read for %s failed: %s", player_id, e)
            return 0, False
        return score, True
