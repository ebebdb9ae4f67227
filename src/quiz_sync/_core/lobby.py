# Area: Core
"""
quiz_sync._core.lobby — Waiting for the host to start
=====================================================

Polls the session until the host's start transaction lands and the
start timestamp becomes available. Clients that open the game after it
started return on the first read and join mid-round.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..errors import LedgerError
from ..ledger import Ledger
from ..types import Session
from .._shared.notices import NoticeBoard

logger = logging.getLogger("quiz_sync.lobby")


class LobbyWatcher:
    """Repeatedly reads one session until it has a start timestamp."""

    def __init__(
        self,
        ledger: Ledger,
        session_id: str,
        round_duration_ms: int,
        round_count: int,
        poll_seconds: float = 2.0,
        notices: Optional[NoticeBoard] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.ledger = ledger
        self.session_id = session_id
        self.round_duration_ms = round_duration_ms
        self.round_count = round_count
        self.poll_seconds = poll_seconds
        self.notices = notices or NoticeBoard()
        self._sleep = sleep
        self.last_session: Optional[Session] = None

    async def check(self) -> Optional[Session]:
        """Read the session once. Returns None if the read failed."""
        try:
            record = await self.ledger.read_session(self.session_id)
        except LedgerError as e:
            self.notices.failure("Could not read session", e)
            return None
        session = record.to_session(self.session_id, self.round_duration_ms, self.round_count)
        if self.last_session is None or len(session.players) != len(self.last_session.players):
            logger.info("[%s] Lobby: %d player(s), state %s",
                        self.session_id, len(session.players), session.state.name)
        self.last_session = session
        return session

    async def wait_until_started(self) -> Session:
        while True:
            session = await self.check()
            if session is not None and session.is_started:
                logger.info("[%s] Session started at %d", self.session_id, session.start_timestamp_ms)
                return session
            await self._sleep(self.poll_seconds)
