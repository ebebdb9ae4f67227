# Area: Ledger
"""
quiz_sync.memory_ledger — In-process ledger
===========================================

A ready-to-use ledger that lives in memory. One MemoryLedgerStore plays
the shared ledger; each client gets its own MemoryLedger bound to an
account, so several simulated clients can share one timeline.

The store applies the guards the real ledger contract enforces: one
score per (session, player), only the host starts or finalizes, and a
session is finalized once.

Usage:
    store = MemoryLedgerStore()
    host = MemoryLedger(store, "0xhost")
    session_id = await host.write_create_session(prize=10, round_count=3,
                                                 round_duration_ms=20000)
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from ._core.clock import wall_clock_ms
from .errors import LedgerRejectedError, NotFoundError
from .ledger import DEFAULT_LEDGER_TIMEOUT_SECONDS, Ledger
from .types import SessionState, same_player

logger = logging.getLogger("quiz_sync.memory_ledger")


@dataclass
class _StoredSession:
    host: str
    prize: int
    round_count: int
    round_duration_ms: int
    players: List[str] = field(default_factory=list)
    state: SessionState = SessionState.WAITING
    start_timestamp_ms: int = 0
    winners: List[str] = field(default_factory=list)


class MemoryLedgerStore:
    """
    Shared in-memory ledger state.

    Attributes:
        writes: Every accepted write as (operation, session_id, account_id)
    """

    def __init__(self, clock: Callable[[], int] = wall_clock_ms) -> None:
        self._clock = clock
        self._sessions: Dict[str, _StoredSession] = {}
        self._scores: Dict[str, Dict[str, int]] = {}
        self._ids = itertools.count(1)
        self.writes: List[Tuple[str, str, str]] = []

    @staticmethod
    def score_table_id(session_id: str) -> str:
        return f"{session_id}:scores"

    def create_session(self, host: str, prize: int, round_count: int, round_duration_ms: int) -> str:
        session_id = f"0x{next(self._ids):04x}"
        self._sessions[session_id] = _StoredSession(
            host=host, prize=prize, round_count=round_count, round_duration_ms=round_duration_ms,
        )
        self._scores[self.score_table_id(session_id)] = {}
        self.writes.append(("create_session", session_id, host))
        logger.info("Session %s created by %s", session_id, host)
        return session_id

    def join_session(self, session_id: str, player: str) -> None:
        stored = self._get(session_id, "join_session")
        if stored.state is not SessionState.WAITING:
            raise LedgerRejectedError("join_session", session_id, "session already started")
        if any(same_player(p, player) for p in stored.players):
            raise LedgerRejectedError("join_session", session_id, f"{player} already joined")
        stored.players.append(player)
        self.writes.append(("join_session", session_id, player))

    def start_session(self, session_id: str, caller: str) -> None:
        stored = self._get(session_id, "start_session")
        if not same_player(stored.host, caller):
            raise LedgerRejectedError("start_session", session_id, "only the host can start")
        if stored.state is not SessionState.WAITING:
            raise LedgerRejectedError("start_session", session_id, "session already started")
        stored.state = SessionState.ACTIVE
        stored.start_timestamp_ms = self._clock()
        self.writes.append(("start_session", session_id, caller))
        logger.info("Session %s started at %d", session_id, stored.start_timestamp_ms)

    def submit_score(self, session_id: str, player: str, score: int) -> None:
        stored = self._get(session_id, "submit_score")
        if not any(same_player(p, player) for p in stored.players):
            raise LedgerRejectedError("submit_score", session_id, f"{player} is not in the session")
        table = self._scores[self.score_table_id(session_id)]
        if player.lower() in table:
            raise LedgerRejectedError("submit_score", session_id, f"{player} already submitted")
        table[player.lower()] = score
        self.writes.append(("submit_score", session_id, player))

    def finalize(self, session_id: str, caller: str, winners: List[str]) -> None:
        stored = self._get(session_id, "finalize")
        if not same_player(stored.host, caller):
            raise LedgerRejectedError("finalize", session_id, "only the host can finalize")
        if stored.state is SessionState.ENDED:
            raise LedgerRejectedError("finalize", session_id, "session already finalized")
        stored.state = SessionState.ENDED
        stored.winners = list(winners)
        self.writes.append(("finalize", session_id, caller))
        logger.info("Session %s finalized, winners: %s", session_id, winners)

    def session_object(self, session_id: str) -> Dict[str, Any]:
        stored = self._get(session_id, "read_session")
        return {
            "players": list(stored.players),
            "host": stored.host,
            "state": stored.state.value,
            "start_timestamp_ms": stored.start_timestamp_ms,
            "score_table_id": self.score_table_id(session_id),
            "prize": stored.prize,
        }

    def score_entry(self, score_table_id: str, player: str) -> int:
        table = self._scores.get(score_table_id)
        if table is None or player.lower() not in table:
            raise NotFoundError("read_score_entry", None, f"no entry for {player} in {score_table_id}")
        return table[player.lower()]

    def winners(self, session_id: str) -> List[str]:
        return list(self._get(session_id, "read_session").winners)

    def _get(self, session_id: str, operation: str) -> _StoredSession:
        stored = self._sessions.get(session_id)
        if stored is None:
            raise NotFoundError(operation, session_id, "no such session")
        return stored


class MemoryLedger(Ledger):
    """Ledger client for a MemoryLedgerStore, acting as one account."""

    def __init__(
        self,
        store: MemoryLedgerStore,
        account_id: str,
        latency_seconds: float = 0.0,
        timeout_seconds: float = DEFAULT_LEDGER_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(account_id=account_id, timeout_seconds=timeout_seconds)
        self.store = store
        self.latency_seconds = latency_seconds

    async def _settle(self) -> None:
        # Yield to the loop so callers see the same suspension as a real request
        await asyncio.sleep(self.latency_seconds)

    async def _fetch_session(self, session_id: str) -> Any:
        await self._settle()
        return self.store.session_object(session_id)

    async def _fetch_score_entry(self, score_table_id: str, player_id: str) -> Any:
        await self._settle()
        return self.store.score_entry(score_table_id, player_id)

    async def _send_submit_score(self, session_id: str, score: int) -> None:
        await self._settle()
        self.store.submit_score(session_id, self.account_id, score)

    async def _send_finalize(self, session_id: str, winners: list) -> None:
        await self._settle()
        self.store.finalize(session_id, self.account_id, winners)

    async def _send_start_session(self, session_id: str) -> None:
        await self._settle()
        self.store.start_session(session_id, self.account_id)

    async def _send_join_session(self, session_id: str) -> None:
        await self._settle()
        self.store.join_session(session_id, self.account_id)

    async def _send_create_session(
        self, prize: int, round_count: int, round_duration_ms: int
    ) -> str:
        await self._settle()
        return self.store.create_session(self.account_id, prize, round_count, round_duration_ms)
