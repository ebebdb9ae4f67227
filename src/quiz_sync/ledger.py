# Area: Ledger
"""
quiz_sync.ledger — The ledger service boundary
==============================================

The ledger is the only thing clients share: it stores each session
(players, host, lifecycle state, start timestamp) and the per-session
score table. A Ledger instance is bound to one account, the way a
wallet signs every transaction it sends.

Subclasses implement the raw transport methods (`_fetch_*`, `_send_*`).
The public methods add the call deadline and payload validation, so
every implementation fails the same way:

    NetworkError         transport failed or timed out (LedgerTimeoutError)
    NotFoundError        session or score entry does not exist
    MalformedDataError   payload has the wrong shape
    LedgerRejectedError  the ledger refused a write

Implementations:
    HttpLedger    — REST gateway in front of the real ledger
    MemoryLedger  — in-process ledger for the offline demo and tests
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Optional, Sequence, TypeVar

from ._shared.deadline import with_deadline
from ._shared.schemas import SessionRecord, parse_score_entry, parse_session_record

logger = logging.getLogger("quiz_sync.ledger")

DEFAULT_LEDGER_TIMEOUT_SECONDS = 10.0

T = TypeVar("T")


class Ledger(ABC):
    """
    Asynchronous ledger client acting as `account_id`.

    Every read may be stale and every write is sent once; retrying is
    the caller's decision.
    """

    def __init__(
        self,
        account_id: str,
        timeout_seconds: float = DEFAULT_LEDGER_TIMEOUT_SECONDS,
    ) -> None:
        self.account_id = account_id
        self.timeout_seconds = timeout_seconds

    # ── Reads ────────────────────────────────────────────────────

    async def read_session(self, session_id: str) -> SessionRecord:
        raw = await self._call("read_session", session_id, self._fetch_session(session_id))
        return parse_session_record(raw, session_id)

    async def read_score_entry(self, score_table_id: str, player_id: str) -> int:
        raw = await self._call(
            "read_score_entry", None, self._fetch_score_entry(score_table_id, player_id)
        )
        return parse_score_entry(raw, score_table_id, player_id)

    # ── Writes ───────────────────────────────────────────────────

    async def write_submit_score(self, session_id: str, score: int) -> None:
        await self._call("submit_score", session_id, self._send_submit_score(session_id, score))

    async def write_finalize(self, session_id: str, winners: Sequence[str]) -> None:
        await self._call("finalize", session_id, self._send_finalize(session_id, list(winners)))

    async def write_start_session(self, session_id: str) -> None:
        await self._call("start_session", session_id, self._send_start_session(session_id))

    async def write_join_session(self, session_id: str) -> None:
        await self._call("join_session", session_id, self._send_join_session(session_id))

    async def write_create_session(
        self, prize: int, round_count: int, round_duration_ms: int
    ) -> str:
        """Create a new session hosted by this account and return its id."""
        return await self._call(
            "create_session",
            None,
            self._send_create_session(prize, round_count, round_duration_ms),
        )

    async def _call(self, operation: str, session_id: Optional[str], request: Awaitable[T]) -> T:
        logger.debug("→ %s session=%s as %s", operation, session_id, self.account_id)
        return await with_deadline(request, self.timeout_seconds, operation, session_id)

    # ── Transport (implemented by subclasses) ────────────────────

    @abstractmethod
    async def _fetch_session(self, session_id: str) -> Any:
        """Return the raw session object (a dict)."""

    @abstractmethod
    async def _fetch_score_entry(self, score_table_id: str, player_id: str) -> Any:
        """Return the raw score entry; raise NotFoundError if absent."""

    @abstractmethod
    async def _send_submit_score(self, session_id: str, score: int) -> None:
        ...

    @abstractmethod
    async def _send_finalize(self, session_id: str, winners: list) -> None:
        ...

    @abstractmethod
    async def _send_start_session(self, session_id: str) -> None:
        ...

    @abstractmethod
    async def _send_join_session(self, session_id: str) -> None:
        ...

    @abstractmethod
    async def _send_create_session(
        self, prize: int, round_count: int, round_duration_ms: int
    ) -> str:
        ...
