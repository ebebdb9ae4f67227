# Area: Ledger
"""
quiz_sync.http_ledger — REST gateway ledger client
==================================================

Talks to an HTTP gateway in front of the ledger. Requests are made with
`requests` on a worker thread so the event loop (and the round tick)
never waits on the network.

    GET  {base}/sessions/{id}
    GET  {base}/score-tables/{table}/entries/{player}
    POST {base}/sessions
    POST {base}/sessions/{id}/join | start | scores | finalize

Usage:
    ledger = HttpLedger("https://ledger.example/api", account_id="0xabc...")
    record = await ledger.read_session("0x51...")
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from .errors import (
    LedgerRejectedError,
    LedgerTimeoutError,
    MalformedDataError,
    NetworkError,
    NotFoundError,
)
from .ledger import DEFAULT_LEDGER_TIMEOUT_SECONDS, Ledger

logger = logging.getLogger("quiz_sync.http_ledger")


class HttpLedger(Ledger):
    """Ledger client for the REST gateway."""

    def __init__(
        self,
        base_url: str,
        account_id: str,
        api_token: Optional[str] = None,
        timeout_seconds: float = DEFAULT_LEDGER_TIMEOUT_SECONDS,
        http: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(account_id=account_id, timeout_seconds=timeout_seconds)
        if not base_url:
            raise ValueError("HttpLedger requires a base_url")
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self._http = http or requests.Session()

    def _headers(self) -> Dict[str, str]:
        h = {
            "Content-Type": "application/json",
            "X-Account-Id": self.account_id,
        }
        if self.api_token:
            h["Authorization"] = f"Bearer {self.api_token}"
        return h

    # ── Transport ────────────────────────────────────────────────

    async def _fetch_session(self, session_id: str) -> Any:
        return await self._request_async("GET", f"/sessions/{session_id}", "read_session", session_id)

    async def _fetch_score_entry(self, score_table_id: str, player_id: str) -> Any:
        return await self._request_async(
            "GET",
            f"/score-tables/{score_table_id}/entries/{player_id}",
            "read_score_entry",
            None,
        )

    async def _send_submit_score(self, session_id: str, score: int) -> None:
        await self._request_async(
            "POST", f"/sessions/{session_id}/scores", "submit_score", session_id,
            {"player_id": self.account_id, "score": score},
        )

    async def _send_finalize(self, session_id: str, winners: list) -> None:
        await self._request_async(
            "POST", f"/sessions/{session_id}/finalize", "finalize", session_id,
            {"winners": winners},
        )

    async def _send_start_session(self, session_id: str) -> None:
        await self._request_async("POST", f"/sessions/{session_id}/start", "start_session", session_id)

    async def _send_join_session(self, session_id: str) -> None:
        await self._request_async(
            "POST", f"/sessions/{session_id}/join", "join_session", session_id,
            {"player_id": self.account_id},
        )

    async def _send_create_session(self, prize: int, round_count: int, round_duration_ms: int) -> str:
        payload = {
            "host": self.account_id,
            "prize": prize,
            "round_count": round_count,
            "round_duration_ms": round_duration_ms,
        }
        data = await self._request_async("POST", "/sessions", "create_session", None, payload)
        session_id = data.get("session_id") if isinstance(data, dict) else None
        if not session_id:
            raise MalformedDataError(
                operation="create_session",
                session_id=None,
                validation_errors=["session_id: missing from response"],
                raw_payload=data,
            )
        return session_id

    async def _request_async(
        self,
        method: str,
        path: str,
        operation: str,
        session_id: Optional[str],
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await asyncio.to_thread(self._request, method, path, operation, session_id, payload)

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        session_id: Optional[str],
        payload: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self._http.request(
                method, url, json=payload, headers=self._headers(), timeout=self.timeout_seconds,
            )
        except requests.Timeout:
            raise LedgerTimeoutError(operation, session_id, self.timeout_seconds, payload) from None
        except requests.RequestException as e:
            raise NetworkError(operation, session_id, str(e), payload) from None

        if resp.status_code == 404:
            raise NotFoundError(operation, session_id, f"{method} {path} not found", payload)
        if resp.status_code >= 500:
            raise NetworkError(operation, session_id, f"HTTP {resp.status_code}: {resp.text}", payload)
        if resp.status_code >= 400:
            raise LedgerRejectedError(operation, session_id, f"HTTP {resp.status_code}: {resp.text}", payload)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise MalformedDataError(
                operation=operation,
                session_id=session_id,
                validation_errors=["response body is not JSON"],
                raw_payload=resp.text,
            ) from None
