# Area: Shared
"""
quiz_sync._shared.schemas — Ledger payload validation
=====================================================

Pydantic models for the objects the ledger returns. A payload that does
not validate is reported as MalformedDataError carrying one line per
pydantic error, so callers can fall back to safe defaults.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import MalformedDataError
from ..types import Session, SessionState


class SessionRecord(BaseModel):
    """Session object as stored on the ledger."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    players: List[str]
    host_id: str = Field(alias="host", min_length=1)
    state: SessionState
    start_timestamp_ms: Optional[int] = None
    score_table_id: str = Field(min_length=1)
    prize: int = Field(default=0, ge=0)

    @field_validator("players")
    @classmethod
    def _unique_players(cls, players: List[str]) -> List[str]:
        seen = set()
        unique = []
        for player in players:
            key = player.lower()
            if player and key not in seen:
                seen.add(key)
                unique.append(player)
        return unique

    @field_validator("start_timestamp_ms")
    @classmethod
    def _unset_timestamp(cls, value: Optional[int]) -> Optional[int]:
        # The ledger stores 0 until the host starts the session
        if value is not None and value <= 0:
            return None
        return value

    @model_validator(mode="after")
    def _started_sessions_have_anchor(self) -> "SessionRecord":
        if self.state is not SessionState.WAITING and self.start_timestamp_ms is None:
            raise ValueError(f"session in state {self.state.name} has no start timestamp")
        return self

    def to_session(self, session_id: str, round_duration_ms: int, round_count: int) -> Session:
        return Session(
            session_id=session_id,
            host_id=self.host_id,
            players=tuple(self.players),
            start_timestamp_ms=self.start_timestamp_ms,
            round_duration_ms=round_duration_ms,
            round_count=round_count,
            state=self.state,
            score_table_id=self.score_table_id,
            prize=self.prize,
        )


class ScoreEntryRecord(BaseModel):
    """One dynamic entry of a session's score table."""

    model_config = ConfigDict(extra="ignore")

    score: int = Field(ge=0)


def parse_session_record(raw: Any, session_id: str) -> SessionRecord:
    try:
        return SessionRecord.model_validate(raw)
    except ValidationError as e:
        raise MalformedDataError(
            operation="read_session",
            session_id=session_id,
            validation_errors=_describe_errors(e),
            raw_payload=raw,
        ) from None


def parse_score_entry(raw: Any, score_table_id: str, player_id: str) -> int:
    payload = raw if isinstance(raw, dict) else {"score": raw}
    try:
        return ScoreEntryRecord.model_validate(payload).score
    except ValidationError as e:
        raise MalformedDataError(
            operation="read_score_entry",
            session_id=None,
            validation_errors=[f"{score_table_id}/{player_id}: {err}" for err in _describe_errors(e)],
            raw_payload=raw,
        ) from None


def _describe_errors(error: ValidationError) -> List[str]:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
        lines.append(f"{location}: {item.get('msg')}")
    return lines
