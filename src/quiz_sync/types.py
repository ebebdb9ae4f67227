# Area: Shared
"""
quiz_sync.types — Data types shared by every component
======================================================

Sessions come from the ledger; rounds, answers and standings are
derived locally on each client. All types are exported from the main
package:

    from quiz_sync import Session, Phase, PlayerAnswer, LeaderboardEntry
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class SessionState(Enum):
    """Lifecycle of a session as stored on the ledger."""
    WAITING = 0     # Lobby open, players joining
    ACTIVE = 1      # Host started the game, start timestamp fixed
    ENDED = 2       # Winners recorded, rewards distributed


class Phase(Enum):
    """Locally derived sub-state of a session."""
    UNSTARTED = "unstarted"        # No start timestamp yet, no timer activity
    QUESTION = "question"          # Answers accepted
    FEEDBACK = "feedback"          # Trailing window of a round, answer revealed
    LEADERBOARD = "leaderboard"    # Terminal


class SubmissionStatus(Enum):
    """Outcome of a final score submission attempt."""
    SUBMITTED = "submitted"
    FAILED = "failed"
    DUPLICATE = "duplicate"          # Guard already set, no write issued
    HOST_SPECTATOR = "host_spectator"
    NOT_TERMINAL = "not_terminal"


class FinalizeStatus(Enum):
    """Outcome of a host finalize attempt."""
    FINALIZED = "finalized"
    FAILED = "failed"
    NOT_HOST = "not_host"
    NO_STANDING = "no_standing"


def same_player(a: Optional[str], b: Optional[str]) -> bool:
    """Ledger addresses compare case-insensitively."""
    if not a or not b:
        return False
    return a.lower() == b.lower()


@dataclass(frozen=True)
class Question:
    """One multiple-choice question; `correct` indexes into `options`."""
    text: str
    options: Tuple[str, ...]
    correct: int


@dataclass(frozen=True)
class Session:
    """
    One game instance as read from the ledger.

    `start_timestamp_ms` is None until the host starts the session and is
    never changed afterwards: it is the only timing anchor clients share.
    """
    session_id: str
    host_id: str
    players: Tuple[str, ...]
    start_timestamp_ms: Optional[int]
    round_duration_ms: int
    round_count: int
    state: SessionState = SessionState.WAITING
    score_table_id: str = ""
    prize: int = 0

    @property
    def is_started(self) -> bool:
        return self.start_timestamp_ms is not None

    def is_host(self, player_id: Optional[str]) -> bool:
        return same_player(self.host_id, player_id)

    def has_player(self, player_id: Optional[str]) -> bool:
        return any(same_player(p, player_id) for p in self.players)


@dataclass(frozen=True)
class Round:
    """A derived round; never persisted."""
    index: int
    question: Question
    start_offset_ms: int


@dataclass(frozen=True)
class PlayerAnswer:
    """The single answer a player gave in one round. Immutable once made."""
    player_id: str
    round_index: int
    choice_index: int
    click_timestamp_ms: int
    time_taken_ms: int
    locked_score: int


@dataclass(frozen=True)
class LeaderboardEntry:
    player_id: str
    score: int


@dataclass(frozen=True)
class PhaseState:
    """What the phase controller derived on one tick."""
    phase: Phase
    round_index: Optional[int] = None
    remaining_ms: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase is Phase.LEADERBOARD


@dataclass(frozen=True)
class Notice:
    """A non-fatal message for the UI layer (the toast of a browser client)."""
    level: str          # "info" | "success" | "error"
    message: str
    operation: Optional[str] = None
    details: dict = field(default_factory=dict, compare=False)
