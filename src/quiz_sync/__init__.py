"""
quiz_sync — Clock-synchronized multi-player quiz rounds
=======================================================

Copyright (c) 2026 Dr. Yoram Segal and Omry Tzabar. All rights reserved.

PROPRIETARY SOFTWARE — No modifications, redistribution, or derivative works
permitted. Usage restricted to courses delivered by Dr. Yoram Segal unless
prior written approval is granted. See LICENSE file for full terms.

Every client derives the same round and phase from one shared start
timestamp stored on the ledger; nothing is pushed between clients.

Quick Start (offline, no ledger needed):
    python -m quiz_sync --demo

Custom Integration:
    from quiz_sync import HttpLedger, RoundRunner
    ledger = HttpLedger(base_url, account_id="0xabc...")
    runner = RoundRunner(config={"session_id": sid, "account_id": "0xabc..."},
                         ledger=ledger)
    await runner.run()      # call runner.select(i) from your UI

Type Definitions
----------------
    from quiz_sync import (
        Session, Phase, PhaseState, PlayerAnswer, LeaderboardEntry,
    )
"""

from .runner import RoundRunner
from .ledger import Ledger
from .http_ledger import HttpLedger
from .memory_ledger import MemoryLedger, MemoryLedgerStore
from .questions import DEFAULT_QUESTIONS, load_questions
from .demo_scores import placeholder_score
from ._core import (
    BASE_POINTS,
    DECAY_PER_SEC,
    MAX_BONUS,
    ClockReading,
    read_round_clock,
    score_for,
)
from .errors import (
    QuizSyncError,
    LedgerError,
    NetworkError,
    LedgerTimeoutError,
    NotFoundError,
    MalformedDataError,
    LedgerRejectedError,
)
from .types import (
    FinalizeStatus,
    LeaderboardEntry,
    Notice,
    Phase,
    PhaseState,
    PlayerAnswer,
    Question,
    Round,
    Session,
    SessionState,
    SubmissionStatus,
)

__all__ = [
    # Main classes
    "RoundRunner",
    "Ledger",
    "HttpLedger",
    "MemoryLedger",
    "MemoryLedgerStore",
    # Questions and scoring
    "DEFAULT_QUESTIONS",
    "load_questions",
    "placeholder_score",
    "BASE_POINTS",
    "DECAY_PER_SEC",
    "MAX_BONUS",
    "ClockReading",
    "read_round_clock",
    "score_for",
    # Errors
    "QuizSyncError",
    "LedgerError",
    "NetworkError",
    "LedgerTimeoutError",
    "NotFoundError",
    "MalformedDataError",
    "LedgerRejectedError",
    # Types
    "FinalizeStatus",
    "LeaderboardEntry",
    "Notice",
    "Phase",
    "PhaseState",
    "PlayerAnswer",
    "Question",
    "Round",
    "Session",
    "SessionState",
    "SubmissionStatus",
]

__version__ = "1.0.0"
__license__ = "Proprietary — Copyright (c) 2026 Dr. Yoram Segal and Omry Tzabar"
__author__ = "Dr. Yoram Segal and Omry Tzabar"
