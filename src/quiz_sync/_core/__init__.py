# Area: Core
"""
Round synchronization and scoring core.

Leaves first: clock and scoring are pure functions; the phase
controller derives local state from the clock; capture, submitter,
leaderboard and finalizer own the ledger-facing steps.
"""

from .clock import ClockReading, read_round_clock, round_start_ms, wall_clock_ms
from .scoring import BASE_POINTS, DECAY_PER_SEC, MAX_BONUS, score_for, speed_bonus
from .capture import ScoreCapture
from .phase import PhaseController
from .submitter import ScoreSubmitter
from .leaderboard import LeaderboardAggregator, build_standing
from .finalizer import RewardFinalizer
from .lobby import LobbyWatcher

__all__ = [
    "ClockReading",
    "read_round_clock",
    "round_start_ms",
    "wall_clock_ms",
    "BASE_POINTS",
    "DECAY_PER_SEC",
    "MAX_BONUS",
    "score_for",
    "speed_bonus",
    "ScoreCapture",
    "PhaseController",
    "ScoreSubmitter",
    "LeaderboardAggregator",
    "build_standing",
    "RewardFinalizer",
    "LobbyWatcher",
]
