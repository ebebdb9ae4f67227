# Area: Core
"""
quiz_sync._core.scoring — Answer speed scoring
==============================================

Points for a correct answer: a fixed base plus a speed bonus that loses
DECAY_PER_SEC points for every full second taken. After
MAX_BONUS / DECAY_PER_SEC seconds only the base remains.
"""

BASE_POINTS = 150
MAX_BONUS = 600
DECAY_PER_SEC = 30

# Time after which the bonus is fully spent
BONUS_EXHAUSTED_MS = MAX_BONUS // DECAY_PER_SEC * 1000


def speed_bonus(time_taken_ms: int) -> int:
    """Bonus for answering after `time_taken_ms` (negative times count as 0)."""
    whole_seconds = max(0, time_taken_ms) // 1000
    return max(0, MAX_BONUS - whole_seconds * DECAY_PER_SEC)


def score_for(time_taken_ms: int) -> int:
    """Points earned by a correct answer given after `time_taken_ms`."""
    return BASE_POINTS + speed_bonus(time_taken_ms)
