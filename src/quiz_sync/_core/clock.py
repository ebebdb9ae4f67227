# Area: Core
"""
quiz_sync._core.clock — Round clock
===================================

Maps the shared session start timestamp and the local wall clock to the
current round and the time left in it. Every client computes the same
reading from the same start timestamp, so no phase messages are ever
exchanged between clients.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

DEFAULT_ROUND_DURATION_MS = 20_000


@dataclass(frozen=True)
class ClockReading:
    """Result of one clock evaluation."""
    elapsed_ms: int
    round_index: int
    time_in_round_ms: int
    remaining_ms: int
    terminal: bool


def read_round_clock(
    start_timestamp_ms: int,
    now_ms: int,
    round_duration_ms: int,
    round_count: int,
) -> ClockReading:
    """
    Evaluate the round clock.

    Total over every `now_ms`: a clock reading before the start timestamp
    is treated as elapsed 0. Once `round_index >= round_count` the session
    is terminal regardless of the remaining time.
    """
    if round_duration_ms <= 0:
        raise ValueError(f"round_duration_ms must be positive, got {round_duration_ms}")

    elapsed = max(0, now_ms - start_timestamp_ms)
    round_index, time_in_round = divmod(elapsed, round_duration_ms)
    return ClockReading(
        elapsed_ms=elapsed,
        round_index=round_index,
        time_in_round_ms=time_in_round,
        remaining_ms=round_duration_ms - time_in_round,
        terminal=round_index >= round_count,
    )


def round_start_ms(start_timestamp_ms: int, round_index: int, round_duration_ms: int) -> int:
    """Absolute wall-clock time at which `round_index` begins."""
    return start_timestamp_ms + round_index * round_duration_ms


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)
