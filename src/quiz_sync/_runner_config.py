# Area: Shared
"""
quiz_sync._runner_config — Runner Configuration
===============================================

Configuration defaults and validation for RoundRunner.
"""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "round_duration_ms": 20_000,
    "round_count": None,                  # None: one round per question
    "feedback_window_sec": 5,
    "tick_interval_seconds": 1.0,
    "leaderboard_poll_seconds": 2.0,
    "lobby_poll_seconds": 2.0,
    "ledger_timeout_seconds": 10.0,
    "winner_count": 1,
    "log_file": "quiz_sync.log",
}

# Required config keys
REQUIRED_CONFIG_KEYS = [
    "session_id",
    "account_id",
]

_POSITIVE_KEYS = [
    "round_duration_ms",
    "tick_interval_seconds",
    "leaderboard_poll_seconds",
    "lobby_poll_seconds",
    "ledger_timeout_seconds",
]


def validate_config(config: dict) -> None:
    """
    Validate required configuration keys and value ranges.

    Args:
        config: Configuration dict (defaults already applied)

    Raises:
        ValueError: If keys are missing or values are out of range
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    for key in _POSITIVE_KEYS:
        if config[key] <= 0:
            raise ValueError(f"{key} must be positive, got {config[key]}")

    if config["feedback_window_sec"] < 0:
        raise ValueError("feedback_window_sec cannot be negative")
    if config["feedback_window_sec"] * 1000 >= config["round_duration_ms"]:
        raise ValueError("feedback window must be shorter than the round")
    if config["round_count"] is not None and config["round_count"] < 1:
        raise ValueError("round_count must be at least 1")
    if config["winner_count"] < 1:
        raise ValueError("winner_count must be at least 1")


def resolve_config(config: dict) -> Dict[str, Any]:
    """Return a copy of `config` with defaults applied, validated."""
    resolved = dict(DEFAULT_CONFIG)
    resolved.update({k: v for k, v in config.items() if v is not None})
    validate_config(resolved)
    return resolved
