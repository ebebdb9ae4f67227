# Area: Shared Tests
"""Tests for runner config defaults and validation."""

import pytest

from quiz_sync._runner_config import DEFAULT_CONFIG, resolve_config, validate_config


def base_config(**overrides):
    config = {"session_id": "0x01", "account_id": "0xa"}
    config.update(overrides)
    return config


class TestResolveConfig:
    """Tests for resolve_config()."""

    def test_defaults_applied(self):
        resolved = resolve_config(base_config())
        assert resolved["round_duration_ms"] == 20_000
        assert resolved["feedback_window_sec"] == 5
        assert resolved["winner_count"] == 1
        assert resolved["round_count"] is None

    def test_none_values_do_not_override(self):
        resolved = resolve_config(base_config(round_duration_ms=None))
        assert resolved["round_duration_ms"] == DEFAULT_CONFIG["round_duration_ms"]

    def test_overrides_kept(self):
        resolved = resolve_config(base_config(round_duration_ms=8_000, feedback_window_sec=2))
        assert resolved["round_duration_ms"] == 8_000
        assert resolved["feedback_window_sec"] == 2

    def test_input_not_mutated(self):
        config = base_config()
        resolve_config(config)
        assert "round_duration_ms" not in config


class TestValidateConfig:
    """Tests for validate_config()."""

    @pytest.mark.parametrize("missing", ["session_id", "account_id"])
    def test_missing_required_key(self, missing):
        config = base_config()
        del config[missing]
        with pytest.raises(ValueError, match=missing):
            resolve_config(config)

    def test_zero_round_duration(self):
        with pytest.raises(ValueError, match="round_duration_ms"):
            resolve_config(base_config(round_duration_ms=0))

    def test_feedback_window_must_fit_in_round(self):
        with pytest.raises(ValueError, match="feedback window"):
            resolve_config(base_config(round_duration_ms=5_000, feedback_window_sec=5))

    def test_negative_feedback_window(self):
        with pytest.raises(ValueError):
            resolve_config(base_config(feedback_window_sec=-1))

    def test_round_count_at_least_one(self):
        with pytest.raises(ValueError, match="round_count"):
            resolve_config(base_config(round_count=0))

    def test_winner_count_at_least_one(self):
        with pytest.raises(ValueError, match="winner_count"):
            validate_config({**DEFAULT_CONFIG, **base_config(), "winner_count": 0})
