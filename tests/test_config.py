"""Tests for settings defaults and validation."""

import pytest
from pydantic import ValidationError

from convsync.config import Settings


def test_defaults_match_reference_cadences():
    s = Settings()
    assert s.poll_mic_interval_ms == 100
    assert s.mic_sample_window_ms == 300
    assert s.initial_poll_interval_ms == 5000
    assert s.max_poll_interval_ms == 20000
    assert s.idle_check_interval_ms == 1000


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("CONVSYNC_IDLE_THRESHOLD_SECONDS", "12.5")
    assert Settings().idle_threshold_seconds == 12.5


def test_poll_bounds_validated():
    with pytest.raises(ValidationError):
        Settings(initial_poll_interval_ms=5000, max_poll_interval_ms=1000)
    with pytest.raises(ValidationError):
        Settings(initial_poll_interval_ms=0)


def test_log_level_normalized_and_validated():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
