"""Tests for the adaptive poll interval bounds."""

import pytest

from convsync.sync.interval import PollInterval


def test_starts_at_initial():
    interval = PollInterval(5000, 20000)
    assert interval.value_ms == 5000
    assert interval.seconds == 5.0


def test_grow_multiplies_and_caps_at_max():
    interval = PollInterval(5000, 20000)
    assert interval.grow() == 7500
    for _ in range(20):
        interval.grow()
        assert interval.value_ms <= 20000
    assert interval.value_ms == 20000


def test_shrink_divides_and_floors_at_initial():
    interval = PollInterval(5000, 20000)
    interval.value_ms = 12000
    assert interval.shrink() == pytest.approx(10000)
    for _ in range(20):
        interval.shrink()
        assert interval.value_ms >= 5000
    assert interval.value_ms == 5000


def test_error_back_off_is_gentler():
    interval = PollInterval(5000, 20000)
    interval.value_ms = 11000
    assert interval.back_off_error() == pytest.approx(10000)
    for _ in range(50):
        interval.back_off_error()
    assert interval.value_ms == 5000


@pytest.mark.parametrize("initial, maximum", [(0, 100), (-5, 100), (500, 100)])
def test_invalid_bounds_rejected(initial, maximum):
    with pytest.raises(ValueError):
        PollInterval(initial, maximum)
