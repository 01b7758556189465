"""Tests for mic activity sampling."""

import asyncio

import pytest

from convsync.sync.activity import ActivityTracker
from convsync.sync.state import CaptureGates, IdleClock


class FakeClock:
    def __init__(self, value: float = 100.0) -> None:
        self.value = value

    def __call__(self) -> float:
        return self.value


class FakeMic:
    def __init__(self, levels=None, error: Exception | None = None) -> None:
        self.levels = list(levels or [])
        self.error = error
        self.windows: list[int] = []

    async def fetch_mic_activity(self, window_ms: int) -> float:
        self.windows.append(window_ms)
        if self.error is not None:
            raise self.error
        return self.levels.pop(0)


def make_tracker(mic, **kwargs):
    fake_clock = FakeClock()
    clock = IdleClock(now=fake_clock)
    gates = CaptureGates()
    published: list[float] = []
    tracker = ActivityTracker(mic, clock, gates, on_change=published.append, **kwargs)
    return tracker, clock, gates, fake_clock, published


@pytest.mark.asyncio
async def test_activity_above_threshold_advances_idle_clock():
    tracker, clock, _, fake_clock, published = make_tracker(FakeMic([4.2]))
    fake_clock.value = 103.0

    assert await tracker.sample_once() == 4.2

    assert published == [4.2]
    assert tracker.level == 4.2
    assert clock.last_activity == 103.0


@pytest.mark.asyncio
async def test_quiet_sample_is_published_but_clock_untouched():
    tracker, clock, _, fake_clock, published = make_tracker(FakeMic([1.0]))
    fake_clock.value = 103.0

    await tracker.sample_once()

    assert published == [1.0]
    assert clock.last_activity == 100.0


@pytest.mark.asyncio
async def test_sample_window_is_passed_to_source():
    mic = FakeMic([0.0])
    tracker, *_ = make_tracker(mic, window_ms=300)
    await tracker.sample_once()
    assert mic.windows == [300]


@pytest.mark.asyncio
@pytest.mark.parametrize("audio_enabled, sleeping", [(False, False), (True, True)])
async def test_gated_tracker_reports_zero_without_sampling(audio_enabled, sleeping):
    mic = FakeMic([9.0])
    tracker, clock, gates, fake_clock, published = make_tracker(mic)
    gates.audio_enabled = audio_enabled
    gates.sleeping = sleeping
    fake_clock.value = 150.0

    assert await tracker.sample_once() == 0.0

    assert mic.windows == []
    assert published == [0.0]
    assert clock.last_activity == 100.0


@pytest.mark.asyncio
async def test_sample_error_is_reported_as_zero():
    tracker, clock, _, fake_clock, published = make_tracker(FakeMic(error=OSError("mic gone")))
    fake_clock.value = 150.0

    assert await tracker.sample_once() == 0.0
    assert await tracker.sample_once() == 0.0

    assert published == [0.0, 0.0]
    assert clock.last_activity == 100.0


@pytest.mark.asyncio
async def test_sample_timeout_is_reported_as_zero():
    class StalledMic:
        async def fetch_mic_activity(self, window_ms):
            await asyncio.Event().wait()

    tracker, _, _, _, published = make_tracker(StalledMic(), fetch_timeout_seconds=0.01)
    assert await tracker.sample_once() == 0.0
    assert published == [0.0]


@pytest.mark.asyncio
async def test_negative_levels_clamp_to_zero():
    tracker, _, _, _, published = make_tracker(FakeMic([-3]))
    assert await tracker.sample_once() == 0.0
    assert published == [0.0]
