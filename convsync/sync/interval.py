"""Bounded, self-adjusting transcript poll interval."""

from __future__ import annotations

GROW_FACTOR = 1.5
SHRINK_FACTOR = 1.2
ERROR_SHRINK_FACTOR = 1.1


class PollInterval:
    """Poll delay in milliseconds, kept within ``[initial_ms, max_ms]``.

    Productive polls push the delay up toward ``max_ms``; empty, unproductive
    and failed polls pull it back down toward ``initial_ms``.
    """

    def __init__(self, initial_ms: float, max_ms: float) -> None:
        if initial_ms <= 0:
            raise ValueError("initial_ms must be positive")
        if max_ms < initial_ms:
            raise ValueError("max_ms must be >= initial_ms")
        self.initial_ms = initial_ms
        self.max_ms = max_ms
        self.value_ms = initial_ms

    @property
    def seconds(self) -> float:
        return self.value_ms / 1000

    def grow(self) -> float:
        self.value_ms = min(self.value_ms * GROW_FACTOR, self.max_ms)
        return self.value_ms

    def shrink(self) -> float:
        self.value_ms = max(self.value_ms / SHRINK_FACTOR, self.initial_ms)
        return self.value_ms

    def back_off_error(self) -> float:
        self.value_ms = max(self.value_ms / ERROR_SHRINK_FACTOR, self.initial_ms)
        return self.value_ms
