# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass

SEC = 1000.0


def seconds(x: float) -> float:
    return x * SEC


def ms_to_s(x: float) -> float:
    return x / SEC


@dataclass
class ShiftClock:
    """Elapsed time of one timed shift; only advances while not paused."""

    duration_ms: float
    rush_hour_ms: float = seconds(30.0)  # final stretch counted as rush hour
    elapsed_ms: float = 0.0
    paused: bool = False

    @classmethod
    def of_seconds(cls, duration_s: float, rush_hour_s: float = 30.0) -> ShiftClock:
        return cls(duration_ms=seconds(duration_s), rush_hour_ms=seconds(rush_hour_s))

    def advance(self, dt_ms: float) -> float:
        if not self.paused:
            self.elapsed_ms += dt_ms
        return self.elapsed_ms

    @property
    def remaining_ms(self) -> float:
        return max(0.0, self.duration_ms - self.elapsed_ms)

    @property
    def rush_hour(self) -> bool:
        """Remaining time inside the final window (and shift not over)."""
        return 0.0 < self.remaining_ms <= self.rush_hour_ms

    @property
    def over(self) -> bool:
        return self.remaining_ms <= 0.0

    def reset(self) -> None:
        self.elapsed_ms = 0.0
        self.paused = False
