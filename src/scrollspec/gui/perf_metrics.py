"""Frame timing statistics for the spectrogram widget."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque

MAX_SAMPLES_PERF = 300


@dataclass
class PlotPerfStats:
    """Bounded history of recent ticks (timestamps, durations, skipped frames)."""

    frame_times: Deque[float] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES_PERF))
    frame_durations: Deque[float] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES_PERF))
    composited: Deque[bool] = field(default_factory=lambda: deque(maxlen=MAX_SAMPLES_PERF))

    def record_frame(self, start_ts: float, end_ts: float, composited: bool = True) -> None:
        """Add a tick's end timestamp, its duration and whether a column was painted."""
        self.frame_times.append(end_ts)
        self.frame_durations.append(end_ts - start_ts)
        self.composited.append(bool(composited))

    def compute_fps(self) -> float:
        if len(self.frame_times) < 2:
            return 0.0
        dt = self.frame_times[-1] - self.frame_times[0]
        if dt <= 0:
            return 0.0
        return (len(self.frame_times) - 1) / dt

    def avg_frame_ms(self) -> float:
        if not self.frame_durations:
            return 0.0
        return 1000.0 * sum(self.frame_durations) / len(self.frame_durations)

    def max_frame_ms(self) -> float:
        if not self.frame_durations:
            return 0.0
        return 1000.0 * max(self.frame_durations)

    def skipped_ratio(self) -> float:
        """Fraction of recent ticks that had no frame to composite."""
        if not self.composited:
            return 0.0
        return 1.0 - sum(self.composited) / len(self.composited)

    def as_dict(self) -> dict[str, float]:
        return {
            "fps": self.compute_fps(),
            "avg_frame_ms": self.avg_frame_ms(),
            "max_frame_ms": self.max_frame_ms(),
            "skipped_ratio": self.skipped_ratio(),
        }

    def reset(self) -> None:
        self.frame_times.clear()
        self.frame_durations.clear()
        self.composited.clear()
