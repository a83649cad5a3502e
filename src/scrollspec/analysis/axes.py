"""Frequency and time axis mappings for the scrolling spectrogram.

The frequency axis maps analysis bins onto rows of the image (row 0 at the
top, so high frequencies are drawn first) either linearly or on a log10
scale. The time axis converts the visible width and scroll speed into elapsed
seconds for tick labels.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import numpy as np
from numpy.typing import ArrayLike

MIN_SCROLL_SPEED = 1
MAX_SCROLL_SPEED = 10


def validate_scroll_speed(speed: int) -> int:
    """Return ``speed`` as an int, rejecting values outside the slider range."""
    if isinstance(speed, bool) or int(speed) != speed:
        raise ValueError(f"scroll speed must be an integer, got {speed!r}")
    value = int(speed)
    if not MIN_SCROLL_SPEED <= value <= MAX_SCROLL_SPEED:
        raise ValueError(
            f"scroll speed must be within [{MIN_SCROLL_SPEED}, {MAX_SCROLL_SPEED}], got {value}"
        )
    return value


class ScaleMode(str, Enum):
    """Vertical placement of frequency bins."""

    LINEAR = "linear"
    LOG = "log"

    @classmethod
    def parse(cls, value: "ScaleMode | str") -> "ScaleMode":
        if isinstance(value, ScaleMode):
            return value
        raw = str(value or "").strip().lower()
        if raw in {"log", "log10", "logarithmic"}:
            return cls.LOG
        if raw in {"lin", "linear"}:
            return cls.LINEAR
        raise ValueError(f"Unknown scale mode: {value!r}")

    def toggled(self) -> "ScaleMode":
        return ScaleMode.LINEAR if self is ScaleMode.LOG else ScaleMode.LOG


@dataclass(frozen=True)
class FrequencyTick:
    y: float
    frequency_hz: float
    label: str


@dataclass(frozen=True)
class TimeTick:
    index: int
    x: float
    seconds: float
    label: str


def _check_bins(total_bins: int, mode: ScaleMode) -> None:
    if mode is ScaleMode.LOG and total_bins < 2:
        raise ValueError(f"log scale needs at least 2 bins, got {total_bins}")
    if total_bins < 1:
        raise ValueError(f"total_bins must be positive, got {total_bins}")


def bin_to_y(index: ArrayLike, total_bins: int, height: float, mode: ScaleMode | str):
    """
    Return the vertical pixel position of the lower edge of bin ``index``.

    ``index`` may be a scalar or an array; ``index == total_bins`` gives the
    top edge of the highest bin. Under log scale bin 0 maps to ``log10(1) = 0``
    so it lands on the bottom of the image.
    """
    mode = ScaleMode.parse(mode)
    _check_bins(int(total_bins), mode)
    idx = np.asarray(index, dtype=np.float64)
    if mode is ScaleMode.LOG:
        log_min = math.log10(1.0)
        log_max = math.log10(total_bins)
        fraction = (np.log10(idx + 1.0) - log_min) / (log_max - log_min)
    else:
        fraction = idx / float(total_bins)
    y = float(height) * (1.0 - fraction)
    return float(y) if y.ndim == 0 else y


def y_to_frequency(
    y: ArrayLike,
    height: float,
    max_frequency: float,
    mode: ScaleMode | str,
    *,
    total_bins: Optional[int] = None,
):
    """
    Inverse of :func:`bin_to_y` expressed in Hz.

    Under log scale with a known ``total_bins`` the bin placement is solved
    for the fractional bin and scaled to ``max_frequency``. Without it the
    same relation is solved with ``max_frequency`` standing in for the bin
    count (the top row is then ``max_frequency`` and the bottom row 1 Hz).
    """
    mode = ScaleMode.parse(mode)
    if height <= 0:
        raise ValueError(f"height must be positive, got {height}")
    fraction = 1.0 - np.asarray(y, dtype=np.float64) / float(height)
    if mode is ScaleMode.LINEAR:
        freq = float(max_frequency) * fraction
    elif total_bins is not None:
        _check_bins(int(total_bins), mode)
        bin_pos = np.power(10.0, math.log10(total_bins) * fraction) - 1.0
        freq = bin_pos * float(max_frequency) / float(total_bins)
    else:
        log_min = math.log10(1.0)
        log_max = math.log10(max(float(max_frequency), 1.0))
        freq = np.power(10.0, log_min + (log_max - log_min) * fraction)
    return float(freq) if freq.ndim == 0 else freq


def bin_row_edges(total_bins: int, height: int, mode: ScaleMode | str) -> np.ndarray:
    """
    Integer row boundaries for every bin, ``len == total_bins + 1``.

    Bin ``i`` covers rows ``[edges[i + 1], edges[i])``. Neighbouring bins share
    one boundary value, so the spans tile ``[0, height)`` exactly; bins that
    are thinner than a pixel get an empty span.
    """
    y = bin_to_y(np.arange(total_bins + 1), total_bins, height, mode)
    edges = np.floor(np.asarray(y) + 0.5)
    return np.clip(edges, 0, int(height)).astype(np.intp)


def format_frequency(frequency_hz: float) -> str:
    if frequency_hz >= 1000.0:
        return f"{frequency_hz / 1000.0:.1f}kHz"
    return f"{int(math.floor(frequency_hz + 0.5))}Hz"


def format_time(seconds: float) -> str:
    return f"{seconds:.1f}s"


def frequency_ticks(
    height: int,
    max_frequency: float,
    mode: ScaleMode | str,
    *,
    count: int = 10,
    total_bins: Optional[int] = None,
) -> List[FrequencyTick]:
    """Evenly spaced labels from the top (``max_frequency``) to the bottom row."""
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    spacing = float(height) / count
    ticks: List[FrequencyTick] = []
    for i in range(count + 1):
        y = i * spacing
        freq = y_to_frequency(y, height, max_frequency, mode, total_bins=total_bins)
        ticks.append(FrequencyTick(y=y, frequency_hz=freq, label=format_frequency(freq)))
    return ticks


def visible_seconds(width: int, speed: int, frame_rate: float) -> float:
    """Seconds of history that fit in ``width`` pixels at ``speed`` px/frame."""
    if speed <= 0:
        raise ValueError(f"speed must be positive, got {speed}")
    if frame_rate <= 0:
        raise ValueError(f"frame_rate must be positive, got {frame_rate}")
    return (float(width) / speed) / float(frame_rate)


def time_ticks(width: int, speed: int, frame_rate: float, *, count: int = 10) -> List[TimeTick]:
    """
    Return ``count + 1`` ticks from the oldest visible column (index 0) to now.

    The time at tick ``i`` is ``total * (count - i) / count`` and its x position
    is ``i * width / count``.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    total = visible_seconds(width, speed, frame_rate)
    spacing = float(width) / count
    ticks: List[TimeTick] = []
    for i in range(count + 1):
        seconds = total * (count - i) / count
        ticks.append(TimeTick(index=i, x=i * spacing, seconds=seconds, label=format_time(seconds)))
    return ticks


__all__ = [
    "FrequencyTick",
    "MAX_SCROLL_SPEED",
    "MIN_SCROLL_SPEED",
    "ScaleMode",
    "TimeTick",
    "bin_row_edges",
    "bin_to_y",
    "format_frequency",
    "format_time",
    "frequency_ticks",
    "time_ticks",
    "validate_scroll_speed",
    "visible_seconds",
    "y_to_frequency",
]
