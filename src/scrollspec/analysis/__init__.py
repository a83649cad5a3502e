"""Pure mapping helpers for the scrolling spectrogram.

Modules such as :mod:`color`, :mod:`axes` and :mod:`spectrum` operate on plain
numbers or NumPy arrays and stay free of Qt, so they can be reused by the
headless renderer, automated tests and the desktop GUI alike.
"""

from .axes import (
    FrequencyTick,
    ScaleMode,
    TimeTick,
    bin_row_edges,
    bin_to_y,
    format_frequency,
    format_time,
    frequency_ticks,
    time_ticks,
    y_to_frequency,
)
from .color import COLOR_TABLE, colorize, intensity_to_color

__all__ = [
    "COLOR_TABLE",
    "FrequencyTick",
    "ScaleMode",
    "TimeTick",
    "bin_row_edges",
    "bin_to_y",
    "colorize",
    "format_frequency",
    "format_time",
    "frequency_ticks",
    "intensity_to_color",
    "time_ticks",
    "y_to_frequency",
]
