"""Magnitude to colour mapping (black → purple → orange → yellow)."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike

RGB = Tuple[int, int, int]


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def _build_table() -> np.ndarray:
    ratio = np.arange(256, dtype=np.float64) / 255.0
    red = np.clip(255.0 * ratio, 0.0, 255.0)
    green = np.clip(255.0 * (ratio - 0.5) * 2.0, 0.0, 255.0)
    blue = np.clip(255.0 * (1.0 - ratio), 0.0, 255.0)
    # Every channel fades in from black with the intensity itself.
    rgb = np.stack([red, green, blue], axis=1) * ratio[:, None]
    return _round_half_up(rgb).astype(np.uint8)


COLOR_TABLE: np.ndarray = _build_table()
COLOR_TABLE.setflags(write=False)


def intensity_to_color(intensity: int) -> RGB:
    """
    Map a byte magnitude to an ``(r, g, b)`` tuple.

    Parameters
    ----------
    intensity:
        Integer magnitude in ``[0, 255]``.

    Returns
    -------
    tuple
        Channels in ``[0, 255]``; ``(0, 0, 0)`` for silence.
    """
    value = int(intensity)
    if value < 0 or value > 255:
        raise ValueError(f"intensity must be within [0, 255], got {intensity}")
    r, g, b = COLOR_TABLE[value]
    return int(r), int(g), int(b)


def colorize(frame: ArrayLike) -> np.ndarray:
    """Vectorised :func:`intensity_to_color` returning an ``(N, 3)`` uint8 array."""
    values = np.asarray(frame)
    if values.size and (values.min() < 0 or values.max() > 255):
        raise ValueError("magnitudes must be within [0, 255]")
    return COLOR_TABLE[values.astype(np.intp, copy=False)]


__all__ = ["COLOR_TABLE", "RGB", "colorize", "intensity_to_color"]
