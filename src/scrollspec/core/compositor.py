"""Horizontally scrolling pixel buffer for the spectrogram image."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np
from numpy.typing import ArrayLike

from ..analysis.axes import ScaleMode, bin_row_edges, validate_scroll_speed
from ..analysis.color import colorize
from .surface import Color


class ScrollCompositor:
    """
    Own the spectrogram pixel buffer and paint one new column group per frame.

    The buffer is an ``(height, width, 3)`` uint8 array. Each call to
    :meth:`composite` shifts it left by ``speed`` pixels and overwrites the right-hand
    strip with the colours of the latest magnitude frame, laid out
    vertically by :func:`~scrollspec.analysis.axes.bin_row_edges`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: Color = (0, 0, 0),
        grid_step: int = 0,
        grid_color: Color = (204, 204, 204),
    ) -> None:
        self.background = tuple(int(c) for c in background)
        self.grid_step = max(0, int(grid_step))
        self.grid_color = tuple(int(c) for c in grid_color)
        self.total_bins: Optional[int] = None
        self.frames_composited = 0
        self._row_cache: Dict[Tuple[int, int, ScaleMode], np.ndarray] = {}
        self._buffer = np.zeros((0, 0, 3), dtype=np.uint8)
        self.reset(width, height)

    @property
    def width(self) -> int:
        return int(self._buffer.shape[1])

    @property
    def height(self) -> int:
        return int(self._buffer.shape[0])

    @property
    def buffer(self) -> np.ndarray:
        """Read-only view of the current pixel buffer."""
        view = self._buffer.view()
        view.setflags(write=False)
        return view

    def reset(self, width: int, height: int) -> None:
        """Replace the buffer with a blank one of the given size; history is dropped."""
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"buffer size must be positive, got {width}x{height}")
        buffer = np.empty((height, width, 3), dtype=np.uint8)
        buffer[:, :] = self.background
        if self.grid_step:
            buffer[:, :: self.grid_step] = self.grid_color
            buffer[:: self.grid_step, :] = self.grid_color
        self._buffer = buffer
        self._row_cache.clear()

    def row_bins(self, total_bins: int, mode: ScaleMode | str) -> np.ndarray:
        """
        Bin index painted on every row, top row first (``len == height``).

        Bin ``i`` fills rows ``[edges[i + 1], edges[i])``; iterating bins in
        ascending order with shared edges leaves no gap and no overlap.
        """
        mode = ScaleMode.parse(mode)
        key = (int(total_bins), self.height, mode)
        rows = self._row_cache.get(key)
        if rows is None:
            edges = bin_row_edges(total_bins, self.height, mode)
            spans = edges[:-1] - edges[1:]
            rows = np.repeat(np.arange(total_bins, dtype=np.intp)[::-1], spans[::-1])
            self._row_cache[key] = rows
        return rows

    def _check_frame(self, frame: ArrayLike) -> np.ndarray:
        values = np.asarray(frame)
        if values.ndim != 1 or values.size == 0:
            raise ValueError("magnitude frame must be a non-empty 1-D sequence")
        if self.total_bins is not None and values.size != self.total_bins:
            raise ValueError(
                f"magnitude frame has {values.size} bins, expected {self.total_bins}"
            )
        return values

    def composite(self, frame: ArrayLike, mode: ScaleMode | str, speed: int) -> None:
        """
        Scroll the buffer by ``speed`` pixels and paint ``frame`` at the right edge.

        The frame is validated and its column prepared before the buffer is
        touched; a rejected frame leaves the buffer and ``total_bins`` as they
        were.
        """
        speed = validate_scroll_speed(speed)
        values = self._check_frame(frame)
        mode = ScaleMode.parse(mode)
        column = colorize(values)[self.row_bins(values.size, mode)]

        if self.total_bins is None:
            self.total_bins = int(values.size)
        buffer = self._buffer
        width = buffer.shape[1]
        strip = min(speed, width)
        if strip < width:
            buffer[:, : width - strip] = buffer[:, strip:]
        buffer[:, width - strip :] = column[:, None, :]
        self.frames_composited += 1


__all__ = ["ScrollCompositor"]
