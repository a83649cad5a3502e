"""Byte-magnitude spectrum helpers used by the built-in frame sources."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class ByteSpectrumAnalyser:
    """
    Turn blocks of mono samples into ``uint8`` magnitude frames.

    Parameters
    ----------
    fft_size:
        Analysis window length; a power of two. The frame length (bin count)
        is ``fft_size // 2``.
    min_decibels, max_decibels:
        dB range mapped linearly onto ``[0, 255]``; values outside are clipped.
    smoothing:
        Weight of the previous spectrum in ``[0, 1)``.
    """

    def __init__(
        self,
        fft_size: int = 2048,
        *,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        smoothing: float = 0.8,
    ) -> None:
        if not _is_power_of_two(int(fft_size)) or fft_size < 32:
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be below max_decibels")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be within [0, 1), got {smoothing}")
        self.fft_size = int(fft_size)
        self.min_decibels = float(min_decibels)
        self.max_decibels = float(max_decibels)
        self.smoothing = float(smoothing)
        self._window = np.blackman(self.fft_size)
        self._previous = np.zeros(self.total_bins, dtype=np.float64)

    @property
    def total_bins(self) -> int:
        return self.fft_size // 2

    def reset(self) -> None:
        self._previous[:] = 0.0

    def process(self, samples: ArrayLike) -> np.ndarray:
        """Analyse the newest ``fft_size`` samples (zero-padded on the left)."""
        block = np.asarray(samples, dtype=np.float64).reshape(-1)
        if block.size >= self.fft_size:
            block = block[-self.fft_size :]
        else:
            block = np.pad(block, (self.fft_size - block.size, 0))

        spectrum = np.fft.rfft(block * self._window)[: self.total_bins]
        magnitude = np.abs(spectrum) / self.fft_size
        smoothed = self.smoothing * self._previous + (1.0 - self.smoothing) * magnitude
        self._previous = smoothed

        with np.errstate(divide="ignore"):
            db = 20.0 * np.log10(smoothed)
        scale = 255.0 / (self.max_decibels - self.min_decibels)
        scaled = np.floor((db - self.min_decibels) * scale)
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)


__all__ = ["ByteSpectrumAnalyser"]
