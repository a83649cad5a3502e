"""Frame sources yielding one ``uint8`` magnitude array per render tick."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Protocol, Sequence

import numpy as np

from ..analysis.spectrum import ByteSpectrumAnalyser

logger = logging.getLogger(__name__)


class CaptureUnavailableError(RuntimeError):
    """Audio capture could not start (no backend, no device, or access denied)."""


class FrameSource(Protocol):
    """
    Provider of magnitude frames.

    ``get_frequency_bins`` must not block: it returns the most recent frame,
    or ``None`` when nothing is available yet. ``total_bins`` is fixed for the
    lifetime of the source.
    """

    sample_rate: float

    @property
    def total_bins(self) -> int:  # pragma: no cover - protocol
        ...

    def start(self) -> None:  # pragma: no cover - protocol
        ...

    def get_frequency_bins(self) -> Optional[np.ndarray]:  # pragma: no cover - protocol
        ...

    def stop(self) -> None:  # pragma: no cover - protocol
        ...


class MicFrameSource:
    """Live microphone input analysed into byte magnitudes."""

    def __init__(
        self,
        sample_rate: float = 48000.0,
        fft_size: int = 2048,
        *,
        device: Optional[str | int] = None,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        smoothing: float = 0.8,
    ) -> None:
        self.sample_rate = float(sample_rate)
        self.device = device
        self._analyser = ByteSpectrumAnalyser(
            fft_size,
            min_decibels=min_decibels,
            max_decibels=max_decibels,
            smoothing=smoothing,
        )
        self._window = np.zeros(self._analyser.fft_size, dtype=np.float32)
        self._lock = threading.Lock()
        self._stream = None

    @property
    def total_bins(self) -> int:
        return self._analyser.total_bins

    @property
    def active(self) -> bool:
        return self._stream is not None

    def _callback(self, indata, frames, time_info, status) -> None:  # pragma: no cover - audio thread
        if status:
            logger.debug("Input stream status: %s", status)
        if indata.ndim == 2 and indata.shape[1] > 1:
            mono = indata.mean(axis=1)
        else:
            mono = indata.reshape(-1)
        with self._lock:
            n = min(mono.size, self._window.size)
            self._window = np.roll(self._window, -n)
            self._window[-n:] = mono[-n:]

    def start(self) -> None:
        if self._stream is not None:
            return
        try:
            import sounddevice as sd

            stream = sd.InputStream(
                channels=1,
                samplerate=self.sample_rate,
                device=self.device,
                callback=self._callback,
                dtype="float32",
            )
            stream.start()
        except Exception as exc:
            raise CaptureUnavailableError(f"Could not open audio input: {exc}") from exc
        self._stream = stream
        logger.info(
            "Microphone capture started (device=%s, %.0f Hz, %d bins)",
            self.device,
            self.sample_rate,
            self.total_bins,
        )

    def get_frequency_bins(self) -> Optional[np.ndarray]:
        if self._stream is None:
            return None
        with self._lock:
            window = self._window.copy()
        return self._analyser.process(window)

    def stop(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:  # pragma: no cover - depends on audio backend
            stream.stop()
            stream.close()
        except Exception:
            logger.exception("Failed to close audio input stream")


class DemoFrameSource:
    """Synthetic chirp + tones analysed like live input; needs no audio device."""

    def __init__(
        self,
        sample_rate: float = 48000.0,
        fft_size: int = 2048,
        *,
        frame_rate: float = 60.0,
        seed: Optional[int] = 0,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        smoothing: float = 0.8,
    ) -> None:
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self.sample_rate = float(sample_rate)
        self.hop = max(1, int(round(self.sample_rate / float(frame_rate))))
        self._analyser = ByteSpectrumAnalyser(
            fft_size,
            min_decibels=min_decibels,
            max_decibels=max_decibels,
            smoothing=smoothing,
        )
        self._rng = np.random.default_rng(seed)
        self._t = 0
        self._started = False

    @property
    def total_bins(self) -> int:
        return self._analyser.total_bins

    def start(self) -> None:
        self._started = True

    def _samples(self) -> np.ndarray:
        n = self._analyser.fft_size
        sr = self.sample_rate
        t = (self._t + np.arange(n)) / sr
        sweep = 200.0 + 150.0 * (t % 20.0)
        chirp = 0.4 * np.sin(2 * np.pi * sweep * t)
        tone1 = 0.25 * np.sin(2 * np.pi * 440.0 * t)
        tone2 = 0.2 * np.sin(2 * np.pi * 880.0 * t + 0.3)
        noise = 0.02 * self._rng.standard_normal(n)
        self._t += self.hop
        return np.tanh(1.5 * (chirp + tone1 + tone2 + noise))

    def get_frequency_bins(self) -> Optional[np.ndarray]:
        if not self._started:
            return None
        return self._analyser.process(self._samples())

    def stop(self) -> None:
        self._started = False


class ReplayFrameSource:
    """Replay a fixed sequence of frames, one per call."""

    def __init__(
        self,
        frames: Iterable[Sequence[int] | np.ndarray],
        sample_rate: float = 48000.0,
        *,
        loop: bool = False,
    ) -> None:
        self._frames = [np.asarray(f, dtype=np.uint8) for f in frames]
        if not self._frames:
            raise ValueError("ReplayFrameSource needs at least one frame")
        lengths = {f.size for f in self._frames}
        if len(lengths) != 1:
            raise ValueError(f"all frames must share one length, got {sorted(lengths)}")
        self.sample_rate = float(sample_rate)
        self.loop = bool(loop)
        self._index = 0
        self._started = False

    @property
    def total_bins(self) -> int:
        return int(self._frames[0].size)

    def start(self) -> None:
        self._started = True

    def get_frequency_bins(self) -> Optional[np.ndarray]:
        if not self._started:
            return None
        if self._index >= len(self._frames):
            if not self.loop:
                return None
            self._index = 0
        frame = self._frames[self._index]
        self._index += 1
        return frame

    def stop(self) -> None:
        self._started = False


__all__ = [
    "CaptureUnavailableError",
    "DemoFrameSource",
    "FrameSource",
    "MicFrameSource",
    "ReplayFrameSource",
]
