"""Runtime configuration for the spectrogram renderer and its frame sources."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Tuple

import yaml

from ..analysis.axes import ScaleMode, validate_scroll_speed

RGBTuple = Tuple[int, int, int]


def _color(value: Any) -> RGBTuple:
    """Accept ``"#rgb"``, ``"#rrggbb"`` or a 3-item sequence."""
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"Invalid colour: {value!r}")
        return tuple(int(text[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]
    r, g, b = (max(0, min(255, int(c))) for c in value)
    return r, g, b


@dataclass(slots=True)
class SpectrogramConfig:
    """
    Tuning knobs for capture, compositing and axis overlays.

    The defaults mirror a browser analyser: 48 kHz input, a 2048-point FFT
    (1024 bins) and a 60 Hz display refresh.
    """

    sample_rate: float = 48000.0
    fft_size: int = 2048
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    smoothing: float = 0.8
    input_device: Optional[str] = None

    frame_rate: float = 60.0
    initial_scale_mode: str = "linear"
    initial_scroll_speed: int = 2

    freq_ticks: int = 10
    time_ticks: int = 10
    scale_width: int = 100
    axis_height: int = 30
    label_margin: int = 10
    tick_length: int = 5
    label_offset: int = 10
    font_family: str = "Arial"
    font_size: int = 14
    label_color: Any = (255, 255, 255)
    background: Any = (0, 0, 0)

    grid_step: int = 50
    grid_color: Any = (204, 204, 204)

    width: int = 800
    height: int = 600

    def sanitized(self) -> SpectrogramConfig:
        """
        Return a copy with cosmetic limits applied.

        Values that would break the pipeline raise ``ValueError`` instead of
        being clamped.
        """
        fft_size = int(self.fft_size)
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if float(self.sample_rate) <= 0.0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if float(self.frame_rate) <= 0.0:
            raise ValueError(f"frame_rate must be positive, got {self.frame_rate}")
        if float(self.min_decibels) >= float(self.max_decibels):
            raise ValueError("min_decibels must be below max_decibels")
        return replace(
            self,
            sample_rate=float(self.sample_rate),
            fft_size=fft_size,
            min_decibels=float(self.min_decibels),
            max_decibels=float(self.max_decibels),
            smoothing=max(0.0, min(0.99, float(self.smoothing))),
            frame_rate=float(self.frame_rate),
            initial_scale_mode=ScaleMode.parse(self.initial_scale_mode).value,
            initial_scroll_speed=validate_scroll_speed(self.initial_scroll_speed),
            freq_ticks=max(1, int(self.freq_ticks)),
            time_ticks=max(1, int(self.time_ticks)),
            scale_width=max(0, int(self.scale_width)),
            axis_height=max(0, int(self.axis_height)),
            label_margin=max(0, int(self.label_margin)),
            tick_length=max(0, int(self.tick_length)),
            label_offset=max(0, int(self.label_offset)),
            font_size=max(1, int(self.font_size)),
            label_color=_color(self.label_color),
            background=_color(self.background),
            grid_step=max(0, int(self.grid_step)),
            grid_color=_color(self.grid_color),
            width=max(1, int(self.width)),
            height=max(1, int(self.height)),
        )

    @property
    def total_bins(self) -> int:
        return int(self.fft_size) // 2

    @property
    def nyquist_hz(self) -> float:
        return float(self.sample_rate) / 2.0


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`SpectrogramConfig`."""
    return {f.name for f in fields(SpectrogramConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten an optional top-level ``spectrogram`` block."""
    if "spectrogram" in data and isinstance(data["spectrogram"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "spectrogram":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> SpectrogramConfig:
    """Build :class:`SpectrogramConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return SpectrogramConfig().sanitized()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return SpectrogramConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> SpectrogramConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`SpectrogramConfig`.
    """
    if path is None:
        return SpectrogramConfig().sanitized()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return SpectrogramConfig().sanitized()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["SpectrogramConfig", "config_from_mapping", "load_config"]
