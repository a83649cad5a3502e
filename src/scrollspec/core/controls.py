"""Control state written by UI widgets and read once per render tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..analysis.axes import (
    MAX_SCROLL_SPEED,
    MIN_SCROLL_SPEED,
    ScaleMode,
    validate_scroll_speed,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControlSnapshot:
    """Immutable view of the controls taken at the start of a tick."""

    scale_mode: ScaleMode
    scroll_speed: int


class RenderControls:
    """
    Scale mode and scroll speed shared between UI controls and the renderer.

    Setters validate at the boundary so the compositor never sees an invalid
    value. ``total_bins`` is bound by the renderer once a frame source reports
    its bin count; log scale is refused while fewer than two bins exist.
    """

    def __init__(
        self,
        scale_mode: ScaleMode | str = ScaleMode.LINEAR,
        scroll_speed: int = 2,
    ) -> None:
        self._scale_mode = ScaleMode.parse(scale_mode)
        self._scroll_speed = validate_scroll_speed(scroll_speed)
        self._total_bins: Optional[int] = None

    @property
    def scale_mode(self) -> ScaleMode:
        return self._scale_mode

    @property
    def scroll_speed(self) -> int:
        return self._scroll_speed

    @property
    def total_bins(self) -> Optional[int]:
        return self._total_bins

    def bind_total_bins(self, total_bins: int) -> None:
        total_bins = int(total_bins)
        if total_bins < 1:
            raise ValueError(f"total_bins must be positive, got {total_bins}")
        if self._scale_mode is ScaleMode.LOG and total_bins < 2:
            raise ValueError(f"log scale needs at least 2 bins, got {total_bins}")
        self._total_bins = total_bins

    def set_scale_mode(self, mode: ScaleMode | str) -> None:
        mode = ScaleMode.parse(mode)
        if mode is ScaleMode.LOG and self._total_bins is not None and self._total_bins < 2:
            raise ValueError(f"log scale needs at least 2 bins, got {self._total_bins}")
        self._scale_mode = mode

    def toggle_scale_mode(self) -> ScaleMode:
        self.set_scale_mode(self._scale_mode.toggled())
        return self._scale_mode

    def set_scroll_speed(self, speed: int) -> None:
        self._scroll_speed = validate_scroll_speed(speed)
        logger.info("Time resolution updated: scroll_speed = %d", self._scroll_speed)

    def set_speed_from_slider(self, slider_value: int) -> int:
        """Apply a slider position; the slider is inverted so 1 scrolls fastest and 10 slowest."""
        value = validate_scroll_speed(slider_value)
        self.set_scroll_speed(MAX_SCROLL_SPEED + 1 - value)
        return self._scroll_speed

    def slider_value(self) -> int:
        """Slider position matching the current speed."""
        return MAX_SCROLL_SPEED + 1 - self._scroll_speed

    def snapshot(self) -> ControlSnapshot:
        return ControlSnapshot(scale_mode=self._scale_mode, scroll_speed=self._scroll_speed)


__all__ = [
    "ControlSnapshot",
    "MAX_SCROLL_SPEED",
    "MIN_SCROLL_SPEED",
    "RenderControls",
    "validate_scroll_speed",
]
