"""Per-tick orchestration of compositing and axis overlays."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..analysis.axes import frequency_ticks, time_ticks
from ..config.runtime import SpectrogramConfig
from ..tools.debug import time_block
from .compositor import ScrollCompositor
from .controls import ControlSnapshot, RenderControls
from .frame_source import CaptureUnavailableError, FrameSource
from .surface import RenderSurface

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """Idle until the source delivers, Streaming afterwards, Stopped is terminal."""

    IDLE = "idle"
    STREAMING = "streaming"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TickResult:
    state: PipelineState
    composited: bool
    controls: Optional[ControlSnapshot] = None


class ResizeHandler:
    """Recreate the pixel buffer for a new viewport and redraw the overlays."""

    def __init__(self, compositor: ScrollCompositor, redraw: Callable[[], None]) -> None:
        self._compositor = compositor
        self._redraw = redraw

    def handle(self, width: int, height: int) -> None:
        # Scrolled history is not migrated; the new buffer starts blank.
        self._compositor.reset(width, height)
        logger.debug("Pixel buffer reset to %dx%d", width, height)
        self._redraw()


class Renderer:
    """
    Drive one spectrogram frame per call to :meth:`tick`.

    The host owns the frame clock (a Qt timer, a test loop...) and calls
    :meth:`tick` once per display refresh. Control changes made between ticks
    take effect at the start of the next one.
    """

    def __init__(
        self,
        source: FrameSource,
        surface: RenderSurface,
        *,
        config: SpectrogramConfig | None = None,
        controls: RenderControls | None = None,
    ) -> None:
        self.config = (config or SpectrogramConfig()).sanitized()
        self.source = source
        self.surface = surface
        self.controls = controls or RenderControls(
            scale_mode=self.config.initial_scale_mode,
            scroll_speed=self.config.initial_scroll_speed,
        )
        self.compositor = ScrollCompositor(
            surface.width,
            surface.height,
            background=self.config.background,
            grid_step=self.config.grid_step,
            grid_color=self.config.grid_color,
        )
        self.resize_handler = ResizeHandler(self.compositor, self.redraw)
        self.state = PipelineState.IDLE
        self.capture_error: Optional[CaptureUnavailableError] = None

    # ------------------------------------------------------------ lifecycle
    def start(self) -> bool:
        """
        Ask the frame source for access and enter the Streaming state.

        Capture failures are logged and leave the pipeline Idle for the rest of
        the session; overlays keep rendering over a blank image and later calls
        do not ask the source again. Returns True when streaming.
        """
        if self.state is not PipelineState.IDLE:
            return self.state is PipelineState.STREAMING
        if self.capture_error is not None:
            logger.debug("Audio input already failed this session; not retrying")
            return False
        try:
            self.source.start()
        except CaptureUnavailableError as exc:
            self.capture_error = exc
            logger.error("Error accessing audio input: %s", exc)
            self.redraw()
            return False

        try:
            self.controls.bind_total_bins(self.source.total_bins)
        except ValueError:
            self.source.stop()
            raise
        self.capture_error = None
        self.state = PipelineState.STREAMING
        logger.info(
            "Streaming %d bins at %.0f Hz sample rate",
            self.source.total_bins,
            float(self.source.sample_rate),
        )
        return True

    def stop(self) -> None:
        """Cancel the pipeline; later ticks do nothing."""
        if self.state is PipelineState.STOPPED:
            return
        self.source.stop()
        self.state = PipelineState.STOPPED
        logger.info("Renderer stopped")

    # ----------------------------------------------------------------- tick
    def tick(self) -> TickResult:
        if self.state is PipelineState.STOPPED:
            return TickResult(state=self.state, composited=False)

        snapshot = self.controls.snapshot()
        if (self.compositor.width, self.compositor.height) != (
            self.surface.width,
            self.surface.height,
        ):
            self.resize(self.surface.width, self.surface.height)

        composited = False
        if self.state is PipelineState.STREAMING:
            viewport = (self.compositor.width, self.compositor.height)
            frame = self.source.get_frequency_bins()
            if self._viewport_changed(viewport):
                # A resize landed while the frame was fetched; it wins and
                # this frame is dropped.
                logger.debug("Discarding frame fetched across a resize")
                self.resize(self.surface.width, self.surface.height)
            # No frame yet (e.g. capture still warming up): skip this tick.
            elif frame is not None:
                with time_block("composite"):
                    self.compositor.composite(
                        frame, snapshot.scale_mode, snapshot.scroll_speed
                    )
                composited = True

        with time_block("overlays"):
            self._present(snapshot)
        return TickResult(state=self.state, composited=composited, controls=snapshot)

    # ------------------------------------------------------------- geometry
    def _viewport_changed(self, viewport: tuple[int, int]) -> bool:
        current = {
            (self.compositor.width, self.compositor.height),
            (self.surface.width, self.surface.height),
        }
        return current != {viewport}

    def resize(self, width: int | None = None, height: int | None = None) -> None:
        """Viewport changed: reset the buffer and redraw against the new size."""
        width = self.surface.width if width is None else int(width)
        height = self.surface.height if height is None else int(height)
        self.resize_handler.handle(width, height)

    def redraw(self) -> None:
        """Repaint buffer and overlays without advancing the scroll."""
        if self.state is PipelineState.STOPPED:
            return
        self._present(self.controls.snapshot())

    # ------------------------------------------------------------- overlays
    def _present(self, snapshot: ControlSnapshot) -> None:
        self.surface.put_region(self.compositor.buffer, 0, 0)
        self.draw_frequency_scale(snapshot)
        self.draw_time_axis(snapshot)

    @property
    def max_frequency(self) -> float:
        """Nyquist frequency of the current source."""
        return float(self.source.sample_rate) / 2.0

    def draw_frequency_scale(self, snapshot: ControlSnapshot) -> None:
        cfg = self.config
        height = self.surface.height
        self.surface.clear_rect(0, 0, cfg.scale_width, height)
        ticks = frequency_ticks(
            height,
            self.max_frequency,
            snapshot.scale_mode,
            count=cfg.freq_ticks,
            total_bins=self.controls.total_bins,
        )
        x = cfg.scale_width - cfg.label_margin
        for tick in ticks:
            self.surface.text(
                tick.label, x, tick.y, color=cfg.label_color, align="right", baseline="middle"
            )

    def draw_time_axis(self, snapshot: ControlSnapshot) -> None:
        cfg = self.config
        width, height = self.surface.width, self.surface.height
        top = height - cfg.axis_height
        self.surface.clear_rect(0, top, width, cfg.axis_height)
        ticks = time_ticks(width, snapshot.scroll_speed, cfg.frame_rate, count=cfg.time_ticks)
        for tick in ticks:
            self.surface.line(tick.x, top, tick.x, top + cfg.tick_length, cfg.label_color)
            self.surface.text(
                tick.label,
                tick.x,
                top + cfg.label_offset,
                color=cfg.label_color,
                align="center",
                baseline="top",
            )


__all__ = ["PipelineState", "Renderer", "ResizeHandler", "TickResult"]
