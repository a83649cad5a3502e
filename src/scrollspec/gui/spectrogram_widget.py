"""Qt widget hosting the renderer: frame clock, resize and paint handling."""

from __future__ import annotations

import logging
import time

from PySide6.QtCore import QTimer, Qt, Signal, Slot
from PySide6.QtGui import QCloseEvent, QPainter, QPaintEvent, QResizeEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from ..config.runtime import SpectrogramConfig
from ..core.frame_source import FrameSource
from ..core.renderer import PipelineState, Renderer, TickResult
from .perf_metrics import PlotPerfStats
from .qt_surface import QImageSurface

logger = logging.getLogger(__name__)


class SpectrogramWidget(QWidget):
    """
    Scrolling spectrogram view.

    A precise :class:`QTimer` acts as the frame clock and calls
    :meth:`Renderer.tick` once per interval; ``resizeEvent`` forwards viewport
    changes to the renderer so the pixel buffer always matches the widget.
    """

    frameRendered = Signal(object)

    def __init__(
        self,
        source: FrameSource,
        config: SpectrogramConfig | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._config = (config or SpectrogramConfig()).sanitized()
        self.surface = QImageSurface(
            self._config.width,
            self._config.height,
            background=self._config.background,
            font_family=self._config.font_family,
            font_size=self._config.font_size,
        )
        self.renderer = Renderer(source, self.surface, config=self._config)
        self.perf = PlotPerfStats()

        self.setAttribute(Qt.WA_OpaquePaintEvent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(self._config.scale_width + 50, self._config.axis_height + 50)
        self.resize(self._config.width, self._config.height)

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.setInterval(max(1, int(round(1000.0 / self._config.frame_rate))))
        self._timer.timeout.connect(self._on_tick)

    @property
    def state(self) -> PipelineState:
        return self.renderer.state

    def start(self) -> bool:
        """Request capture and start the frame clock; overlays run even when Idle."""
        streaming = self.renderer.start()
        if not self._timer.isActive():
            self._timer.start()
        return streaming

    def stop(self) -> None:
        self._timer.stop()
        self.renderer.stop()

    @Slot()
    def _on_tick(self) -> None:
        start = time.perf_counter()
        result: TickResult = self.renderer.tick()
        self.perf.record_frame(start, time.perf_counter(), result.composited)
        if result.state is PipelineState.STOPPED:
            self._timer.stop()
        self.update()
        self.frameRendered.emit(result)

    def resizeEvent(self, event: QResizeEvent) -> None:
        size = event.size()
        width, height = max(1, size.width()), max(1, size.height())
        if (width, height) != (self.surface.width, self.surface.height):
            self.surface.resize(width, height)
            self.renderer.resize(width, height)
        super().resizeEvent(event)

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        try:
            painter.drawImage(0, 0, self.surface.image)
        finally:
            painter.end()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.stop()
        super().closeEvent(event)


__all__ = ["SpectrogramWidget"]
