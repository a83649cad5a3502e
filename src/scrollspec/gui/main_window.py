"""Main window: spectrogram view plus scale toggle and speed slider."""

from __future__ import annotations

import logging

from PySide6.QtCore import QTimer, Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..analysis.axes import MAX_SCROLL_SPEED, MIN_SCROLL_SPEED, ScaleMode
from ..config.runtime import SpectrogramConfig
from ..core.frame_source import FrameSource
from ..core.renderer import PipelineState
from .spectrogram_widget import SpectrogramWidget

STATUS_INTERVAL_MS = 500


class MainWindow(QMainWindow):
    """Main window for the live spectrogram."""

    def __init__(
        self,
        source: FrameSource,
        config: SpectrogramConfig | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Live Spectrogram")
        self._logger = logging.getLogger(__name__)
        self._config = (config or SpectrogramConfig()).sanitized()

        self.spectrogram = SpectrogramWidget(source, self._config, parent=self)
        self._controls = self.spectrogram.renderer.controls

        self.scale_button = QPushButton()
        self.scale_button.clicked.connect(self._on_toggle_scale)

        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(MIN_SCROLL_SPEED, MAX_SCROLL_SPEED)
        self.speed_slider.setValue(self._controls.slider_value())
        self.speed_slider.valueChanged.connect(self._on_speed_slider)

        self._status_label = QLabel("Waiting for audio...")

        controls_row = QHBoxLayout()
        controls_row.addWidget(self.scale_button)
        controls_row.addWidget(QLabel("Time resolution:"))
        controls_row.addWidget(self.speed_slider)
        controls_row.addStretch()
        controls_row.addWidget(self._status_label)

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(controls_row)
        layout.addWidget(self.spectrogram, stretch=1)
        self.setCentralWidget(container)

        self._update_scale_button()

        self._status_timer = QTimer(self)
        self._status_timer.setInterval(STATUS_INTERVAL_MS)
        self._status_timer.timeout.connect(self._refresh_status)

    def start(self) -> None:
        streaming = self.spectrogram.start()
        if not streaming:
            self._logger.warning("Audio input unavailable; showing axes only.")
        self._status_timer.start()
        self._refresh_status()

    def _update_scale_button(self) -> None:
        if self._controls.scale_mode is ScaleMode.LOG:
            self.scale_button.setText(self.tr("Switch to Linear Scale"))
        else:
            self.scale_button.setText(self.tr("Switch to Logarithmic Scale"))

    @Slot()
    def _on_toggle_scale(self) -> None:
        try:
            mode = self._controls.toggle_scale_mode()
        except ValueError:
            self._logger.exception("Cannot switch frequency scale")
            return
        self._logger.info("Frequency scale set to %s", mode.value)
        self._update_scale_button()

    @Slot(int)
    def _on_speed_slider(self, value: int) -> None:
        self._controls.set_speed_from_slider(int(value))

    @Slot()
    def _refresh_status(self) -> None:
        state = self.spectrogram.state
        if state is PipelineState.STREAMING:
            fps = self.spectrogram.perf.compute_fps()
            self._status_label.setText(f"{fps:4.1f} fps")
        elif self.spectrogram.renderer.capture_error is not None:
            self._status_label.setText("Audio input unavailable")
        else:
            self._status_label.setText(state.value.capitalize())

    def closeEvent(self, event: QCloseEvent) -> None:
        self._status_timer.stop()
        self.spectrogram.stop()
        super().closeEvent(event)


__all__ = ["MainWindow"]
