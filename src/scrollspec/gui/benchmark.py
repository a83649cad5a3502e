"""Synthetic benchmark mode: run the demo source and log render timings."""

from __future__ import annotations

import csv
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import psutil
from PySide6.QtCore import QObject, QTimer, Qt
from PySide6.QtWidgets import QApplication

from .main_window import MainWindow

logger = logging.getLogger(__name__)

FIELDNAMES = ["t", "fps", "avg_frame_ms", "max_frame_ms", "skipped_ratio", "cpu_percent"]


@dataclass
class BenchmarkOptions:
    duration_s: float = 30.0
    log_interval_s: float = 1.0
    # None means: "no CSV logging unless caller explicitly passes a Path"
    csv_path: Optional[Path] = None
    keep_open: bool = False


class BenchmarkDriver(QObject):
    """Sample the window's frame statistics periodically and quit when done."""

    def __init__(
        self,
        app: QApplication,
        window: MainWindow,
        options: BenchmarkOptions,
    ) -> None:
        super().__init__(window)
        self._app = app
        self._window = window
        self._options = options
        self._process = psutil.Process(os.getpid())
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        interval_ms = int(max(100, round(options.log_interval_s * 1000.0)))
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)
        self._start_monotonic: float = 0.0
        self._rows: list[dict[str, float]] = []
        self._started = False
        self._finished = False

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._window.spectrogram.perf.reset()
        self._process.cpu_percent(interval=None)
        self._start_monotonic = time.perf_counter()
        self._timer.start()
        logger.info("[benchmark] running for %.1f s", self._options.duration_s)
        if self._options.duration_s <= 0.0:
            QTimer.singleShot(0, self._finish)

    def _cpu_percent(self) -> float:
        try:
            return float(self._process.cpu_percent(interval=None))
        except psutil.Error as exc:  # pragma: no cover - metrics are best-effort
            logger.warning("Failed to read process CPU percent: %r", exc)
            return 0.0

    def _on_tick(self) -> None:
        elapsed = time.perf_counter() - self._start_monotonic
        row = {"t": elapsed, **self._window.spectrogram.perf.as_dict(), "cpu_percent": self._cpu_percent()}
        self._rows.append(row)
        logger.info(
            "[benchmark] t=%5.1fs fps=%5.1f frame=%5.2f/%5.2fms skipped=%4.2f cpu=%5.1f%%",
            elapsed,
            row["fps"],
            row["avg_frame_ms"],
            row["max_frame_ms"],
            row["skipped_ratio"],
            row["cpu_percent"],
        )
        if elapsed >= self._options.duration_s:
            self._finish()

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._timer.stop()
        if self._options.csv_path and self._rows:
            self._write_csv(self._options.csv_path)
        logger.info("[benchmark] completed; duration %.1f s", self._options.duration_s)
        if not self._options.keep_open:
            self._window.close()
            self._app.quit()

    def _write_csv(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=FIELDNAMES)
            writer.writeheader()
            writer.writerows({k: row.get(k, 0.0) for k in FIELDNAMES} for row in self._rows)
        logger.info("[benchmark] metrics written to %s", path)
