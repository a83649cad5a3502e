"""Qt application entry point for the live spectrogram.

This module wires up argument parsing and logging, loads the YAML
configuration, picks a frame source, builds the
:class:`~scrollspec.gui.main_window.MainWindow` and starts the Qt event loop.
All GUI launches, whether through ``python main.py``, the ``scrollspec``
console script or ``python -m scrollspec.gui.application``, flow through
``main()`` here.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Tuple

from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication

from ..config.runtime import SpectrogramConfig, load_config
from ..core.frame_source import DemoFrameSource, FrameSource, MicFrameSource
from .benchmark import BenchmarkDriver, BenchmarkOptions
from .main_window import MainWindow


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrolling live-audio spectrogram")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with spectrogram settings",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use a synthetic signal instead of the microphone",
    )
    parser.add_argument(
        "--device",
        type=str,
        default=None,
        help="Audio input device name or index",
    )
    parser.add_argument(
        "--log-scale",
        action="store_true",
        help="Start with a logarithmic frequency axis",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=None,
        help="Initial scroll speed in pixels per frame (1-10)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Run the demo source and log frame timings, then quit",
    )
    parser.add_argument(
        "--bench-duration",
        type=float,
        default=30.0,
        help="Benchmark duration in seconds (default: 30)",
    )
    parser.add_argument(
        "--bench-log-interval",
        type=float,
        default=1.0,
        help="Seconds between benchmark log snapshots (default: 1.0)",
    )
    parser.add_argument(
        "--bench-csv",
        type=str,
        default="benchmark_results.csv",
        help="CSV file for benchmark metrics (default: benchmark_results.csv)",
    )
    parser.add_argument(
        "--bench-no-csv",
        action="store_true",
        help="Skip writing benchmark metrics to CSV",
    )
    parser.add_argument(
        "--bench-keep-open",
        action="store_true",
        help="Keep the window open after the benchmark completes",
    )
    return parser


def _parse_cli_args(
    argv: list[str],
) -> tuple[argparse.Namespace, list[str]]:
    parser = _build_arg_parser()
    args, qt_args = parser.parse_known_args(argv[1:])
    qt_argv = [argv[0], *qt_args]
    return args, qt_argv


def build_config(args: argparse.Namespace) -> SpectrogramConfig:
    """Load the YAML config and apply command-line overrides."""
    config = load_config(args.config)
    overrides = {}
    if args.device is not None:
        overrides["input_device"] = args.device
    if args.log_scale:
        overrides["initial_scale_mode"] = "log"
    if args.speed is not None:
        overrides["initial_scroll_speed"] = args.speed
    return replace(config, **overrides).sanitized()


def create_source(args: argparse.Namespace, config: SpectrogramConfig) -> FrameSource:
    analyser_kwargs = dict(
        min_decibels=config.min_decibels,
        max_decibels=config.max_decibels,
        smoothing=config.smoothing,
    )
    if args.demo or args.benchmark:
        return DemoFrameSource(
            config.sample_rate,
            config.fft_size,
            frame_rate=config.frame_rate,
            **analyser_kwargs,
        )
    device: str | int | None = config.input_device
    if isinstance(device, str) and device.isdigit():
        device = int(device)
    return MicFrameSource(config.sample_rate, config.fft_size, device=device, **analyser_kwargs)


def create_app(
    argv: list[str] | None = None,
    *,
    source: FrameSource,
    config: SpectrogramConfig | None = None,
) -> Tuple[QApplication, MainWindow]:
    """
    Create the QApplication and the spectrogram window.

    Returns
    -------
    app:
        The QApplication instance (owned by caller).
    window:
        The main window; call :meth:`MainWindow.start` after showing it.
    """
    qt_args = argv if argv is not None else sys.argv
    app = QApplication.instance() or QApplication(qt_args)

    # Suppress noisy QObject::connect warnings from QStyleHints and similar internals
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")

    window = MainWindow(source, config)
    return app, window


def main(argv: list[str] | None = None) -> None:
    raw_argv = argv if argv is not None else sys.argv
    args, qt_argv = _parse_cli_args(raw_argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = build_config(args)
    source = create_source(args, config)
    app, win = create_app(qt_argv, source=source, config=config)

    benchmark_driver: BenchmarkDriver | None = None
    if args.benchmark:
        csv_path = None
        if not args.bench_no_csv:
            csv_path = Path(args.bench_csv).expanduser().resolve()
        benchmark_driver = BenchmarkDriver(
            app=app,
            window=win,
            options=BenchmarkOptions(
                duration_s=float(args.bench_duration),
                log_interval_s=max(0.1, float(args.bench_log_interval)),
                csv_path=csv_path,
                keep_open=bool(args.bench_keep_open),
            ),
        )

    win.resize(config.width, config.height)
    win.show()
    win.start()
    if benchmark_driver is not None:
        benchmark_driver.start()
    raise SystemExit(app.exec())


if __name__ == "__main__":
    main()
