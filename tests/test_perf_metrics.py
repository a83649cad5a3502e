import pathlib
import sys

import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scrollspec.gui.perf_metrics import MAX_SAMPLES_PERF, PlotPerfStats  # noqa: E402


def test_empty_stats_are_zero() -> None:
    stats = PlotPerfStats()
    assert stats.as_dict() == {
        "fps": 0.0,
        "avg_frame_ms": 0.0,
        "max_frame_ms": 0.0,
        "skipped_ratio": 0.0,
    }


def test_fps_and_durations() -> None:
    stats = PlotPerfStats()
    for i in range(11):
        start = i * 0.1
        stats.record_frame(start, start + 0.002 * (1 + i % 2), composited=i % 2 == 0)
    assert stats.compute_fps() == pytest.approx(10.0, rel=0.05)
    assert stats.max_frame_ms() == pytest.approx(4.0)
    assert 2.0 < stats.avg_frame_ms() < 4.0
    assert stats.skipped_ratio() == pytest.approx(5 / 11)


def test_history_is_bounded() -> None:
    stats = PlotPerfStats()
    for i in range(MAX_SAMPLES_PERF + 50):
        stats.record_frame(float(i), float(i) + 0.001)
    assert len(stats.frame_times) == MAX_SAMPLES_PERF
    stats.reset()
    assert stats.compute_fps() == 0.0
