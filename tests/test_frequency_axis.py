import pathlib
import sys
import warnings

import numpy as np
import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scrollspec.analysis.axes import (  # noqa: E402
    ScaleMode,
    bin_row_edges,
    bin_to_y,
    format_frequency,
    frequency_ticks,
    y_to_frequency,
)

HEIGHT = 600
TOTAL_BINS = 1024
NYQUIST = 24000.0


@pytest.mark.parametrize("mode", [ScaleMode.LINEAR, ScaleMode.LOG])
def test_bin_to_y_spans_full_height(mode: ScaleMode) -> None:
    assert bin_to_y(0, TOTAL_BINS, HEIGHT, mode) == pytest.approx(HEIGHT)
    assert bin_to_y(TOTAL_BINS, TOTAL_BINS, HEIGHT, mode) == pytest.approx(0.0, abs=0.1)


@pytest.mark.parametrize("mode", [ScaleMode.LINEAR, ScaleMode.LOG])
def test_bin_to_y_strictly_decreasing(mode: ScaleMode) -> None:
    y = bin_to_y(np.arange(TOTAL_BINS + 1), TOTAL_BINS, HEIGHT, mode)
    assert np.all(np.diff(y) < 0)


def test_log_scale_bin_zero_has_no_division_by_zero() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert bin_to_y(0, 2, HEIGHT, "log") == pytest.approx(HEIGHT)


def test_log_scale_needs_two_bins() -> None:
    with pytest.raises(ValueError):
        bin_to_y(0, 1, HEIGHT, ScaleMode.LOG)
    # linear scale copes with a single bin
    assert bin_to_y(1, 1, HEIGHT, ScaleMode.LINEAR) == pytest.approx(0.0)


def test_unknown_scale_mode_rejected() -> None:
    with pytest.raises(ValueError):
        bin_to_y(0, TOTAL_BINS, HEIGHT, "mel")


@pytest.mark.parametrize("mode", [ScaleMode.LINEAR, ScaleMode.LOG])
def test_inverse_recovers_bin_frequency(mode: ScaleMode) -> None:
    bins = np.arange(TOTAL_BINS)
    y = bin_to_y(bins, TOTAL_BINS, HEIGHT, mode)
    freq = y_to_frequency(y, HEIGHT, NYQUIST, mode, total_bins=TOTAL_BINS)
    bin_width = NYQUIST / TOTAL_BINS
    centers = (bins + 0.5) * bin_width
    assert np.all(np.abs(freq - centers) <= bin_width)


def test_linear_inverse_formula() -> None:
    assert y_to_frequency(0, HEIGHT, NYQUIST, "linear") == pytest.approx(NYQUIST)
    assert y_to_frequency(HEIGHT / 2, HEIGHT, NYQUIST, "linear") == pytest.approx(NYQUIST / 2)
    assert y_to_frequency(HEIGHT, HEIGHT, NYQUIST, "linear") == pytest.approx(0.0)


def test_log_inverse_without_bin_count_uses_frequency_range() -> None:
    assert y_to_frequency(0, HEIGHT, NYQUIST, "log") == pytest.approx(NYQUIST)
    assert y_to_frequency(HEIGHT, HEIGHT, NYQUIST, "log") == pytest.approx(1.0)
    middle = y_to_frequency(HEIGHT / 2, HEIGHT, NYQUIST, "log")
    assert middle == pytest.approx(np.sqrt(NYQUIST))


@pytest.mark.parametrize("mode", [ScaleMode.LINEAR, ScaleMode.LOG])
@pytest.mark.parametrize("height", [600, 37, 1])
def test_row_edges_tile_height_exactly(mode: ScaleMode, height: int) -> None:
    edges = bin_row_edges(TOTAL_BINS, height, mode)
    assert edges.shape == (TOTAL_BINS + 1,)
    assert edges[0] == height
    assert edges[-1] == 0
    spans = edges[:-1] - edges[1:]
    assert np.all(spans >= 0)
    assert spans.sum() == height


def test_frequency_ticks_linear_labels() -> None:
    ticks = frequency_ticks(HEIGHT, NYQUIST, ScaleMode.LINEAR, count=10)
    assert len(ticks) == 11
    assert [t.y for t in ticks[:2]] == [0.0, 60.0]
    assert ticks[0].label == "24.0kHz"
    assert ticks[5].label == "12.0kHz"
    assert ticks[-1].label == "0Hz"


def test_frequency_ticks_log_labels_follow_bins() -> None:
    ticks = frequency_ticks(HEIGHT, NYQUIST, ScaleMode.LOG, count=10, total_bins=TOTAL_BINS)
    freqs = [t.frequency_hz for t in ticks]
    # the top row sits on the lower edge of the highest bin
    assert freqs[0] == pytest.approx((TOTAL_BINS - 1) * NYQUIST / TOTAL_BINS)
    assert freqs[-1] == pytest.approx(0.0)
    assert all(a > b for a, b in zip(freqs, freqs[1:]))
    # halfway up the image sits bin sqrt(1024) - 1 = 31
    assert freqs[5] == pytest.approx(31 * NYQUIST / TOTAL_BINS)


def test_format_frequency() -> None:
    assert format_frequency(440.0) == "440Hz"
    assert format_frequency(440.5) == "441Hz"
    assert format_frequency(1000.0) == "1.0kHz"
    assert format_frequency(22500.0) == "22.5kHz"
