import pathlib
import sys

import numpy as np
import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scrollspec.analysis.spectrum import ByteSpectrumAnalyser  # noqa: E402
from scrollspec.core.frame_source import (  # noqa: E402
    CaptureUnavailableError,
    DemoFrameSource,
    MicFrameSource,
    ReplayFrameSource,
)


def test_analyser_silence_is_zero() -> None:
    analyser = ByteSpectrumAnalyser(2048)
    frame = analyser.process(np.zeros(2048))
    assert frame.dtype == np.uint8
    assert frame.shape == (1024,)
    assert not frame.any()


def test_analyser_locates_sine_peak() -> None:
    sr, n = 48000.0, 2048
    analyser = ByteSpectrumAnalyser(n, smoothing=0.0)
    t = np.arange(n) / sr
    frame = analyser.process(0.001 * np.sin(2 * np.pi * 3000.0 * t))
    # 3 kHz at 23.4375 Hz per bin
    assert abs(int(np.argmax(frame)) - 128) <= 1
    assert frame.max() > 0


def test_analyser_pads_short_blocks() -> None:
    analyser = ByteSpectrumAnalyser(64, smoothing=0.0)
    assert analyser.process(np.ones(10)).shape == (32,)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fft_size": 1000},
        {"fft_size": 16},
        {"fft_size": 2048, "min_decibels": -30, "max_decibels": -100},
        {"fft_size": 2048, "smoothing": 1.0},
    ],
)
def test_analyser_rejects_bad_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        ByteSpectrumAnalyser(**kwargs)


def test_demo_source_produces_frames_after_start() -> None:
    source = DemoFrameSource(48000.0, 2048, frame_rate=60.0, seed=1)
    assert source.total_bins == 1024
    assert source.get_frequency_bins() is None
    source.start()
    first = source.get_frequency_bins()
    second = source.get_frequency_bins()
    assert first.shape == (1024,)
    assert first.dtype == np.uint8
    assert first.any()
    assert not np.array_equal(first, second)
    source.stop()
    assert source.get_frequency_bins() is None


def test_replay_source_exhausts() -> None:
    source = ReplayFrameSource([[1, 2], [3, 4]])
    assert source.total_bins == 2
    assert source.get_frequency_bins() is None
    source.start()
    assert list(source.get_frequency_bins()) == [1, 2]
    assert list(source.get_frequency_bins()) == [3, 4]
    assert source.get_frequency_bins() is None


def test_replay_source_loops() -> None:
    source = ReplayFrameSource([[1], [2]], loop=True)
    source.start()
    assert [int(source.get_frequency_bins()[0]) for _ in range(5)] == [1, 2, 1, 2, 1]


def test_replay_source_validates_frames() -> None:
    with pytest.raises(ValueError):
        ReplayFrameSource([])
    with pytest.raises(ValueError):
        ReplayFrameSource([[1, 2], [3]])


def test_mic_source_without_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "sounddevice", None)
    source = MicFrameSource(48000.0, 2048)
    assert source.total_bins == 1024
    assert source.get_frequency_bins() is None
    with pytest.raises(CaptureUnavailableError):
        source.start()
    assert source.active is False
    source.stop()
