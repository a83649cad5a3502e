import pathlib
import sys

import numpy as np
import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from scrollspec.core.surface import ArraySurface, clip_rect, to_pixel  # noqa: E402
from scrollspec.tools import debug  # noqa: E402


def test_to_pixel_rounds_half_up() -> None:
    assert to_pixel(2.5) == 3
    assert to_pixel(2.49) == 2
    assert to_pixel(-0.5) == 0


def test_clip_rect_bounds() -> None:
    assert clip_rect(-5, -5, 20, 20, 10, 8) == (0, 0, 10, 8)
    assert clip_rect(4, 2, -2, 3, 10, 8) == (2, 2, 4, 5)


def test_put_and_get_region() -> None:
    surface = ArraySurface(6, 4)
    patch = np.full((2, 3, 3), 7, dtype=np.uint8)
    surface.put_region(patch, 4, 1)
    region = surface.get_region(0, 0, 6, 4)
    assert region.shape == (4, 6, 3)
    # clipped at the right edge
    assert np.all(region[1:3, 4:6] == 7)
    assert not region[:, :4].any()


def test_pixel_writes_replace_labels_beneath() -> None:
    surface = ArraySurface(100, 100)
    surface.text("kept", 90, 10, color=(255, 255, 255))
    surface.text("gone", 10, 100, color=(255, 255, 255), baseline="bottom")
    surface.clear_rect(0, 70, 100, 30)
    assert surface.labels() == ["kept"]


def test_line_is_rasterised() -> None:
    surface = ArraySurface(10, 10)
    surface.line(2, 3, 2, 6, (255, 0, 0))
    assert [tuple(surface.pixels[y, 2]) for y in range(3, 7)] == [(255, 0, 0)] * 4
    assert tuple(surface.pixels[7, 2]) == (0, 0, 0)


def test_text_validates_alignment() -> None:
    surface = ArraySurface(10, 10)
    with pytest.raises(ValueError):
        surface.text("x", 0, 0, color=(0, 0, 0), align="justify")
    with pytest.raises(ValueError):
        surface.text("x", 0, 0, color=(0, 0, 0), baseline="hanging")


def test_resize_rejects_empty_surface() -> None:
    surface = ArraySurface(10, 10)
    with pytest.raises(ValueError):
        surface.resize(0, 10)


def test_time_block_reports_when_enabled(monkeypatch: pytest.MonkeyPatch) -> None:
    messages = []
    monkeypatch.setattr(debug, "DEBUG_SCROLLSPEC", True)
    with debug.time_block("composite", emitter=messages.append):
        pass
    assert len(messages) == 1
    assert messages[0].startswith("[timing] composite took")


def test_time_block_silent_by_default(monkeypatch: pytest.MonkeyPatch) -> None:
    messages = []
    monkeypatch.setattr(debug, "DEBUG_SCROLLSPEC", False)
    with debug.time_block("composite", emitter=messages.append):
        pass
    assert messages == []
    assert debug.debug_enabled() is False
