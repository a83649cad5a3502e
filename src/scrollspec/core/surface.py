"""Rendering surface interface and a NumPy-backed headless implementation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Protocol, Tuple

import numpy as np

Color = Tuple[int, int, int]

ALIGNMENTS = ("left", "center", "right")
BASELINES = ("top", "middle", "bottom")


class RenderSurface(Protocol):
    """Drawing target used by the renderer (a canvas, a QImage, an array...)."""

    @property
    def width(self) -> int:  # pragma: no cover - protocol
        ...

    @property
    def height(self) -> int:  # pragma: no cover - protocol
        ...

    def get_region(self, x: int, y: int, w: int, h: int) -> np.ndarray:  # pragma: no cover - protocol
        ...

    def put_region(self, data: np.ndarray, x: int, y: int) -> None:  # pragma: no cover - protocol
        ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:  # pragma: no cover - protocol
        ...

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:  # pragma: no cover - protocol
        ...

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color) -> None:  # pragma: no cover - protocol
        ...

    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        color: Color,
        align: str = "left",
        baseline: str = "top",
    ) -> None:  # pragma: no cover - protocol
        ...


def to_pixel(value: float) -> int:
    """Round a canvas coordinate to the nearest pixel boundary (halves round up)."""
    return int(math.floor(float(value) + 0.5))


def clip_rect(x: float, y: float, w: float, h: float, width: int, height: int) -> Tuple[int, int, int, int]:
    """Return ``(x0, y0, x1, y1)`` pixel bounds clipped to the surface."""
    x0, x1 = sorted((to_pixel(x), to_pixel(x + w)))
    y0, y1 = sorted((to_pixel(y), to_pixel(y + h)))
    x0 = max(0, min(width, x0))
    x1 = max(0, min(width, x1))
    y0 = max(0, min(height, y0))
    y1 = max(0, min(height, y1))
    return x0, y0, x1, y1


@dataclass(frozen=True)
class DrawnText:
    text: str
    x: float
    y: float
    color: Color
    align: str
    baseline: str


class ArraySurface:
    """
    Headless surface storing pixels in an ``(height, width, 3)`` uint8 array.

    Text is not rasterised; each label is kept in :attr:`texts` until a pixel
    operation covering its anchor point overwrites it.
    """

    def __init__(self, width: int, height: int, *, background: Color = (0, 0, 0)) -> None:
        self.background: Color = tuple(int(c) for c in background)  # type: ignore[assignment]
        self.texts: List[DrawnText] = []
        self.pixels = np.zeros((0, 0, 3), dtype=np.uint8)
        self.resize(width, height)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        self.pixels = np.empty((int(height), int(width), 3), dtype=np.uint8)
        self.pixels[:, :] = self.background
        self.texts = []

    def _drop_texts(self, x0: int, y0: int, x1: int, y1: int) -> None:
        self.texts = [t for t in self.texts if not (x0 <= t.x <= x1 and y0 <= t.y <= y1)]

    def get_region(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        x0, y0, x1, y1 = clip_rect(x, y, w, h, self.width, self.height)
        return self.pixels[y0:y1, x0:x1].copy()

    def put_region(self, data: np.ndarray, x: int, y: int) -> None:
        region = np.asarray(data, dtype=np.uint8)
        rh, rw = region.shape[:2]
        x0, y0, x1, y1 = clip_rect(x, y, rw, rh, self.width, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        sx, sy = x0 - int(x), y0 - int(y)
        self.pixels[y0:y1, x0:x1] = region[sy : sy + (y1 - y0), sx : sx + (x1 - x0), :3]
        self._drop_texts(x0, y0, x1, y1)

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        x0, y0, x1, y1 = clip_rect(x, y, w, h, self.width, self.height)
        self.pixels[y0:y1, x0:x1] = color
        self._drop_texts(x0, y0, x1, y1)

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.fill_rect(x, y, w, h, self.background)

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color) -> None:
        steps = max(abs(to_pixel(x1) - to_pixel(x0)), abs(to_pixel(y1) - to_pixel(y0))) + 1
        xs = np.floor(np.linspace(x0, x1, steps) + 0.5).astype(np.intp)
        ys = np.floor(np.linspace(y0, y1, steps) + 0.5).astype(np.intp)
        inside = (xs >= 0) & (xs < self.width) & (ys >= 0) & (ys < self.height)
        self.pixels[ys[inside], xs[inside]] = color

    def text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        color: Color,
        align: str = "left",
        baseline: str = "top",
    ) -> None:
        if align not in ALIGNMENTS:
            raise ValueError(f"Unknown text alignment: {align!r}")
        if baseline not in BASELINES:
            raise ValueError(f"Unknown text baseline: {baseline!r}")
        self.texts.append(DrawnText(str(text), float(x), float(y), color, align, baseline))

    def labels(self) -> List[str]:
        return [t.text for t in self.texts]


__all__ = [
    "ALIGNMENTS",
    "ArraySurface",
    "BASELINES",
    "Color",
    "DrawnText",
    "RenderSurface",
    "clip_rect",
    "to_pixel",
]
