"""QImage-backed rendering surface for the desktop GUI."""

from __future__ import annotations

import numpy as np
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPen

from ..core.surface import ALIGNMENTS, BASELINES, Color, clip_rect


class QImageSurface:
    """
    Rendering surface drawing into an RGB888 :class:`QImage`.

    Pixel regions are read and written through a NumPy view of the image
    bits; lines and text go through :class:`QPainter`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        background: Color = (0, 0, 0),
        font_family: str = "Arial",
        font_size: int = 14,
    ) -> None:
        self.background = tuple(int(c) for c in background)
        self._font = QFont(font_family)
        self._font.setPixelSize(int(font_size))
        self._metrics = QFontMetricsF(self._font)
        self._image = QImage()
        self.resize(width, height)

    @property
    def width(self) -> int:
        return int(self._image.width())

    @property
    def height(self) -> int:
        return int(self._image.height())

    @property
    def image(self) -> QImage:
        return self._image

    def resize(self, width: int, height: int) -> None:
        width, height = max(1, int(width)), max(1, int(height))
        self._image = QImage(width, height, QImage.Format_RGB888)
        self._image.fill(QColor(*self.background))

    def _pixels(self) -> np.ndarray:
        h, w = self.height, self.width
        stride = self._image.bytesPerLine()
        raw = np.frombuffer(self._image.bits(), dtype=np.uint8, count=stride * h)
        return raw.reshape(h, stride)[:, : w * 3].reshape(h, w, 3)

    def get_region(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        x0, y0, x1, y1 = clip_rect(x, y, w, h, self.width, self.height)
        return self._pixels()[y0:y1, x0:x1].copy()

    def put_region(self, data: np.ndarray, x: int, y: int) -> None:
        region = np.asarray(data, dtype=np.uint8)
        rh, rw = region.shape[:2]
        x0, y0, x1, y1 = clip_rect(x, y, rw, rh, self.width, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        sx, sy = x0 - int(x), y0 - int(y)
        self._pixels()[y0:y1, x0:x1] = region[sy : sy + (y1 - y0), sx : sx + (x1 - x0), :3]

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None:
        x0, y0, x1, y1 = clip_rect(x, y, w, h, self.width, self.height)
        self._pixels()[y0:y1, x0:x1] = color

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        self.fill_rect(x, y, w, h, self.background)

    def line(self, x0: float, y0: float, x1: float, y1: float, color: Color) -> None:
        painter = QPainter(self._image)
        try:
            painter.setPen(QPen(QColor(*color), 1))
            painter.drawLine(QPointF(x0, y0), QPointF(x1, y1))
        finally:
            painter.end()

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
        advance = self._metrics.horizontalAdvance(text)
        if align == "right":
            x -= advance
        elif align == "center":
            x -= advance / 2.0
        if baseline == "top":
            y += self._metrics.ascent()
        elif baseline == "middle":
            y += (self._metrics.ascent() - self._metrics.descent()) / 2.0
        else:
            y -= self._metrics.descent()

        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.TextAntialiasing)
            painter.setFont(self._font)
            painter.setPen(QColor(*color))
            painter.drawText(QPointF(x, y), text)
        finally:
            painter.end()


__all__ = ["QImageSurface"]
