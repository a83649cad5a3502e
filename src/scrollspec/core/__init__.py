"""Core rendering pipeline: frame sources, compositor, surfaces and renderer.

The renderer pulls one magnitude frame per tick from a frame source, lets the
scroll compositor paint it into the pixel buffer, and presents buffer plus
axis overlays on a rendering surface. Nothing here depends on Qt; the GUI
supplies a QImage-backed surface and a timer-driven frame clock.
"""

from .compositor import ScrollCompositor
from .controls import ControlSnapshot, RenderControls
from .frame_source import (
    CaptureUnavailableError,
    DemoFrameSource,
    FrameSource,
    MicFrameSource,
    ReplayFrameSource,
)
from .renderer import PipelineState, Renderer, ResizeHandler, TickResult
from .surface import ArraySurface, RenderSurface

__all__ = [
    "ArraySurface",
    "CaptureUnavailableError",
    "ControlSnapshot",
    "DemoFrameSource",
    "FrameSource",
    "MicFrameSource",
    "PipelineState",
    "RenderControls",
    "RenderSurface",
    "Renderer",
    "ReplayFrameSource",
    "ResizeHandler",
    "ScrollCompositor",
    "TickResult",
]
