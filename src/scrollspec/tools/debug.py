"""Opt-in timing instrumentation for the render loop."""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Callable, Iterator

DEBUG_SCROLLSPEC = os.getenv("SCROLLSPEC_DEBUG", "").lower() in {"1", "true", "yes", "on"}

logger = logging.getLogger(__name__)


def debug_enabled() -> bool:
    """Return True when per-stage timings should be reported."""
    return DEBUG_SCROLLSPEC


@contextmanager
def time_block(label: str, *, emitter: Callable[[str], None] | None = None) -> Iterator[None]:
    """
    Report how long the wrapped block took when ``SCROLLSPEC_DEBUG`` is set.

    Disabled, this costs a single flag check per call.
    """
    if not DEBUG_SCROLLSPEC:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        (emitter or logger.debug)(f"[timing] {label} took {elapsed_ms:.3f} ms")


__all__ = ["debug_enabled", "time_block"]
