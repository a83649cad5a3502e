"""Launch the live spectrogram from a source checkout.

``python main.py`` opens the window on the default microphone;
``python main.py --demo`` uses the synthetic chirp instead, and
``--config spectrogram.yaml`` loads display and analyser settings. Set
``SCROLLSPEC_PROFILE=1`` to print the hottest render-loop calls on exit.
"""
from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from pathlib import Path

# Make sure the 'src' directory is on sys.path so 'scrollspec' can be imported
REPO_ROOT = Path(__file__).resolve().parent
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from scrollspec.gui.application import main as run_spectrogram


def main(argv: Sequence[str] | None = None) -> None:
    """Run the spectrogram window with ``argv`` (defaults to ``sys.argv``)."""
    run_spectrogram(list(sys.argv if argv is None else argv))


def _profile_render_loop(argv: Sequence[str] | None = None) -> None:
    """Run the window under cProfile, then list the calls that cost the most per tick."""
    import cProfile
    import io
    import pstats

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        main(argv)
    finally:
        profiler.disable()
        buffer = io.StringIO()
        stats = pstats.Stats(profiler, stream=buffer).sort_stats("tottime")
        stats.print_stats("scrollspec|numpy", 25)
        print(buffer.getvalue())


if __name__ == "__main__":
    if os.getenv("SCROLLSPEC_PROFILE", ""):
        _profile_render_loop()
    else:
        main()
