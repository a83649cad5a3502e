"""Desktop GUI built with PySide6/Qt.

:mod:`spectrogram_widget` hosts the renderer on a QImage surface driven by a
Qt timer, :mod:`main_window` adds the scale toggle and speed slider, and
:mod:`application` owns argument parsing and the Qt event loop. The rendering
pipeline itself lives in :mod:`scrollspec.core`.
"""
