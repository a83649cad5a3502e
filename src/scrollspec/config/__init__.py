"""Configuration objects for the scrolling spectrogram.

:mod:`runtime` holds the :class:`SpectrogramConfig` dataclass and knows how to
read it from a YAML file; the GUI and headless renderer both build from it.
"""

from .runtime import SpectrogramConfig, config_from_mapping, load_config

__all__ = ["SpectrogramConfig", "config_from_mapping", "load_config"]
