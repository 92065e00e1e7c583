"""Configuration objects and helpers for SenseFilter.

This package knows how to load/save the YAML descriptor that captures the
Butterworth filter settings (band edges, sample rate, and order). The typed
dataclass (see :mod:`filter_config`) is imported everywhere else so the
designer, the engine facade, and scripts agree on a single source of truth.
"""

from .filter_config import FilterConfiguration, load_filter_config, save_filter_config

__all__ = ["FilterConfiguration", "load_filter_config", "save_filter_config"]
