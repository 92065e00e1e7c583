"""SenseFilter: real-time Butterworth filtering and response analysis.

The public surface is :class:`~sensefilter.core.butterworth.ButterworthFilter`
(configure, stream samples, query delay and response) together with
:class:`~sensefilter.config.FilterConfiguration`.
"""

from .config import FilterConfiguration, load_filter_config, save_filter_config
from .core import ButterworthFilter, FilterEngine, FilterSink

__all__ = [
    "ButterworthFilter",
    "FilterConfiguration",
    "FilterEngine",
    "FilterSink",
    "load_filter_config",
    "save_filter_config",
]

__version__ = "0.1.0"
