"""Core streaming filter: engine state, the filter block, and pipeline glue.

This package sits between sample ingest and whatever consumes filtered data
(plots, recorders, streaming sockets) by owning the per-stage delay lines and
serializing configuration changes against in-flight filtering.
"""

from .engine import FilterEngine
from .butterworth import DEFAULT_DELAY_NFFT, DEFAULT_RESPONSE_POINTS, ButterworthFilter
from .sink import FilterSink, SampleSink

__all__ = [
    "FilterEngine",
    "ButterworthFilter",
    "DEFAULT_DELAY_NFFT",
    "DEFAULT_RESPONSE_POINTS",
    "FilterSink",
    "SampleSink",
]
