"""Pipeline adapter that filters sample blocks before fan-out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

import numpy as np

from .butterworth import ButterworthFilter

__all__ = ["SampleSink", "FilterSink"]


class SampleSink(Protocol):
    """Anything that accepts timestamped sample blocks."""

    def handle_samples(self, t: np.ndarray, x: np.ndarray) -> None:  # pragma: no cover - protocol
        ...


def _forward(downstream: SampleSink | Callable[[np.ndarray, np.ndarray], None], t: np.ndarray, y: np.ndarray) -> None:
    if hasattr(downstream, "handle_samples"):
        downstream.handle_samples(t, y)  # type: ignore[union-attr]
    else:
        downstream(t, y)


@dataclass(slots=True)
class FilterSink(SampleSink):
    """Filters ``x`` through a :class:`ButterworthFilter` and forwards ``(t, y)``."""

    butterworth: ButterworthFilter
    downstream: SampleSink | Callable[[np.ndarray, np.ndarray], None]

    def handle_samples(self, t: np.ndarray, x: np.ndarray) -> None:
        times = np.asarray(t, dtype=np.float64).reshape(-1)
        values = np.asarray(x, dtype=np.float64).reshape(-1)
        if times.size != values.size:
            raise ValueError("timestamps and samples must have the same length.")
        if values.size == 0:
            return
        _forward(self.downstream, times, self.butterworth.apply_block(values))

    def on_new_sample(self, timestamp: float, value: float) -> None:
        """Filter and forward a single sample (convenience helper)."""
        self.handle_samples(np.asarray([timestamp]), np.asarray([value]))
