"""Butterworth filter block: configuration, streaming, and response queries."""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Any, List, Optional

import numpy as np
from numpy.typing import ArrayLike

from ..analysis.design import FilterDesign, FilterMode, design
from ..analysis.fft import next_power_of_two
from ..analysis.response import ResponseAnalyzer
from ..config.filter_config import FilterConfiguration
from .engine import FilterEngine

logger = logging.getLogger(__name__)

__all__ = [
    "ButterworthFilter",
    "DEFAULT_DELAY_NFFT",
    "DEFAULT_RESPONSE_POINTS",
]

DEFAULT_DELAY_NFFT = 256
DEFAULT_RESPONSE_POINTS = 16


class ButterworthFilter:
    """
    Configurable Butterworth low-pass / high-pass / band-pass block.

    Every setter that changes a value redesigns the cascade, resets the
    delay lines, and invalidates cached analysis results. Settings that
    cannot be realized put the block in bypass (``apply`` returns its input)
    rather than raising.

    All public operations are serialized by a re-entrant lock, so the block
    may be shared between an ingest thread calling :meth:`apply` and a UI
    thread querying :meth:`frequency_response`.

    Example
    -------
    >>> filt = ButterworthFilter()
    >>> filt.set_low_cutoff(10.0)
    >>> filt.set_sample_rate(200.0)
    >>> y = filt.apply(0.5)
    """

    def __init__(self, config: Optional[FilterConfiguration] = None) -> None:
        self._lock = threading.RLock()
        self._config = config if config is not None else FilterConfiguration()
        self._engine = FilterEngine(design(self._config))
        self._analyzer = ResponseAnalyzer(self._engine)

    # ------------------------------------------------------------------ state
    @property
    def config(self) -> FilterConfiguration:
        with self._lock:
            return self._config

    @property
    def design(self) -> FilterDesign:
        with self._lock:
            return self._engine.design

    @property
    def mode(self) -> FilterMode:
        return self.design.mode

    @property
    def num_stages(self) -> int:
        return self.design.num_stages

    @property
    def num_coef(self) -> int:
        return self.design.num_coef

    def order(self) -> int:
        """Configured order, regardless of whether the block is bypassed."""
        return self.config.order

    # ---------------------------------------------------------- configuration
    def configure(self, config: FilterConfiguration) -> None:
        """Replace the whole configuration (recomputes only on change)."""
        with self._lock:
            if config == self._config:
                return
            self._config = config
            self._redesign()

    def _update(self, **changes: Any) -> None:
        with self._lock:
            self.configure(dataclasses.replace(self._config, **changes))

    def _redesign(self) -> None:
        new_design = design(self._config)
        self._engine.load(new_design)
        self._analyzer.invalidate()
        logger.info(
            "Filter reconfigured: mode=%s stages=%d order=%d",
            new_design.mode.value,
            new_design.num_stages,
            self._config.order,
        )

    def set_lowpass(self, enabled: bool) -> None:
        self._update(lowpass_enabled=bool(enabled))

    def set_highpass(self, enabled: bool) -> None:
        self._update(highpass_enabled=bool(enabled))

    def set_low_cutoff(self, hz: float) -> None:
        """Low-pass cutoff; also the upper band edge in band-pass mode."""
        self._update(low_cutoff_hz=float(hz))

    def set_high_cutoff(self, hz: float) -> None:
        """High-pass cutoff; also the lower band edge in band-pass mode."""
        self._update(high_cutoff_hz=float(hz))

    def set_sample_rate(self, hz: float) -> None:
        self._update(sample_rate_hz=float(hz))

    def set_order(self, order: int) -> None:
        self._update(order=int(order))

    # --------------------------------------------------------------- streaming
    def apply(self, sample: float) -> float:
        """Filter one sample."""
        with self._lock:
            return self._engine.apply(sample)

    def apply_block(self, samples: ArrayLike) -> np.ndarray:
        """Filter a block of samples in order; returns a float64 array."""
        with self._lock:
            return self._engine.apply_block(samples)

    def reset(self) -> None:
        """Clear transient history (delay lines) without touching coefficients."""
        with self._lock:
            self._engine.reset()

    # ----------------------------------------------------------------- queries
    def filter_delay(self) -> int:
        """
        Approximate delay in samples (peak of the impulse response).

        Computed lazily from a :data:`DEFAULT_DELAY_NFFT`-sample impulse
        capture and cached until the configuration changes.
        """
        with self._lock:
            return self._analyzer.analyze(DEFAULT_DELAY_NFFT, compute_spectrum=False).filter_delay

    def frequency_response(self, num_points: int = DEFAULT_RESPONSE_POINTS) -> List[float]:
        """
        Magnitude response in dB over normalized frequency ``[0, pi)``.

        ``num_points`` is rounded up to a power of two ``P``; the impulse is
        captured with ``2 * P`` samples and ``P`` values are returned, peak
        normalized to 0 dB. Bypass returns ``P`` zeros, not ``num_points``
        zeros, so the length never depends on the mode; ``frequency_response(5)``
        yields 8 values whether or not a filter is active.
        """
        if num_points < 1:
            raise ValueError(f"num_points must be >= 1, got {num_points}")
        points = next_power_of_two(int(num_points))
        with self._lock:
            result = self._analyzer.analyze(2 * points, compute_spectrum=True)
        return [float(v) for v in result.response]
