"""Impulse-response characterization of a filter engine.

The analyzer drives a :class:`~sensefilter.core.engine.FilterEngine` with a
unit impulse, estimates the group delay from the peak-magnitude output sample,
and optionally turns the captured response into a normalized dB magnitude
curve with :func:`~sensefilter.analysis.fft.fft_radix2`. The engine's live
delay-line state is snapshotted and restored around every run, so analysis
never disturbs a signal that is being filtered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
from scipy import signal

from ..core.engine import FilterEngine
from ..tools.debug import time_block
from .design import FilterDesign
from .fft import fft_radix2, is_power_of_two, magnitude_db, normalize_db

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisResult",
    "ResponseAnalyzer",
    "analytic_response_db",
    "capture_impulse_response",
]


@dataclass(frozen=True)
class AnalysisResult:
    """Delay estimate and optional dB response for one FFT size."""

    nfft: int
    filter_delay: int
    response: Optional[np.ndarray] = None

    @property
    def has_spectrum(self) -> bool:
        return self.response is not None


def capture_impulse_response(engine: FilterEngine, nfft: int) -> np.ndarray:
    """
    Drive ``engine`` from zero state with a length-``nfft`` unit impulse.

    The engine's state is restored afterwards.
    """
    saved = engine.snapshot()
    engine.reset()
    try:
        out = np.empty(nfft, dtype=np.float64)
        out[0] = engine.apply(1.0)
        for i in range(1, nfft):
            out[i] = engine.apply(0.0)
    finally:
        engine.restore(saved)
    return out


class ResponseAnalyzer:
    """
    Computes and caches :class:`AnalysisResult` objects for an engine.

    Results are keyed by FFT size and belong to the design they were computed
    for; loading a new design into the engine empties the cache on the next
    :meth:`analyze` call.
    """

    def __init__(self, engine: FilterEngine) -> None:
        self._engine = engine
        self._cache: Dict[int, AnalysisResult] = {}
        self._cached_design: Optional[FilterDesign] = None

    def invalidate(self) -> None:
        """Drop every cached result."""
        self._cache.clear()

    def analyze(self, nfft: int, compute_spectrum: bool = True) -> AnalysisResult:
        """
        Characterize the engine's current design.

        Parameters
        ----------
        nfft:
            Impulse-capture / FFT length. Must be a power of two >= 2.
        compute_spectrum:
            When False only the delay is estimated.

        Returns
        -------
        AnalysisResult
            ``response`` holds ``nfft // 2`` dB values over ``[0, pi)``
            normalized to a 0 dB peak, or None for delay-only requests.

        Raises
        ------
        ValueError
            If ``nfft`` is not a power of two >= 2.
        """
        if not isinstance(nfft, (int, np.integer)) or nfft < 2 or not is_power_of_two(int(nfft)):
            raise ValueError(f"nfft must be a power of two >= 2, got {nfft!r}")
        nfft = int(nfft)

        if self._cached_design is not self._engine.design:
            self._cache.clear()
            self._cached_design = self._engine.design

        cached = self._cache.get(nfft)
        if cached is not None and (cached.has_spectrum or not compute_spectrum):
            return cached

        if self._engine.design.is_bypass:
            response = np.zeros(nfft // 2) if compute_spectrum else None
            result = AnalysisResult(nfft=nfft, filter_delay=0, response=response)
            self._cache[nfft] = result
            return result

        with time_block(f"analyze nfft={nfft} spectrum={compute_spectrum}"):
            captured = capture_impulse_response(self._engine, nfft)
            # argmax returns the first occurrence on ties
            delay = int(np.argmax(np.abs(captured)))
            response = self._spectrum(captured) if compute_spectrum else None

        logger.debug("Analyzed %s filter: nfft=%d delay=%d", self._engine.mode.value, nfft, delay)
        result = AnalysisResult(nfft=nfft, filter_delay=delay, response=response)
        self._cache[nfft] = result
        return result

    @staticmethod
    def _spectrum(captured: np.ndarray) -> np.ndarray:
        real = captured.astype(np.float64, copy=True)
        imag = np.zeros_like(real)
        fft_radix2(real, imag)
        half = real.shape[0] // 2
        return normalize_db(magnitude_db(real[:half], imag[:half]))


def analytic_response_db(filter_design: FilterDesign, num_points: int) -> np.ndarray:
    """
    Exact magnitude response of ``filter_design`` via ``scipy.signal.freqz``.

    Evaluated at the same ``num_points`` frequencies over ``[0, pi)`` that
    :meth:`ResponseAnalyzer.analyze` reports for ``nfft = 2 * num_points``,
    and normalized the same way. Unlike the impulse-based curve it does not
    suffer from truncating slowly decaying responses.
    """
    if num_points < 1:
        raise ValueError(f"num_points must be >= 1, got {num_points}")
    if filter_design.is_bypass:
        return np.zeros(num_points)
    b, a = filter_design.transfer_function()
    _, h = signal.freqz(b, a, worN=num_points)
    return normalize_db(magnitude_db(h.real, h.imag))
