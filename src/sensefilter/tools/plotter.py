"""Matplotlib rendering of filter magnitude responses."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from ..analysis.fft import next_power_of_two
from ..analysis.response import analytic_response_db
from ..core.butterworth import ButterworthFilter


def response_frequencies(num_points: int, sample_rate_hz: float) -> np.ndarray:
    """Bin frequencies (Hz) for a ``num_points``-long response over ``[0, fs/2)``."""
    return np.arange(num_points) * (float(sample_rate_hz) / 2.0) / num_points


def plot_response(
    response_db: Sequence[float],
    sample_rate_hz: float,
    *,
    ax: Optional[Axes] = None,
    label: Optional[str] = None,
) -> Axes:
    """
    Draw a dB magnitude curve on ``ax`` (a new Figure is created when omitted).

    Returns the Axes so callers can keep decorating or save the figure.
    """
    values = np.asarray(response_db, dtype=float)
    if ax is None:
        fig = Figure(figsize=(6, 4))
        ax = fig.add_subplot(111)
    freqs = response_frequencies(values.size, sample_rate_hz)
    ax.plot(freqs, values, label=label)
    ax.set_xlabel("Frequency [Hz]")
    ax.set_ylabel("Magnitude [dB]")
    ax.grid(True, alpha=0.3)
    if label:
        ax.legend(loc="best")
    return ax


def plot_filter(
    filt: ButterworthFilter,
    num_points: int = 256,
    *,
    ax: Optional[Axes] = None,
    show_analytic: bool = True,
) -> Axes:
    """Plot the impulse-derived response of ``filt`` (and the exact curve) with a mode/delay title."""
    response = filt.frequency_response(num_points)
    fs = filt.config.sample_rate_hz
    ax = plot_response(response, fs, ax=ax, label=f"{filt.mode.value} (impulse FFT)")
    if show_analytic:
        exact = analytic_response_db(filt.design, next_power_of_two(num_points))
        ax.plot(response_frequencies(exact.size, fs), exact, linestyle="--", label="analytic")
        ax.legend(loc="best")
    ax.set_title(f"{filt.mode.value} order={filt.order()} delay={filt.filter_delay()} samples")
    return ax
