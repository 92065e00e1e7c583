"""Butterworth cascade design via the bilinear transform."""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..config.filter_config import FilterConfiguration

logger = logging.getLogger(__name__)

__all__ = [
    "FilterMode",
    "CascadeStage",
    "FilterDesign",
    "mode_for",
    "design",
]


class FilterMode(enum.Enum):
    """Filter topology derived from a :class:`FilterConfiguration`."""

    BYPASS = "bypass"
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"


@dataclass(frozen=True)
class CascadeStage:
    """One recursive section: a gain and its feedback coefficients."""

    gain: float
    coef: Tuple[float, ...]


@dataclass(frozen=True)
class FilterDesign:
    """
    Immutable snapshot of a designed cascade.

    Replacing the configuration produces a new design; the engine swaps the
    whole snapshot at once so stages and delay lines never go out of step.
    """

    mode: FilterMode
    stages: Tuple[CascadeStage, ...]
    num_coef: int
    config: FilterConfiguration

    @property
    def num_stages(self) -> int:
        return len(self.stages)

    @property
    def is_bypass(self) -> bool:
        return self.mode is FilterMode.BYPASS

    def transfer_function(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Expand the cascade into direct-form ``(b, a)`` polynomials in z^-1.

        The result can be handed to ``scipy.signal.freqz`` or
        ``scipy.signal.lfilter``. Bypass yields the identity ``([1], [1])``.
        """
        b = np.array([1.0])
        a = np.array([1.0])
        for stage in self.stages:
            if self.mode is FilterMode.LOWPASS:
                numerator = stage.gain * np.array([1.0, 2.0, 1.0])
            elif self.mode is FilterMode.HIGHPASS:
                numerator = stage.gain * np.array([1.0, -2.0, 1.0])
            else:
                numerator = stage.gain * np.array([1.0, 0.0, -2.0, 0.0, 1.0])
            denominator = np.concatenate(([1.0], -np.asarray(stage.coef, dtype=float)))
            b = np.convolve(b, numerator)
            a = np.convolve(a, denominator)
        return b, a


def mode_for(config: FilterConfiguration) -> FilterMode:
    """Derive the filter mode, falling back to bypass for invalid band edges."""
    nyquist = config.sample_rate_hz / 2.0
    flc = config.low_cutoff_hz
    fhc = config.high_cutoff_hz

    if config.order < 1:
        return FilterMode.BYPASS
    if config.lowpass_enabled and config.highpass_enabled:
        if 0.0 < fhc < flc < nyquist:
            return FilterMode.BANDPASS
        return FilterMode.BYPASS
    if config.lowpass_enabled:
        if 0.0 < flc <= nyquist:
            return FilterMode.LOWPASS
        return FilterMode.BYPASS
    if config.highpass_enabled:
        if 0.0 < fhc <= nyquist:
            return FilterMode.HIGHPASS
        return FilterMode.BYPASS
    return FilterMode.BYPASS


def _section_angle(k: int, num_stages: int) -> float:
    return math.sin(math.pi * (2.0 * k + 1.0) / (4.0 * num_stages))


def _design_low_high(mode: FilterMode, f1: float, fs: float, num_stages: int) -> Tuple[CascadeStage, ...]:
    a = math.tan(math.pi * f1 / fs)
    a2 = a * a
    stages = []
    for k in range(num_stages):
        r = _section_angle(k, num_stages)
        s = a2 + 2.0 * a * r + 1.0
        gain = a2 / s if mode is FilterMode.LOWPASS else 1.0 / s
        coef = (
            2.0 * (1.0 - a2) / s,
            -(a2 - 2.0 * a * r + 1.0) / s,
        )
        stages.append(CascadeStage(gain=gain, coef=coef))
    return tuple(stages)


def _design_band(f1: float, f2: float, fs: float, num_stages: int) -> Tuple[CascadeStage, ...]:
    a = math.cos(math.pi * (f1 + f2) / fs) / math.cos(math.pi * (f2 - f1) / fs)
    a2 = a * a
    b = math.tan(math.pi * (f2 - f1) / fs)
    b2 = b * b
    stages = []
    for k in range(num_stages):
        r = _section_angle(k, num_stages)
        s = b2 + 2.0 * b * r + 1.0
        coef = (
            4.0 * a * (1.0 + b * r) / s,
            2.0 * (b2 - 2.0 * a2 - 1.0) / s,
            4.0 * a * (1.0 - b * r) / s,
            -(b2 - 2.0 * b * r + 1.0) / s,
        )
        stages.append(CascadeStage(gain=b2 / fs, coef=coef))
    return tuple(stages)


def design(config: FilterConfiguration) -> FilterDesign:
    """
    Compute the cascade for ``config``.

    Invalid band edges never raise: the design silently degrades to
    :attr:`FilterMode.BYPASS` with no stages, so interactive callers keep
    working with any user input.

    Parameters
    ----------
    config:
        Band edges, sample rate, and order to realize.

    Returns
    -------
    FilterDesign
        Mode, stage snapshot, and per-stage coefficient count.
    """
    mode = mode_for(config)
    if mode is FilterMode.BYPASS:
        if config.lowpass_enabled or config.highpass_enabled:
            logger.info("Filter configuration %s is not realizable; using bypass", config)
        return FilterDesign(mode=mode, stages=(), num_coef=0, config=config)

    fs = float(config.sample_rate_hz)
    order = int(config.order)
    if mode is FilterMode.BANDPASS:
        num_stages = (order + 3) // 4
        stages = _design_band(config.high_cutoff_hz, config.low_cutoff_hz, fs, num_stages)
        num_coef = 4
    else:
        num_stages = (order + 1) // 2
        f1 = config.low_cutoff_hz if mode is FilterMode.LOWPASS else config.high_cutoff_hz
        stages = _design_low_high(mode, f1, fs, num_stages)
        num_coef = 2

    logger.debug("Designed %s filter: %d stage(s), %d coef(s)", mode.value, num_stages, num_coef)
    return FilterDesign(mode=mode, stages=stages, num_coef=num_coef, config=config)
