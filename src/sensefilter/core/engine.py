"""Sample-by-sample execution of a designed Butterworth cascade."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from ..analysis.design import FilterDesign, FilterMode, design
from ..config.filter_config import FilterConfiguration

logger = logging.getLogger(__name__)

__all__ = ["FilterEngine"]


class FilterEngine:
    """
    Runs a :class:`FilterDesign` over a stream of samples.

    The engine owns one delay line per stage, stored as a
    ``(num_stages, num_coef)`` float array. :meth:`load` swaps the stage
    snapshot and a freshly zeroed state together, so the state shape always
    matches the coefficients.
    """

    def __init__(self, filter_design: Optional[FilterDesign] = None) -> None:
        if filter_design is None:
            filter_design = design(FilterConfiguration())
        self._design = filter_design
        self._state = self._zero_state(filter_design)

    @staticmethod
    def _zero_state(filter_design: FilterDesign) -> np.ndarray:
        return np.zeros((filter_design.num_stages, filter_design.num_coef), dtype=np.float64)

    @property
    def design(self) -> FilterDesign:
        return self._design

    @property
    def mode(self) -> FilterMode:
        return self._design.mode

    def load(self, filter_design: FilterDesign) -> None:
        """Replace the cascade; transient history is discarded."""
        self._design = filter_design
        self._state = self._zero_state(filter_design)
        logger.debug(
            "Engine loaded %s design with %d stage(s)",
            filter_design.mode.value,
            filter_design.num_stages,
        )

    def reset(self) -> None:
        """Zero every delay line. Coefficients are left untouched."""
        self._state.fill(0.0)

    def snapshot(self) -> np.ndarray:
        """Return a copy of the current delay-line state."""
        return self._state.copy()

    def restore(self, state: ArrayLike) -> None:
        """Copy ``state`` (from :meth:`snapshot`) back into the delay lines."""
        arr = np.asarray(state, dtype=np.float64)
        if arr.shape != self._state.shape:
            raise ValueError(
                f"state shape {arr.shape} does not match engine state {self._state.shape}"
            )
        self._state[...] = arr

    def apply(self, x: float) -> float:
        """
        Push one sample through the cascade and return the filtered value.

        In bypass mode the sample is returned as a float. Non-finite values
        propagate through the arithmetic as-is.
        """
        mode = self._design.mode
        if mode is FilterMode.BYPASS:
            return float(x)

        value = float(x)
        state = self._state
        for k, stage in enumerate(self._design.stages):
            w = state[k]
            w0 = value
            for j, c in enumerate(stage.coef):
                w0 += c * w[j]

            if mode is FilterMode.LOWPASS:
                value = stage.gain * (w0 + 2.0 * w[0] + w[1])
            elif mode is FilterMode.HIGHPASS:
                value = stage.gain * (w0 - 2.0 * w[0] + w[1])
            else:
                value = stage.gain * (w0 - 2.0 * w[1] + w[3])

            # shift the delay line right and insert w0
            w[1:] = w[:-1].copy()
            w[0] = w0
        return float(value)

    def apply_block(self, samples: ArrayLike) -> np.ndarray:
        """Filter a 1-D block sequentially; equivalent to repeated :meth:`apply`."""
        values = np.asarray(samples, dtype=np.float64).reshape(-1)
        out = np.empty_like(values)
        for i, sample in enumerate(values):
            out[i] = self.apply(float(sample))
        return out
