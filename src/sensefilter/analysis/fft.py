"""FFT helpers.

A small in-place radix-2 decimation-in-time FFT used to characterize filter
impulse responses, plus the dB conversion applied to its output. The
transform is independent of the filter engine so it can be validated against
:func:`dft_naive` on its own.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike

__all__ = [
    "is_power_of_two",
    "next_power_of_two",
    "bit_reverse",
    "fft_radix2",
    "dft_naive",
    "magnitude_db",
    "normalize_db",
    "DB_FLOOR",
]

# Reported for bins whose squared magnitude is exactly zero.
DB_FLOOR = -250.0


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two that is >= ``n`` (``n`` must be >= 1)."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return 1 << (int(n) - 1).bit_length()


def bit_reverse(index: int, n_bits: int) -> int:
    """Reverse the lowest ``n_bits`` bits of ``index``."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (index & 1)
        index >>= 1
    return result


def fft_radix2(real: np.ndarray, imag: np.ndarray) -> None:
    """
    In-place iterative Cooley-Tukey radix-2 DIT FFT.

    Parameters
    ----------
    real, imag:
        Mutable float arrays of equal power-of-two length holding the input
        in natural order. On return they hold the transform in natural
        order; the bit-reversal reordering is done here.

    Raises
    ------
    ValueError
        If the buffers differ in length or the length is not a power of two.
    """
    n = len(real)
    if len(imag) != n:
        raise ValueError(f"real and imag lengths differ: {n} != {len(imag)}")
    if not is_power_of_two(n):
        raise ValueError(f"FFT length must be a power of two, got {n}")

    n_bits = n.bit_length() - 1
    for i in range(n):
        j = bit_reverse(i, n_bits)
        if j > i:
            real[i], real[j] = real[j], real[i]
            imag[i], imag[j] = imag[j], imag[i]

    # Butterfly stages: size 2, 4, ..., n
    size = 2
    while size <= n:
        half = size // 2
        for k in range(half):
            angle = -2.0 * math.pi * k / size
            w_re = math.cos(angle)
            w_im = math.sin(angle)
            for start in range(0, n, size):
                even = start + k
                odd = even + half
                t_re = w_re * real[odd] - w_im * imag[odd]
                t_im = w_re * imag[odd] + w_im * real[odd]
                real[odd] = real[even] - t_re
                imag[odd] = imag[even] - t_im
                real[even] = real[even] + t_re
                imag[even] = imag[even] + t_im
        size *= 2


def dft_naive(values: ArrayLike) -> np.ndarray:
    """Direct O(n^2) DFT, used as a reference for :func:`fft_radix2`."""
    x = np.asarray(values, dtype=np.complex128)
    n = x.shape[0]
    k = np.arange(n)
    kernel = np.exp(-2j * np.pi * np.outer(k, k) / n)
    return kernel @ x


def magnitude_db(real: ArrayLike, imag: ArrayLike, floor_db: float = DB_FLOOR) -> np.ndarray:
    """``10*log10(re^2 + im^2)`` per bin, with ``floor_db`` for exact zeros."""
    re = np.asarray(real, dtype=float)
    im = np.asarray(imag, dtype=float)
    power = re * re + im * im
    out = np.full(power.shape, float(floor_db))
    nonzero = power != 0.0
    out[nonzero] = 10.0 * np.log10(power[nonzero])
    return out


def normalize_db(db: ArrayLike) -> np.ndarray:
    """Shift a dB curve so its maximum is exactly 0 dB."""
    arr = np.asarray(db, dtype=float)
    if arr.size == 0:
        return arr.copy()
    return arr - arr.max()
