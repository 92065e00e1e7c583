import math
import pathlib
import sys
import unittest

import numpy as np

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sensefilter.analysis.fft import (  # noqa: E402
    DB_FLOOR,
    bit_reverse,
    dft_naive,
    fft_radix2,
    is_power_of_two,
    magnitude_db,
    next_power_of_two,
    normalize_db,
)


def _transform(values):
    real = np.asarray(values, dtype=float).copy()
    imag = np.zeros_like(real)
    fft_radix2(real, imag)
    return real + 1j * imag


class FFTTest(unittest.TestCase):
    def test_length8_matches_direct_dft(self):
        x = np.array([1.0, 2.0, 1.0, -1.0, 1.5, 1.0, 0.5, -0.5])
        ours = _transform(x)
        reference = dft_naive(x)
        np.testing.assert_allclose(ours.real, reference.real, rtol=1e-9, atol=1e-12)
        np.testing.assert_allclose(ours.imag, reference.imag, rtol=1e-9, atol=1e-12)

    def test_matches_numpy_for_power_of_two_sizes(self):
        rng = np.random.default_rng(7)
        for n in (2, 4, 16, 128, 1024):
            x = rng.standard_normal(n)
            np.testing.assert_allclose(_transform(x), np.fft.fft(x), rtol=1e-9, atol=1e-9)

    def test_complex_input(self):
        rng = np.random.default_rng(11)
        real = rng.standard_normal(32)
        imag = rng.standard_normal(32)
        expected = np.fft.fft(real + 1j * imag)
        fft_radix2(real, imag)
        np.testing.assert_allclose(real + 1j * imag, expected, rtol=1e-9, atol=1e-9)

    def test_unit_impulse_has_flat_spectrum(self):
        x = np.zeros(16)
        x[0] = 1.0
        np.testing.assert_allclose(_transform(x), np.ones(16), atol=1e-15)

    def test_works_on_python_lists(self):
        real = [1.0, 0.0, -1.0, 0.0]
        imag = [0.0, 0.0, 0.0, 0.0]
        fft_radix2(real, imag)
        np.testing.assert_allclose(real, [0.0, 2.0, 0.0, 2.0], atol=1e-15)
        np.testing.assert_allclose(imag, [0.0, 0.0, 0.0, 0.0], atol=1e-15)

    def test_rejects_non_power_of_two(self):
        with self.assertRaises(ValueError):
            fft_radix2(np.zeros(6), np.zeros(6))
        with self.assertRaises(ValueError):
            fft_radix2(np.zeros(0), np.zeros(0))

    def test_rejects_mismatched_buffers(self):
        with self.assertRaises(ValueError):
            fft_radix2(np.zeros(8), np.zeros(4))


class BitReversalTest(unittest.TestCase):
    def test_three_bit_indices(self):
        self.assertEqual([bit_reverse(i, 3) for i in range(8)], [0, 4, 2, 6, 1, 5, 3, 7])

    def test_zero_bits(self):
        self.assertEqual(bit_reverse(0, 0), 0)


class PowerOfTwoTest(unittest.TestCase):
    def test_is_power_of_two(self):
        self.assertTrue(all(is_power_of_two(n) for n in (1, 2, 4, 256)))
        self.assertFalse(any(is_power_of_two(n) for n in (0, -2, 3, 6, 255)))

    def test_next_power_of_two(self):
        cases = {1: 1, 2: 2, 3: 4, 5: 8, 16: 16, 17: 32, 200: 256}
        for n, expected in cases.items():
            self.assertEqual(next_power_of_two(n), expected)

    def test_next_power_of_two_rejects_non_positive(self):
        with self.assertRaises(ValueError):
            next_power_of_two(0)


class DecibelTest(unittest.TestCase):
    def test_magnitude_db(self):
        db = magnitude_db([3.0, 1.0], [4.0, 0.0])
        np.testing.assert_allclose(db, [10.0 * math.log10(25.0), 0.0])

    def test_exact_zero_uses_floor(self):
        db = magnitude_db([0.0, 1.0], [0.0, 0.0])
        self.assertEqual(db[0], DB_FLOOR)
        self.assertEqual(DB_FLOOR, -250.0)
        self.assertTrue(np.all(np.isfinite(db)))

    def test_normalize_peak_is_exactly_zero(self):
        db = normalize_db([-3.0, 7.25, -250.0])
        self.assertEqual(db.max(), 0.0)
        np.testing.assert_allclose(db, [-10.25, 0.0, -257.25])


if __name__ == "__main__":
    unittest.main()
