"""Filter design and analysis utilities (coefficients, FFT, response).

Modules such as :mod:`design` and :mod:`fft` are pure functions over plain
floats and NumPy arrays; :mod:`response` drives a filter engine with an
impulse to estimate delay and magnitude response. None of them touch I/O, so
they can be reused in scripts, automated tests, or GUI tabs alike.
"""
