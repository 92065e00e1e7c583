from __future__ import annotations

import pathlib
import sys

import numpy as np
import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sensefilter import ButterworthFilter, FilterConfiguration, FilterSink  # noqa: E402


class _CollectingSink:
    def __init__(self) -> None:
        self.blocks: list[tuple[np.ndarray, np.ndarray]] = []

    def handle_samples(self, t: np.ndarray, x: np.ndarray) -> None:
        self.blocks.append((t, x))


def test_filter_sink_forwards_filtered_blocks() -> None:
    downstream = _CollectingSink()
    sink = FilterSink(ButterworthFilter(), downstream)
    t = np.arange(20) * 0.01
    x = np.cos(np.arange(20) * 0.4)
    sink.handle_samples(t[:12], x[:12])
    sink.handle_samples(t[12:], x[12:])

    expected = ButterworthFilter().apply_block(x)
    times = np.concatenate([b[0] for b in downstream.blocks])
    values = np.concatenate([b[1] for b in downstream.blocks])
    np.testing.assert_array_equal(times, t)
    np.testing.assert_array_equal(values, expected)


def test_filter_sink_accepts_callable_downstream() -> None:
    received: list[np.ndarray] = []
    sink = FilterSink(ButterworthFilter(FilterConfiguration(lowpass_enabled=False)), lambda t, y: received.append(y))
    sink.on_new_sample(0.0, 2.5)
    assert len(received) == 1
    np.testing.assert_array_equal(received[0], [2.5])


def test_filter_sink_skips_empty_blocks() -> None:
    downstream = _CollectingSink()
    FilterSink(ButterworthFilter(), downstream).handle_samples(np.array([]), np.array([]))
    assert downstream.blocks == []


def test_filter_sink_rejects_mismatched_lengths() -> None:
    sink = FilterSink(ButterworthFilter(), _CollectingSink())
    with pytest.raises(ValueError):
        sink.handle_samples(np.zeros(3), np.zeros(2))
