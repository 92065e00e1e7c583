"""Butterworth filter configuration and YAML helpers."""
from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml


def _coerce_float(value: Any, fallback: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return float(fallback)
    if math.isnan(result):
        return float(fallback)
    return result


def _coerce_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(fallback)


def _coerce_bool(value: Any, fallback: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"1", "true", "yes", "on"}:
            return True
        if text in {"0", "false", "no", "off"}:
            return False
    return fallback


@dataclass(frozen=True)
class FilterConfiguration:
    """
    User-facing filter settings.

    Cutoffs and sample rate share a unit (Hz); only their ratios matter, so
    the defaults use a normalized sample rate of 1.0.
    Combinations that cannot be realized are still valid configurations:
    the designer maps them to bypass instead of rejecting them.
    """

    lowpass_enabled: bool = True
    highpass_enabled: bool = False
    low_cutoff_hz: float = 0.25
    high_cutoff_hz: float = 0.35
    sample_rate_hz: float = 1.0
    order: int = 4

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "FilterConfiguration":
        """
        Construct a configuration from a mapping such as ``filter.yaml``.

        Supported shape::

            filter:
              lowpass: true
              highpass: false
              low_cutoff_hz: 0.25
              high_cutoff_hz: 0.35
              sample_rate_hz: 1.0
              order: 4

        A flat mapping (without the ``filter`` key) is accepted as well.
        Malformed values fall back to the field defaults.
        """
        payload: Mapping[str, Any] = mapping or {}
        if not isinstance(payload, Mapping):
            payload = {}

        block = payload.get("filter", payload)
        if not isinstance(block, Mapping):
            block = {}

        defaults = cls()
        return cls(
            lowpass_enabled=_coerce_bool(block.get("lowpass", defaults.lowpass_enabled), defaults.lowpass_enabled),
            highpass_enabled=_coerce_bool(block.get("highpass", defaults.highpass_enabled), defaults.highpass_enabled),
            low_cutoff_hz=_coerce_float(block.get("low_cutoff_hz", defaults.low_cutoff_hz), defaults.low_cutoff_hz),
            high_cutoff_hz=_coerce_float(block.get("high_cutoff_hz", defaults.high_cutoff_hz), defaults.high_cutoff_hz),
            sample_rate_hz=_coerce_float(block.get("sample_rate_hz", defaults.sample_rate_hz), defaults.sample_rate_hz),
            order=_coerce_int(block.get("order", defaults.order), defaults.order),
        )

    def to_mapping(self) -> dict:
        """Serialize back into a mapping suitable for YAML."""
        return {
            "filter": {
                "lowpass": bool(self.lowpass_enabled),
                "highpass": bool(self.highpass_enabled),
                "low_cutoff_hz": float(self.low_cutoff_hz),
                "high_cutoff_hz": float(self.high_cutoff_hz),
                "sample_rate_hz": float(self.sample_rate_hz),
                "order": int(self.order),
            }
        }


def load_filter_config(path: str | Path | None) -> FilterConfiguration:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`FilterConfiguration`.
    """
    if path is None:
        return FilterConfiguration()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return FilterConfiguration()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return FilterConfiguration.from_mapping(raw)


def save_filter_config(path: str | Path, config: FilterConfiguration) -> None:
    """Persist ``config`` as YAML, creating parent directories when needed."""
    cfg_path = Path(path)
    if cfg_path.parent and not cfg_path.parent.exists():
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
    with cfg_path.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(
            config.to_mapping(),
            fh,
            default_flow_style=False,
            sort_keys=False,
        )


__all__ = [
    "FilterConfiguration",
    "load_filter_config",
    "save_filter_config",
]
