"""
Data access and normalization layer.

This package contains modules for loading saved telemetry and normalizing raw
records into canonical samples.
"""

from .loader import TelemetryLoader
from .normalizer import (
    NormalizedTelemetry,
    SampleNormalizer,
    coerce_number,
    parse_timestamp,
    resolve_door_state,
    resolve_weight_kg,
    select_window,
)

__all__ = [
    "NormalizedTelemetry",
    "SampleNormalizer",
    "TelemetryLoader",
    "coerce_number",
    "parse_timestamp",
    "resolve_door_state",
    "resolve_weight_kg",
    "select_window",
]
