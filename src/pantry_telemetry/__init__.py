"""Pantry Telemetry - reconstruct pantry door activity from sensor telemetry."""

__version__ = "0.3.0"

from . import analysis, constants, data, exceptions, models
from .analysis import CycleReconstructor, TelemetrySummarizer
from .data import NormalizedTelemetry, SampleNormalizer, TelemetryLoader
from .models import (
    ActivityKind,
    ChartPoint,
    Cycle,
    DoorSample,
    DoorState,
    ReconstructionResult,
    RecentActivity,
    TelemetrySummary,
    WeightSample,
)
from .pipeline import Pipeline, reconstruct
from .settings import Settings, load_settings


def get_version() -> str:
    """Get the current version of pantry_telemetry."""
    return __version__


def get_package_info() -> dict[str, str]:
    """Get package information including name and version."""
    return {
        "name": "pantry-telemetry",
        "version": __version__,
        "description": "Reconstruct pantry door activity from sensor telemetry",
    }


__all__ = [
    # Version & Info
    "get_version",
    "get_package_info",
    # Models
    "ActivityKind",
    "ChartPoint",
    "Cycle",
    "DoorSample",
    "DoorState",
    "ReconstructionResult",
    "RecentActivity",
    "TelemetrySummary",
    "WeightSample",
    # Data Layer
    "NormalizedTelemetry",
    "SampleNormalizer",
    "TelemetryLoader",
    # Analysis Layer
    "CycleReconstructor",
    "TelemetrySummarizer",
    # Pipeline
    "Pipeline",
    "reconstruct",
    # Settings
    "Settings",
    "load_settings",
    # Modules
    "analysis",
    "constants",
    "data",
    "exceptions",
    "models",
]
