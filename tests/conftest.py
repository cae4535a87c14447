"""
Shared pytest fixtures for Pantry Telemetry tests.

This module provides reusable fixtures for:
- Settings configurations
- Pipeline components
- Raw telemetry records in the shapes the pantry devices send
- Temporary payload and config files
"""

import json
from pathlib import Path

import pytest
import yaml

from pantry_telemetry.analysis import CycleReconstructor, TelemetrySummarizer
from pantry_telemetry.data import SampleNormalizer
from pantry_telemetry.pipeline import Pipeline
from pantry_telemetry.settings import Settings

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    """Provide default settings."""
    return Settings()


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Path for a temporary YAML config file."""
    return tmp_path / "config.yaml"


@pytest.fixture
def sample_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file with sample data."""
    config_path = tmp_path / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(
            {
                "data_dir": "data",
                "telemetry_file": "history.json",
                "recent_activity_limit": 2,
                "fallback_radius_minutes": 30,
            },
            f,
        )
    return config_path


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def normalizer(settings: Settings) -> SampleNormalizer:
    return SampleNormalizer(settings)


@pytest.fixture
def reconstructor(settings: Settings) -> CycleReconstructor:
    return CycleReconstructor(settings)


@pytest.fixture
def summarizer(settings: Settings) -> TelemetrySummarizer:
    return TelemetrySummarizer(settings)


@pytest.fixture
def pipeline(settings: Settings) -> Pipeline:
    return Pipeline(settings)


# ============================================================================
# Data Fixtures - Raw Records
# ============================================================================


@pytest.fixture
def simple_cycle_records() -> list[dict]:
    """
    Provide one open followed by one close, 90 seconds apart.

    10.0 kg at open, 9.5 kg at close.
    """
    return [
        {
            "ts": "2024-05-01T08:00:00Z",
            "door": "open",
            "metrics": {"weightKg": 10.0},
        },
        {
            "ts": "2024-05-01T08:01:30Z",
            "door": "closed",
            "metrics": {"weightKg": 9.5},
        },
    ]


@pytest.fixture
def pantry_history() -> list[dict]:
    """
    Provide a realistic, unsorted day of pantry telemetry.

    Mixed encodings: pounds and kilograms, top-level and nested door flags.
    Contains three complete cycles (removed, added, unknown), one leading
    close without an open, and a trailing open still in progress.
    """
    return [
        # Cycle 2: someone adds 2 kg (nested flags, numeric strings)
        {"ts": "2024-05-01T12:00:00Z", "flags": {"door": "1"}, "metrics": {"weightKg": 8.0}},
        {"ts": "2024-05-01T12:03:00Z", "flags": {"door": "0"}, "metrics": {"weightkg": "10.0"}},
        # Leading close without an open
        {"ts": "2024-05-01T06:00:00Z", "door": 0, "metrics": {"weightKg": 12.0}},
        # Cycle 1: someone removes 4 kg (pounds at open)
        {"ts": "2024-05-01T08:00:00Z", "door": 1, "mass": 26.455},
        {"ts": "2024-05-01T08:02:00Z", "door": "close", "metrics": {"weightKg": 8.0}},
        # Periodic weight-only reading
        {"ts": "2024-05-01T10:00:00Z", "metrics": {"weightKg": 8.0}},
        # Cycle 3: door events without any weight afterwards
        {"ts": "2024-05-01T18:00:00Z", "door": "opened"},
        {"ts": "2024-05-01T18:05:00Z", "door": "closed"},
        # Trailing open still in progress
        {"ts": "2024-05-01T20:00:00Z", "door": "open"},
    ]


# ============================================================================
# File Fixtures
# ============================================================================


@pytest.fixture
def payload_file(tmp_path: Path, simple_cycle_records: list[dict]) -> Path:
    """Save records wrapped in the API's items envelope."""
    path = tmp_path / "history.json"
    path.write_text(json.dumps({"items": simple_cycle_records}), encoding="utf-8")
    return path
