"""
Constants used throughout the Pantry Telemetry package.

This module centralizes unit factors, record field paths and signal encodings
so the resolution rules stay in one auditable place.
"""

from typing import Final, NamedTuple


# === Units ===
class UnitConversion:
    """Mass unit conversion factors."""

    POUNDS_TO_KG: Final[float] = 0.453592
    KG_TO_KG: Final[float] = 1.0


# === Time Constants ===
class TimeConstants:
    """Time-related constants."""

    SECONDS_PER_MINUTE: Final[int] = 60
    MILLISECONDS_PER_MINUTE: Final[int] = 60_000

    # Numeric timestamps are epoch milliseconds
    EPOCH_UNIT: Final[str] = "ms"


# === Record Layout ===
class WeightSource(NamedTuple):
    """Alternative paths for one mass reading, and the factor to kilograms."""

    paths: tuple[tuple[str, ...], ...]
    to_kg: float


class RecordFields:
    """Field paths inside a raw telemetry record."""

    TIMESTAMP: Final[str] = "ts"

    # Ordered by precedence: the first source that yields a finite number wins.
    # Within a source the first present path is read, even if malformed.
    WEIGHT_SOURCES: Final[tuple[WeightSource, ...]] = (
        WeightSource((("mass",),), UnitConversion.POUNDS_TO_KG),
        WeightSource(
            (("metrics", "weightKg"), ("metrics", "weightkg")),
            UnitConversion.KG_TO_KG,
        ),
    )

    # Ordered by precedence: the first present (non-null) flag is used
    DOOR_SOURCES: Final[tuple[tuple[str, ...], ...]] = (
        ("door",),
        ("flags", "door"),
    )

    # Envelope key used by the telemetry API
    PAYLOAD_ITEMS: Final[str] = "items"


# === Door Encodings ===
class DoorEncodings:
    """Literal values accepted for each door state."""

    OPEN_VALUES: Final[tuple[int | str, ...]] = (1, "1", "open", "opened")
    CLOSED_VALUES: Final[tuple[int | str, ...]] = (0, "0", "closed", "close")


# === Reconstruction Defaults ===
class ReconstructionDefaults:
    """Defaults for cycle reconstruction and summaries."""

    DELTA_PRECISION: Final[int] = 3
    RECENT_ACTIVITY_LIMIT: Final[int] = 4


# === File Extensions ===
class FileExtensions:
    """Payload file extensions understood by the loader."""

    JSON: Final[str] = ".json"
    JSON_LINES: Final[tuple[str, ...]] = (".jsonl", ".ndjson")
    YAML: Final[str] = ".yaml"
    YML: Final[str] = ".yml"
