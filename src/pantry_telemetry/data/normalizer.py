"""
Raw telemetry normalization.

This module turns heterogeneous, untrusted telemetry records into a
time-ordered per-record timeline plus canonical weight and door sample
sequences. Malformed fields degrade to "absent"; only input that is not a
collection of records at all is rejected.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

import numpy as np
import pandas as pd

from ..constants import DoorEncodings, RecordFields, TimeConstants
from ..exceptions import InvalidInputError
from ..models import DoorSample, DoorState, WeightSample
from ..settings import Settings

logger = logging.getLogger(__name__)

TIMELINE_COLUMNS = ["record_index", "timestamp", "time", "weight_kg", "door_state"]


@dataclass
class NormalizedTelemetry:
    """Result of normalizing a batch of raw records."""

    timeline: pd.DataFrame
    weight_samples: list[WeightSample] = field(default_factory=list)
    door_samples: list[DoorSample] = field(default_factory=list)
    record_count: int = 0


class NormalizerProtocol(Protocol):
    """Protocol for telemetry normalizers."""

    def normalize(self, records: Iterable[Any]) -> NormalizedTelemetry:
        """Normalize raw records."""
        ...


def parse_timestamp(value: Any) -> pd.Timestamp | None:
    """
    Parse a raw timestamp into a UTC instant.

    Strings and datetimes are parsed as ISO-8601 (naive values are taken as
    UTC); ints and floats are epoch milliseconds. Anything else is None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, np.integer, np.floating)):
            if not np.isfinite(value):
                return None
            parsed = pd.to_datetime(value, unit=TimeConstants.EPOCH_UNIT, utc=True)
        elif isinstance(value, (str, datetime)):
            parsed = pd.to_datetime(value, utc=True)
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed


def coerce_number(value: Any) -> float | None:
    """Return value as a finite float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if np.isfinite(number) else None


def _is_missing(value: Any) -> bool:
    """None and scalar NA markers (NaN, NaT, pd.NA) count as absent."""
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _lookup(record: Mapping, path: tuple[str, ...]) -> Any:
    """Follow a key path through nested mappings."""
    current: Any = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return None if _is_missing(current) else current


def _first_present(record: Mapping, paths: tuple[tuple[str, ...], ...]) -> Any:
    for path in paths:
        value = _lookup(record, path)
        if value is not None:
            return value
    return None


def resolve_weight_kg(record: Mapping) -> float | None:
    """Resolve a record's mass in kilograms from its ordered weight sources."""
    for source in RecordFields.WEIGHT_SOURCES:
        number = coerce_number(_first_present(record, source.paths))
        if number is not None:
            return number * source.to_kg
    return None


def map_door_value(value: Any) -> DoorState | None:
    """Map one raw door encoding onto a door state."""
    if value is None or isinstance(value, bool):
        return None
    if value in DoorEncodings.OPEN_VALUES:
        return DoorState.OPEN
    if value in DoorEncodings.CLOSED_VALUES:
        return DoorState.CLOSED
    return None


def resolve_door_state(record: Mapping) -> DoorState | None:
    """Resolve a record's door state from the first flag that is present."""
    return map_door_value(_first_present(record, RecordFields.DOOR_SOURCES))


def _as_record_list(records: Any) -> list[Any]:
    """Materialize the input collection, failing fast on non-collections."""
    if isinstance(records, pd.DataFrame):
        return records.to_dict(orient="records")
    if (
        records is None
        or isinstance(records, (str, bytes, Mapping))
        or not isinstance(records, Iterable)
    ):
        raise InvalidInputError(
            f"Telemetry must be a collection of records, got {type(records).__name__}"
        )
    return list(records)


def select_window(
    records: Iterable[Any],
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[Any]:
    """
    Keep the records whose timestamp falls inside an inclusive window.

    With no bounds every record is kept. With a bound, records without a
    parseable timestamp are dropped.

    Args:
        records: Raw telemetry records
        start: Earliest timestamp to keep (naive values are taken as UTC)
        end: Latest timestamp to keep (naive values are taken as UTC)

    Returns:
        List of the selected records in input order
    """
    items = _as_record_list(records)
    if start is None and end is None:
        return items

    lower = parse_timestamp(start) if start is not None else None
    upper = parse_timestamp(end) if end is not None else None

    selected = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        ts = parse_timestamp(_lookup(item, (RecordFields.TIMESTAMP,)))
        if ts is None:
            continue
        if lower is not None and ts < lower:
            continue
        if upper is not None and ts > upper:
            continue
        selected.append(item)

    logger.debug(f"Selected {len(selected)} of {len(items)} records in window")
    return selected


class SampleNormalizer:
    """
    Converts raw telemetry records into canonical, time-ordered sequences.

    The per-record timeline keeps weight and door readings side by side so the
    cycle reconstructor can look up neighbouring masses regardless of whether
    a record carried a door flag.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the normalizer.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def normalize(self, records: Iterable[Any]) -> NormalizedTelemetry:
        """
        Normalize a batch of raw records.

        Args:
            records: Raw telemetry records in any order

        Returns:
            NormalizedTelemetry with the sorted timeline and sample sequences

        Raises:
            InvalidInputError: If records is not a collection
        """
        items = _as_record_list(records)
        timeline = self.build_timeline(items)

        weight_samples = [
            WeightSample(
                timestamp=row.timestamp,
                time=_to_datetime(row.time),
                weight_kg=float(row.weight_kg),
            )
            for row in timeline.itertuples(index=False)
            if not pd.isna(row.weight_kg)
        ]
        door_samples = [
            DoorSample(
                timestamp=row.timestamp,
                time=_to_datetime(row.time),
                state=row.door_state,
            )
            for row in timeline.itertuples(index=False)
            if row.door_state is not None
        ]

        self.logger.debug(
            f"Normalized {len(items)} records into {len(weight_samples)} weight "
            f"and {len(door_samples)} door samples"
        )
        return NormalizedTelemetry(
            timeline=timeline,
            weight_samples=weight_samples,
            door_samples=door_samples,
            record_count=len(items),
        )

    def build_timeline(self, items: list[Any]) -> pd.DataFrame:
        """
        Build the stably sorted per-record timeline.

        Records with unparseable timestamps keep their relative order and sort
        after every parseable one.
        """
        rows = {column: [] for column in TIMELINE_COLUMNS}
        skipped = 0
        for index, item in enumerate(items):
            if not isinstance(item, Mapping):
                skipped += 1
                continue
            raw_ts = _lookup(item, (RecordFields.TIMESTAMP,))
            rows["record_index"].append(index)
            rows["timestamp"].append(raw_ts)
            rows["time"].append(parse_timestamp(raw_ts))
            rows["weight_kg"].append(resolve_weight_kg(item))
            rows["door_state"].append(resolve_door_state(item))

        if skipped:
            self.logger.warning(f"Ignored {skipped} records that are not mappings")

        timeline = pd.DataFrame(
            {
                "record_index": pd.Series(rows["record_index"], dtype="int64"),
                "timestamp": pd.Series(rows["timestamp"], dtype="object"),
                "time": pd.to_datetime(
                    pd.Series(rows["time"], dtype="object"), utc=True
                ),
                "weight_kg": pd.Series(rows["weight_kg"], dtype="float64"),
                "door_state": pd.Series(rows["door_state"], dtype="object"),
            }
        )
        return timeline.sort_values(
            "time", kind="stable", na_position="last"
        ).reset_index(drop=True)


def _to_datetime(value: Any) -> datetime | None:
    """Convert a timeline instant to a plain datetime."""
    if value is None or pd.isna(value):
        return None
    return value.to_pydatetime()
