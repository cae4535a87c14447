"""
Data models for the Pantry Telemetry package.

All derived structures are immutable Pydantic models rebuilt from scratch on
every run. They serialise with camelCase aliases (``weightKg``,
``openTimestamp``...) so ``model_dump(by_alias=True)`` yields the external
output contract.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TelemetryModel(BaseModel):
    """Base model: frozen, camelCase aliases, populated by field name."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


class DoorState(str, Enum):
    """Canonical door states."""

    OPEN = "open"
    CLOSED = "closed"


class ActivityKind(str, Enum):
    """Human-facing classification of a cycle's mass change."""

    ADDED = "added"
    REMOVED = "removed"
    NEUTRAL = "neutral"


class WeightSample(TelemetryModel):
    """A normalized weight reading."""

    timestamp: Any = Field(None, description="Timestamp exactly as supplied")
    time: datetime | None = Field(None, description="Parsed UTC instant")
    weight_kg: float = Field(..., description="Weight in kilograms")


class DoorSample(TelemetryModel):
    """A normalized door-state reading."""

    timestamp: Any = Field(None, description="Timestamp exactly as supplied")
    time: datetime | None = Field(None, description="Parsed UTC instant")
    state: DoorState = Field(..., description="Door state")


class Cycle(TelemetryModel):
    """One reconstructed door-open-to-close interval."""

    open_timestamp: Any = Field(None, description="Timestamp of the open record")
    open_mass_kg: float | None = Field(None, description="Mass at open in kg")
    close_timestamp: Any = Field(None, description="Timestamp of the close record")
    close_mass_kg: float | None = Field(None, description="Mass at close in kg")
    delta_kg: float | None = Field(
        None, description="Close mass minus open mass, rounded to 3 decimals"
    )
    duration_minutes: int | None = Field(
        None, description="Open-to-close duration in whole minutes"
    )


class ReconstructionResult(TelemetryModel):
    """Output contract of a reconstruction run."""

    weight_samples: list[WeightSample] = Field(default_factory=list)
    door_samples: list[DoorSample] = Field(default_factory=list)
    cycles: list[Cycle] = Field(default_factory=list)


class RecentActivity(TelemetryModel):
    """A cycle annotated for presentation."""

    cycle: Cycle
    kind: ActivityKind

    @property
    def display_time(self) -> Any:
        """Timestamp shown for the activity: close time, else open time."""
        if self.cycle.close_timestamp is not None:
            return self.cycle.close_timestamp
        return self.cycle.open_timestamp


class ChartPoint(TelemetryModel):
    """A weight point prepared for charting."""

    timestamp: Any = Field(None, description="Timestamp exactly as supplied")
    time: datetime | None = Field(None, description="Parsed UTC instant")
    weight_kg: float = Field(..., description="Weight in kilograms")
    marker: str | None = Field(
        None, description="'open' or 'close' for cycle boundaries"
    )
    delta_kg: float | None = Field(None, description="Delta of the owning cycle")


class TelemetrySummary(TelemetryModel):
    """Scalar and latest-value summary of a reconstruction run."""

    record_count: int = Field(0, description="Number of raw records supplied")
    latest_weight_kg: float | None = Field(None, description="Last weight in kg")
    latest_door_state: DoorState | None = Field(
        None, description="Last observed door state"
    )
    last_updated: datetime | None = Field(
        None, description="Most recent parsed record timestamp"
    )
    total_cycles: int = Field(0, description="Number of reconstructed cycles")
    recent_activity: list[RecentActivity] = Field(
        default_factory=list, description="Most recent cycles, newest first"
    )
    chart_points: list[ChartPoint] = Field(
        default_factory=list, description="Weight points prepared for charting"
    )
    weight_range_kg: tuple[float, float] | None = Field(
        None, description="Min and max weight over the chart points"
    )

    @property
    def has_data(self) -> bool:
        """Whether any record was supplied at all."""
        return self.record_count > 0
