"""
Telemetry summary and recent activity.

This module derives latest-value summaries, the bounded recent activity view
and chart-ready weight points from normalized samples and cycles.
"""

import logging
from datetime import datetime
from typing import Any, Protocol

import pandas as pd

from ..data.normalizer import NormalizedTelemetry, parse_timestamp
from ..models import (
    ActivityKind,
    ChartPoint,
    Cycle,
    RecentActivity,
    TelemetrySummary,
    WeightSample,
)
from ..settings import Settings

logger = logging.getLogger(__name__)


class SummarizerProtocol(Protocol):
    """Protocol for summarizers."""

    def summarize(
        self, normalized: NormalizedTelemetry, cycles: list[Cycle]
    ) -> TelemetrySummary:
        """Create summary from normalized telemetry and cycles."""
        ...


def classify_cycle(cycle: Cycle) -> ActivityKind:
    """Classify a cycle by the sign of its mass delta."""
    if cycle.delta_kg is None or cycle.delta_kg == 0:
        return ActivityKind.NEUTRAL
    if cycle.delta_kg > 0:
        return ActivityKind.ADDED
    return ActivityKind.REMOVED


class TelemetrySummarizer:
    """
    Service for creating telemetry summaries.

    Reads samples and cycles only; nothing is modified.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the summarizer service.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def summarize(
        self,
        normalized: NormalizedTelemetry,
        cycles: list[Cycle],
        limit: int | None = None,
    ) -> TelemetrySummary:
        """
        Build the summary for one reconstruction run.

        Args:
            normalized: Normalized telemetry
            cycles: Reconstructed cycles, oldest first
            limit: Number of recent cycles to show (defaults to settings)

        Returns:
            TelemetrySummary
        """
        if limit is None:
            limit = self.settings.recent_activity_limit

        weights = normalized.weight_samples
        doors = normalized.door_samples
        chart_points = self.chart_points(cycles, weights, limit)

        weight_range = None
        if chart_points:
            values = [point.weight_kg for point in chart_points]
            weight_range = (min(values), max(values))

        return TelemetrySummary(
            record_count=normalized.record_count,
            latest_weight_kg=weights[-1].weight_kg if weights else None,
            latest_door_state=doors[-1].state if doors else None,
            last_updated=self._last_updated(normalized.timeline),
            total_cycles=len(cycles),
            recent_activity=self.recent_activity(cycles, limit),
            chart_points=chart_points,
            weight_range_kg=weight_range,
        )

    def recent_activity(self, cycles: list[Cycle], limit: int) -> list[RecentActivity]:
        """Return the last ``limit`` cycles, newest first, with their kind."""
        if limit <= 0:
            return []
        recent = cycles[-limit:]
        return [
            RecentActivity(cycle=cycle, kind=classify_cycle(cycle))
            for cycle in reversed(recent)
        ]

    def chart_points(
        self, cycles: list[Cycle], weights: list[WeightSample], limit: int
    ) -> list[ChartPoint]:
        """
        Prepare weight points for a chart.

        With cycles, the open and close boundaries of the last ``limit`` cycles
        that carry a mass are used, sorted by time. Without cycles, every weight
        sample is used.
        """
        if not cycles:
            return [
                ChartPoint(
                    timestamp=sample.timestamp,
                    time=sample.time,
                    weight_kg=sample.weight_kg,
                )
                for sample in weights
            ]

        recent = cycles[-limit:] if limit > 0 else []
        points = []
        for cycle in recent:
            if cycle.open_timestamp is not None and cycle.open_mass_kg is not None:
                points.append(
                    self._boundary_point(
                        cycle.open_timestamp, cycle.open_mass_kg, "open", cycle
                    )
                )
            if cycle.close_timestamp is not None and cycle.close_mass_kg is not None:
                points.append(
                    self._boundary_point(
                        cycle.close_timestamp, cycle.close_mass_kg, "close", cycle
                    )
                )

        # Unparseable times go last, ties keep boundary order
        return sorted(
            points,
            key=lambda p: (p.time is None, p.time.timestamp() if p.time else 0.0),
        )

    def _boundary_point(
        self, timestamp: Any, weight_kg: float, marker: str, cycle: Cycle
    ) -> ChartPoint:
        parsed = parse_timestamp(timestamp)
        return ChartPoint(
            timestamp=timestamp,
            time=parsed.to_pydatetime() if parsed is not None else None,
            weight_kg=weight_kg,
            marker=marker,
            delta_kg=cycle.delta_kg,
        )

    def _last_updated(self, timeline: pd.DataFrame) -> datetime | None:
        """Latest parseable record time, or None."""
        if timeline.empty or timeline["time"].isna().all():
            return None
        return timeline["time"].max().to_pydatetime()
