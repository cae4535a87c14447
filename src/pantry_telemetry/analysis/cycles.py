"""
Door cycle reconstruction.

Pairs "open" and "closed" door readings from the merged per-record timeline
into completed cycles and attaches mass deltas and durations.

Scan rules:
    - At most one pending open exists at a time. Repeated opens coalesce:
      the first open keeps its timestamp, later opens only refresh the mass.
    - A close with no pending open is dropped (truncated history start).
    - A pending open left when the scan ends is dropped (door still open).
    - A missing open mass is taken from the nearest earlier record with a
      mass, searching backward from the close record. A missing close mass
      is taken from the nearest later record, searching forward.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Protocol

import numpy as np
import pandas as pd

from ..constants import TimeConstants
from ..models import Cycle, DoorState
from ..settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingOpen:
    """An open door reading that has not been closed yet."""

    timestamp: Any
    time: pd.Timestamp | None
    mass_kg: float | None


def apply_open(
    pending: PendingOpen | None,
    timestamp: Any,
    time: pd.Timestamp | None,
    mass_kg: float | None,
) -> PendingOpen:
    """Advance the scan state on an open reading."""
    if pending is None:
        return PendingOpen(timestamp=timestamp, time=time, mass_kg=mass_kg)
    if mass_kg is not None:
        return replace(pending, mass_kg=mass_kg)
    return pending


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (1.5 -> 2, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class CycleReconstructorProtocol(Protocol):
    """Protocol for cycle reconstructors."""

    def reconstruct(self, timeline: pd.DataFrame) -> list[Cycle]:
        """Reconstruct cycles from a normalized timeline."""
        ...


class CycleReconstructor:
    """
    Reconstructs open->close door cycles from a normalized timeline.

    The timeline must be sorted chronologically and carry the columns
    ``timestamp``, ``time``, ``weight_kg`` and ``door_state`` as produced by
    :class:`~pantry_telemetry.data.normalizer.SampleNormalizer`.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the reconstructor.

        Args:
            settings: Application settings with fallback radius and precision
        """
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def reconstruct(self, timeline: pd.DataFrame) -> list[Cycle]:
        """
        Scan the timeline once and emit completed cycles, oldest first.

        Args:
            timeline: Sorted per-record timeline

        Returns:
            List of completed cycles in chronological order
        """
        if timeline.empty:
            return []

        timestamps = list(timeline["timestamp"])
        times = [None if pd.isna(t) else t for t in timeline["time"]]
        weights = timeline["weight_kg"].to_numpy(dtype=float)
        doors = list(timeline["door_state"])

        cycles: list[Cycle] = []
        pending: PendingOpen | None = None
        unmatched_closes = 0

        for index, state in enumerate(doors):
            if state is None:
                continue
            mass = None if np.isnan(weights[index]) else float(weights[index])

            if state == DoorState.OPEN:
                pending = apply_open(pending, timestamps[index], times[index], mass)
            elif state == DoorState.CLOSED:
                if pending is None:
                    unmatched_closes += 1
                    continue
                cycles.append(
                    self._close_cycle(pending, index, timestamps, times, weights)
                )
                pending = None

        if unmatched_closes:
            self.logger.debug(f"Dropped {unmatched_closes} closes without an open")
        if pending is not None:
            self.logger.debug(
                f"Dropped open cycle still in progress since {pending.timestamp}"
            )
        self.logger.debug(f"Reconstructed {len(cycles)} cycles")
        return cycles

    def _close_cycle(
        self,
        pending: PendingOpen,
        index: int,
        timestamps: list[Any],
        times: list[pd.Timestamp | None],
        weights: np.ndarray,
    ) -> Cycle:
        """Build a cycle closed by the record at ``index``."""
        open_mass = pending.mass_kg
        if open_mass is None:
            open_mass = self._nearest_mass(weights, times, index, step=-1)

        close_mass = None if np.isnan(weights[index]) else float(weights[index])
        if close_mass is None:
            close_mass = self._nearest_mass(weights, times, index, step=1)

        delta = None
        if open_mass is not None and close_mass is not None:
            delta = round(close_mass - open_mass, self.settings.delta_precision)

        duration = None
        if pending.time is not None and times[index] is not None:
            elapsed = (times[index] - pending.time).total_seconds()
            duration = round_half_up(elapsed / TimeConstants.SECONDS_PER_MINUTE)

        return Cycle(
            open_timestamp=pending.timestamp,
            open_mass_kg=open_mass,
            close_timestamp=timestamps[index],
            close_mass_kg=close_mass,
            delta_kg=delta,
            duration_minutes=duration,
        )

    def _nearest_mass(
        self,
        weights: np.ndarray,
        times: list[pd.Timestamp | None],
        index: int,
        step: int,
    ) -> float | None:
        """
        Find the nearest mass strictly before (step=-1) or after (step=1) index.

        Without a configured radius the search is unbounded. With a radius the
        nearest candidate must lie within it, otherwise no mass is resolved.
        """
        position = index + step
        while 0 <= position < len(weights):
            if not np.isnan(weights[position]):
                if self._within_radius(times[index], times[position]):
                    return float(weights[position])
                return None
            position += step
        return None

    def _within_radius(
        self, origin: pd.Timestamp | None, candidate: pd.Timestamp | None
    ) -> bool:
        """Check a fallback candidate against the configured radius."""
        radius = self.settings.fallback_radius_minutes
        if radius is None:
            return True
        if origin is None or candidate is None:
            return False
        gap = abs((candidate - origin).total_seconds())
        return gap <= radius * TimeConstants.SECONDS_PER_MINUTE
