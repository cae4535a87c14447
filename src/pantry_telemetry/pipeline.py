"""
Reconstruction pipeline.

Runs the three stages in a fixed order with no feedback:
SampleNormalizer -> CycleReconstructor -> TelemetrySummarizer.
"""

import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from .analysis import CycleReconstructor, TelemetrySummarizer
from .data import SampleNormalizer, TelemetryLoader, select_window
from .exceptions import InvalidInputError, ProcessingError
from .models import ReconstructionResult, TelemetrySummary
from .settings import Settings, load_settings

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Thin orchestration over the normalizer, reconstructor and summarizer.

    Every run starts from scratch; the same input in the same order always
    yields the same output.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the pipeline.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self.normalizer = SampleNormalizer(settings)
        self.reconstructor = CycleReconstructor(settings)
        self.summarizer = TelemetrySummarizer(settings)
        self.logger = logging.getLogger(__name__)

    def reconstruct(self, records: Iterable[Any]) -> ReconstructionResult:
        """
        Normalize records and reconstruct cycles.

        Args:
            records: Raw telemetry records in any order

        Returns:
            ReconstructionResult with weight samples, door samples and cycles

        Raises:
            InvalidInputError: If records is not a collection
            ProcessingError: If reconstruction fails unexpectedly
        """
        result, _ = self.process(records)
        return result

    def process(
        self,
        records: Iterable[Any],
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> tuple[ReconstructionResult, TelemetrySummary]:
        """
        Run the full pipeline and return the output contract with its summary.

        Args:
            records: Raw telemetry records in any order
            start: Optional inclusive lower bound on record timestamps
            end: Optional inclusive upper bound on record timestamps
            limit: Number of recent cycles in the summary (defaults to settings)

        Returns:
            Tuple of (ReconstructionResult, TelemetrySummary)

        Raises:
            InvalidInputError: If records is not a collection
            ProcessingError: If reconstruction fails unexpectedly
        """
        try:
            if start is not None or end is not None:
                records = select_window(records, start, end)

            normalized = self.normalizer.normalize(records)
            cycles = self.reconstructor.reconstruct(normalized.timeline)
            summary = self.summarizer.summarize(normalized, cycles, limit=limit)

            self.logger.info(
                f"Processed {normalized.record_count} records into "
                f"{len(cycles)} cycles"
            )
            result = ReconstructionResult(
                weight_samples=normalized.weight_samples,
                door_samples=normalized.door_samples,
                cycles=cycles,
            )
            return result, summary

        except InvalidInputError:
            raise
        except Exception as e:
            self.logger.error(f"Reconstruction failed: {e}")
            raise ProcessingError(f"Pipeline execution failed: {e}") from e

    def run_file(
        self,
        path: Path | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> tuple[ReconstructionResult, TelemetrySummary]:
        """
        Load a saved payload and process it.

        Args:
            path: Payload file (defaults to settings.telemetry_file)
            start: Optional inclusive lower bound on record timestamps
            end: Optional inclusive upper bound on record timestamps
            limit: Number of recent cycles in the summary

        Returns:
            Tuple of (ReconstructionResult, TelemetrySummary)
        """
        records = TelemetryLoader(self.settings).load_records(path)
        return self.process(records, start=start, end=end, limit=limit)


def reconstruct(
    records: Iterable[Any], settings: Settings | None = None
) -> ReconstructionResult:
    """
    Reconstruct weight samples, door samples and cycles from raw records.

    Args:
        records: Raw telemetry records in any order
        settings: Optional settings (defaults to environment/default settings)

    Returns:
        ReconstructionResult
    """
    return Pipeline(settings or Settings()).reconstruct(records)


def run_pipeline(config_path: str, telemetry_path: str | None = None):
    """
    Run the pipeline from a config file.

    Args:
        config_path: Path to the configuration YAML file
        telemetry_path: Payload file overriding the configured one
    """
    settings = load_settings(Path(config_path))
    pipeline = Pipeline(settings)
    return pipeline.run_file(Path(telemetry_path) if telemetry_path else None)
