"""
Data loading functionality.

This module reads telemetry payloads that a fetch collaborator has already
saved to disk. Both the API envelope (``{"items": [...]}``) and a bare JSON
array are accepted, as is JSON Lines with one record per line.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from ..constants import FileExtensions, RecordFields
from ..exceptions import DataLoadError
from ..settings import Settings

logger = logging.getLogger(__name__)


class DataLoaderProtocol(Protocol):
    """Protocol for data loaders."""

    def load_records(self, path: Path | None = None) -> list[Any]:
        """Load raw telemetry records."""
        ...


class TelemetryLoader:
    """
    Handles loading of saved telemetry payloads.

    Records are returned untouched; all shape tolerance lives in the
    normalizer.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the data loader.

        Args:
            settings: Application settings containing data paths
        """
        self.settings = settings
        self.logger = logging.getLogger(__name__)

    def load_records(self, path: Path | None = None) -> list[Any]:
        """
        Load raw records from a payload file.

        Args:
            path: Payload file (defaults to settings.telemetry_file)

        Returns:
            List of raw records

        Raises:
            DataLoadError: If the file is missing, unreadable or misshapen
        """
        payload_file = path or self.settings.telemetry_file
        if payload_file is None:
            raise DataLoadError("No telemetry file configured")
        if not payload_file.exists():
            raise DataLoadError(f"Telemetry file not found: {payload_file}")

        self.logger.info(f"Loading telemetry from {payload_file}")
        try:
            with open(payload_file, encoding="utf-8") as f:
                if payload_file.suffix.lower() in FileExtensions.JSON_LINES:
                    records = [json.loads(line) for line in f if line.strip()]
                else:
                    records = self._unwrap(json.load(f))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Failed to load telemetry: {e}") from e

        self.logger.info(f"Loaded {len(records)} telemetry records")
        return records

    def _unwrap(self, payload: Any) -> list[Any]:
        """Accept a bare array or the API's items envelope."""
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            items = payload.get(RecordFields.PAYLOAD_ITEMS)
            if isinstance(items, list):
                return items
            if items is None:
                self.logger.warning("Payload has no items; treating as empty")
                return []
        raise DataLoadError(
            f"Unsupported payload shape: expected a list or an object with "
            f"'{RecordFields.PAYLOAD_ITEMS}'"
        )
