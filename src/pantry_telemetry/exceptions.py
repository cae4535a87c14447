"""
Custom exceptions for the Pantry Telemetry package.

Malformed fields inside telemetry records never raise; these exceptions cover
structurally invalid input, configuration problems and I/O at the edges.
"""


class PantryTelemetryError(Exception):
    """Base exception for all Pantry Telemetry errors."""


class ConfigurationError(PantryTelemetryError):
    """Raised when there is an issue with configuration settings."""


class ValidationError(PantryTelemetryError):
    """Raised when data validation fails."""


class InvalidInputError(ValidationError):
    """Raised when the telemetry input is not a collection of records."""


class DataLoadError(PantryTelemetryError):
    """Raised when a saved telemetry payload cannot be loaded."""


class ProcessingError(PantryTelemetryError):
    """Raised when there is an error reconstructing telemetry."""
