"""Error taxonomy for the snapshot export trigger."""

from __future__ import annotations


class ExportTriggerError(Exception):
    """Base class for failures raised before an export request is submitted."""


class ConfigurationError(ExportTriggerError, RuntimeError):
    """Raised when a required trigger setting is missing."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing {field}")
        self.field = field


class MalformedMessageError(ExportTriggerError, ValueError):
    """Raised when a notification cannot be parsed or lacks a source identifier."""
