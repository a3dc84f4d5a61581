"""Models subpackage exposed via Common Layer."""

from .events import (
    MAX_EXPORT_TASK_IDENTIFIER_LENGTH,
    ExportTaskRequest,
    NotificationEvent,
    SnapshotNotification,
)
from .settings import TriggerConfig, normalize_bucket_prefix, parse_accepted_events

__all__ = [
    "MAX_EXPORT_TASK_IDENTIFIER_LENGTH",
    "ExportTaskRequest",
    "NotificationEvent",
    "SnapshotNotification",
    "TriggerConfig",
    "normalize_bucket_prefix",
    "parse_accepted_events",
]
