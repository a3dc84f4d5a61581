"""Filtering and request assembly for the snapshot export trigger."""

from .filtering import FilterResult, FilterStatus, evaluate_notification, parse_notification
from .identifiers import build_task_identifier, token_truncated_away
from .requests import build_export_request, build_source_arn

__all__ = [
    "FilterResult",
    "FilterStatus",
    "evaluate_notification",
    "parse_notification",
    "build_task_identifier",
    "token_truncated_away",
    "build_export_request",
    "build_source_arn",
]
