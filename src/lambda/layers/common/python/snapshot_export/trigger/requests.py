"""Assemble the StartExportTask request."""

from __future__ import annotations

from snapshot_export.models.events import ExportTaskRequest, NotificationEvent
from snapshot_export.models.settings import TriggerConfig


def build_source_arn(snapshot_arn_prefix: str, source_identifier: str) -> str:
    return f"{snapshot_arn_prefix}:{source_identifier}"


def build_export_request(config: TriggerConfig, event: NotificationEvent, task_identifier: str) -> ExportTaskRequest:
    return ExportTaskRequest(
        role_arn=config.role_arn,
        task_identifier=task_identifier,
        source_arn=build_source_arn(config.snapshot_arn_prefix, event.source_identifier),
        key_arn=config.key_arn,
        bucket_name=config.bucket_name,
        bucket_prefix=config.bucket_prefix,
    )
