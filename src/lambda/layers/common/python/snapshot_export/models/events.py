"""Typed event models for the snapshot exporter using Pydantic v2.

``SnapshotNotification`` is the RDS event body delivered through SNS,
``NotificationEvent`` is an accepted notification bound to one invocation and
``ExportTaskRequest`` is the payload handed to ``rds.start_export_task``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_EXPORT_TASK_IDENTIFIER_LENGTH = 60


class SnapshotNotification(BaseModel):
    """RDS event message body; fields other than the two below are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    event_message: Optional[str] = Field(default=None, alias="Event Message")
    source_identifier: Optional[str] = Field(default=None, alias="Source ID")


class NotificationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    event_message: str
    source_identifier: str
    invocation_token: str


class ExportTaskRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    role_arn: str
    task_identifier: str
    source_arn: str
    key_arn: str
    bucket_name: str
    bucket_prefix: Optional[str] = None

    @field_validator("task_identifier")
    @classmethod
    def _check_task_identifier(cls, v: str) -> str:  # type: ignore[override]
        if not v:
            raise ValueError("task_identifier must not be empty")
        if len(v) > MAX_EXPORT_TASK_IDENTIFIER_LENGTH:
            raise ValueError(f"task_identifier must be at most {MAX_EXPORT_TASK_IDENTIFIER_LENGTH} characters")
        if v.endswith("-"):
            raise ValueError("task_identifier must not end with '-'")
        return v

    def to_api_params(self) -> Dict[str, Any]:
        """Return keyword arguments for ``rds.start_export_task``."""
        params: Dict[str, Any] = {
            "IamRoleArn": self.role_arn,
            "ExportTaskIdentifier": self.task_identifier,
            "SourceArn": self.source_arn,
            "KmsKeyId": self.key_arn,
            "S3BucketName": self.bucket_name,
        }
        if self.bucket_prefix:
            params["S3Prefix"] = self.bucket_prefix
        return params
