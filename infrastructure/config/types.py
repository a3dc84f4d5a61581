"""Typed configuration contracts for environment-specific settings."""

from __future__ import annotations

from typing import Dict, List, NotRequired, Required, TypedDict


class SnapshotTypesConfig(TypedDict, total=False):
    """Which RDS snapshot kinds trigger an export."""

    manual: bool
    automated: bool


class EnvironmentConfig(TypedDict, total=False):
    """Strongly-typed environment configuration contract."""

    region: Required[str]
    account_id: NotRequired[str | None]

    export_bucket_name: NotRequired[str]
    export_prefix: NotRequired[str]
    export_kms_key_arn: NotRequired[str]

    snapshot_types: NotRequired[SnapshotTypesConfig]
    snapshot_name_prefix_filter: NotRequired[str]

    exporter_memory: NotRequired[int]
    exporter_timeout: NotRequired[int]
    log_retention_days: NotRequired[int]

    s3_retention_days: NotRequired[int]
    auto_delete_objects: NotRequired[bool]
    removal_policy: NotRequired[str]

    enable_export_alarms: NotRequired[bool]
    notification_emails: NotRequired[List[str]]

    tags: NotRequired[Dict[str, str]]
