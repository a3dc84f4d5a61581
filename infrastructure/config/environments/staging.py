"""Staging environment configuration."""

import os

staging_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    "export_prefix": "snapshots/",
    "snapshot_types": {"manual": True, "automated": True},
    "exporter_memory": 128,
    "exporter_timeout": 60,
    "log_retention_days": 30,
    "s3_retention_days": 90,
    "auto_delete_objects": False,
    "removal_policy": "retain",
    "enable_export_alarms": True,
    "notification_emails": [],
    "tags": {
        "Environment": "staging",
        "Project": "RdsSnapshotExport",
        "Owner": "DataTeam",
        "CostCenter": "Engineering",
    },
}
