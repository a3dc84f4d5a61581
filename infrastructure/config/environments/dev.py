"""Development environment configuration."""

import os

dev_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    "export_prefix": "snapshots/",
    "snapshot_types": {"manual": True, "automated": False},
    "exporter_memory": 128,
    "exporter_timeout": 30,
    "log_retention_days": 14,
    "s3_retention_days": 30,
    "auto_delete_objects": True,
    "removal_policy": "destroy",
    "enable_export_alarms": False,
    "notification_emails": [],
    "tags": {
        "Environment": "dev",
        "Project": "RdsSnapshotExport",
        "Owner": "DataTeam",
        "CostCenter": "Engineering",
    },
}
