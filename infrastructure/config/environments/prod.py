"""Production environment configuration."""

import os

prod_config = {
    "account_id": os.environ.get("CDK_DEFAULT_ACCOUNT"),
    "region": "ap-northeast-2",
    # Reuse an existing bucket/key by setting export_bucket_name / export_kms_key_arn.
    "export_prefix": "snapshots/",
    "snapshot_types": {"manual": True, "automated": True},
    "exporter_memory": 128,
    "exporter_timeout": 60,
    "log_retention_days": 90,
    "s3_retention_days": 365,
    "auto_delete_objects": False,
    "removal_policy": "retain",
    "enable_export_alarms": True,
    "notification_emails": [],
    "tags": {
        "Environment": "prod",
        "Project": "RdsSnapshotExport",
        "Owner": "DataTeam",
        "CostCenter": "Engineering",
    },
}
