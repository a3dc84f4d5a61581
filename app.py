#!/usr/bin/env python3
"""
RDS Snapshot Export CDK App
Exports RDS snapshots to S3 (Parquet) whenever a snapshot is created.
"""

import aws_cdk as cdk

from infrastructure.config.environments import get_environment_config
from infrastructure.stacks.snapshot_export_stack import SnapshotExportStack

app = cdk.App()

# Get environment configuration
environment = app.node.try_get_context("environment") or "dev"
config = get_environment_config(environment)

# CDK environment (account/region)
cdk_env = cdk.Environment(account=config.get("account_id"), region=config.get("region", "ap-northeast-2"))

snapshot_export_stack = SnapshotExportStack(
    app,
    f"RdsSnapshotExport-{environment}",
    environment=environment,
    config=config,
    env=cdk_env,
)

# ========================================
# TAGGING STRATEGY
# ========================================

cdk.Tags.of(app).add("Environment", environment)
cdk.Tags.of(app).add("ManagedBy", "CDK")
for tag_key, tag_value in (config.get("tags") or {}).items():
    cdk.Tags.of(snapshot_export_stack).add(tag_key, tag_value)

app.synth()
