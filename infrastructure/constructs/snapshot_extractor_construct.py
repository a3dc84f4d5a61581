"""Construct wiring RDS snapshot events to the snapshot exporter Lambda."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from aws_cdk import (
    Duration,
    Stack,
    aws_iam as iam,
    aws_kms as kms,
    aws_lambda as lambda_,
    aws_logs as logs,
    aws_s3 as s3,
    aws_sns as sns,
    aws_sns_subscriptions as subs,
)
from aws_cdk.aws_lambda_python_alpha import BundlingOptions, PythonFunction, PythonLayerVersion
from constructs import Construct

from infrastructure.constructs.rds_event_subscription import (
    EventCategory,
    RdsEventSubscriptionConstruct,
    SourceType,
)
from infrastructure.core.iam.export_permissions import (
    EXPORT_SERVICE_PRINCIPAL,
    GrantStatement,
    PermissionBoundary,
    build_permission_boundary,
)

MANUAL_SNAPSHOT_EVENT = "Manual snapshot created"
AUTOMATED_SNAPSHOT_EVENT = "Automated snapshot created"
AUTOMATED_SNAPSHOT_ID_PREFIX = "rds:"


@dataclass(frozen=True)
class SnapshotTypes:
    """Snapshot kinds to export; at least one must be selected."""

    manual: bool = False
    automated: bool = False

    def __post_init__(self) -> None:
        if not (self.manual or self.automated):
            raise ValueError("At least one snapshot type (manual, automated) must be exported")

    @classmethod
    def from_config(cls, raw: Optional[Dict[str, bool]]) -> "SnapshotTypes":
        raw = raw or {"manual": True}
        return cls(manual=bool(raw.get("manual")), automated=bool(raw.get("automated")))

    def event_messages(self) -> List[str]:
        messages: List[str] = []
        if self.manual:
            messages.append(MANUAL_SNAPSHOT_EVENT)
        if self.automated:
            messages.append(AUTOMATED_SNAPSHOT_EVENT)
        return messages

    def check_name_prefix_filter(self, name_prefix_filter: Optional[str]) -> None:
        """Raise ``ValueError`` when the filter would exclude a selected snapshot kind.

        Automated snapshot identifiers always start with ``rds:`` and manual ones
        never do, so a filter can only match one kind.
        """
        if not name_prefix_filter:
            return
        automated_filter = name_prefix_filter.startswith(AUTOMATED_SNAPSHOT_ID_PREFIX)
        if self.manual and automated_filter:
            raise ValueError(
                f"Name prefix filter '{name_prefix_filter}' only matches automated snapshots but manual exports are enabled"
            )
        if self.automated and not automated_filter:
            raise ValueError(
                f"Name prefix filter '{name_prefix_filter}' never matches automated snapshot identifiers "
                f"('{AUTOMATED_SNAPSHOT_ID_PREFIX}...') but automated exports are enabled"
            )


def to_cdk_statement(grant: GrantStatement) -> iam.PolicyStatement:
    return iam.PolicyStatement.from_json(grant.to_policy_statement())


class SnapshotExtractorConstruct(Construct):
    """Export every matching RDS snapshot to S3 as soon as it is created.

    Creates the export role assumed by RDS, the exporter function, an SNS
    topic fed by an RDS event subscription for snapshot creation events, and
    the grants tying them together.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        env_name: str,
        bucket: s3.IBucket,
        key: kms.IKey,
        snapshot_types: SnapshotTypes,
        prefix: Optional[str] = None,
        name_prefix_filter: Optional[str] = None,
        on_success: Optional[lambda_.IDestination] = None,
        on_failure: Optional[lambda_.IDestination] = None,
        memory_size: int = 128,
        timeout: Optional[Duration] = None,
        log_retention: Optional[logs.RetentionDays] = None,
    ) -> None:
        super().__init__(scope, construct_id)

        snapshot_types.check_name_prefix_filter(name_prefix_filter)
        self.env_name = env_name
        self.snapshot_arn_prefix = Stack.of(self).format_arn(service="rds", resource="snapshot")

        self.export_role = iam.Role(
            self,
            "ExportRole",
            assumed_by=iam.ServicePrincipal(EXPORT_SERVICE_PRINCIPAL),
            description="Role assumed by RDS to write snapshot exports to S3",
        )

        self.common_layer = self._create_common_layer()
        self.export_function = self._create_export_function(
            bucket=bucket,
            key=key,
            prefix=prefix,
            snapshot_types=snapshot_types,
            name_prefix_filter=name_prefix_filter,
            memory_size=memory_size,
            timeout=timeout or Duration.seconds(30),
            log_retention=log_retention,
        )

        if on_success or on_failure:
            # SNS invokes asynchronously; retries stay with the Lambda async policy.
            self.export_function.configure_async_invoke(on_success=on_success, on_failure=on_failure)

        self.permissions = build_permission_boundary(
            bucket_arn=bucket.bucket_arn,
            prefix=prefix,
            export_role_arn=self.export_role.role_arn,
            key_arn=key.key_arn,
            snapshot_arn_prefix=self.snapshot_arn_prefix,
            name_prefix=name_prefix_filter,
        )
        self._apply_permissions(self.permissions)

        self.snapshot_topic = sns.Topic(
            self,
            "SnapshotTopic",
            display_name="Topic for RDS snapshot creation events.",
        )
        self.event_subscription = RdsEventSubscriptionConstruct(
            self,
            "SnapshotEventSubscription",
            topic=self.snapshot_topic,
            source_type=SourceType.SNAPSHOT,
            event_categories=[EventCategory.CREATION],
        )
        self.snapshot_topic.add_subscription(subs.LambdaSubscription(self.export_function))

    def _create_export_function(
        self,
        *,
        bucket: s3.IBucket,
        key: kms.IKey,
        prefix: Optional[str],
        snapshot_types: SnapshotTypes,
        name_prefix_filter: Optional[str],
        memory_size: int,
        timeout: Duration,
        log_retention: Optional[logs.RetentionDays],
    ) -> lambda_.Function:
        environment: Dict[str, str] = {
            "ENVIRONMENT": self.env_name,
            "IamRoleArn": self.export_role.role_arn,
            "S3BucketName": bucket.bucket_name,
            "KmsKeyArn": key.key_arn,
            "SnapshotArnPrefix": self.snapshot_arn_prefix,
            "Events": ",".join(snapshot_types.event_messages()),
        }
        if prefix:
            environment["S3Prefix"] = prefix
        if name_prefix_filter:
            environment["PrefixFilter"] = name_prefix_filter

        return PythonFunction(
            self,
            "Exporter",
            function_name=f"{self.env_name}-rds-snapshot-exporter",
            description="Automatically exports RDS snapshots to S3",
            runtime=lambda_.Runtime.PYTHON_3_12,
            entry="src/lambda/functions/snapshot_exporter",
            index="handler.py",
            handler="main",
            memory_size=memory_size,
            timeout=timeout,
            log_retention=log_retention,
            layers=[self.common_layer],
            environment=environment,
        )

    def _create_common_layer(self) -> lambda_.ILayerVersion:
        """Common Layer with the snapshot_export package and its requirements."""
        return PythonLayerVersion(
            self,
            "CommonLayer",
            entry="src/lambda/layers/common",
            layer_version_name=f"{self.env_name}-snapshot-export-common-layer",
            description="Snapshot export models, filters and request builders",
            compatible_runtimes=[lambda_.Runtime.PYTHON_3_12],
            bundling=BundlingOptions(
                command=[
                    "bash",
                    "-c",
                    "set -euxo pipefail; "
                    "mkdir -p /asset-output/python; "
                    "cp -R /asset-input/python/. /asset-output/python/; "
                    "if [ -f requirements.txt ]; then pip install -q -r requirements.txt -t /asset-output/python; fi",
                ],
                asset_excludes=["tests", "__pycache__", "*.pyc"],
            ),
        )

    def _apply_permissions(self, permissions: PermissionBoundary) -> None:
        for grant in permissions.export_role:
            self.export_role.add_to_policy(to_cdk_statement(grant))
        for grant in permissions.exporter:
            self.export_function.add_to_role_policy(to_cdk_statement(grant))
