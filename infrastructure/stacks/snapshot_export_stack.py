"""Snapshot export stack: RDS snapshot events → export tasks → S3 (Parquet)."""

from __future__ import annotations

from typing import Optional, Tuple

from aws_cdk import (
    Aws,
    CfnOutput,
    Duration,
    RemovalPolicy,
    Stack,
    aws_cloudwatch as cw,
    aws_cloudwatch_actions as cw_actions,
    aws_kms as kms,
    aws_lambda_destinations as destinations,
    aws_logs as logs,
    aws_s3 as s3,
    aws_sns as sns,
    aws_sns_subscriptions as subs,
)
from constructs import Construct

from infrastructure.config.types import EnvironmentConfig
from infrastructure.constructs.snapshot_extractor_construct import (
    SnapshotExtractorConstruct,
    SnapshotTypes,
)


class SnapshotExportStack(Stack):
    """Provision the export destination and the snapshot extractor."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        config: EnvironmentConfig,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = environment
        self.config = config

        self.export_bucket = self._resolve_export_bucket()
        self.export_key = self._resolve_export_key()
        self.success_topic, self.failure_topic = self._create_result_topics()

        self.extractor = SnapshotExtractorConstruct(
            self,
            "SnapshotExtractor",
            env_name=self.env_name,
            bucket=self.export_bucket,
            key=self.export_key,
            prefix=self.config.get("export_prefix"),
            snapshot_types=SnapshotTypes.from_config(self.config.get("snapshot_types")),  # type: ignore[arg-type]
            name_prefix_filter=self.config.get("snapshot_name_prefix_filter") or None,
            on_success=destinations.SnsDestination(self.success_topic),
            on_failure=destinations.SnsDestination(self.failure_topic),
            memory_size=int(self.config.get("exporter_memory", 128)),
            timeout=Duration.seconds(int(self.config.get("exporter_timeout", 30))),
            log_retention=self._log_retention(),
        )

        if self.config.get("enable_export_alarms", False):
            self._create_alarms()
        self._create_outputs()

    def _removal_policy(self) -> RemovalPolicy:
        cfg_policy = str(self.config.get("removal_policy", "retain") or "retain").lower()
        if cfg_policy == "destroy":
            return RemovalPolicy.DESTROY
        return RemovalPolicy.RETAIN

    def _resolve_export_bucket(self) -> s3.IBucket:
        """Import the configured bucket or create a dedicated export bucket."""
        bucket_name = str(self.config.get("export_bucket_name", "") or "").strip()
        if bucket_name:
            return s3.Bucket.from_bucket_name(self, "ExportBucket", bucket_name)

        removal_policy = self._removal_policy()
        return s3.Bucket(
            self,
            "ExportBucket",
            bucket_name=f"rds-snapshot-export-{self.env_name}-{Aws.ACCOUNT_ID}",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            lifecycle_rules=[
                s3.LifecycleRule(
                    id="ExpireOldExports",
                    expiration=Duration.days(int(self.config.get("s3_retention_days", 365))),
                ),
            ],
            removal_policy=removal_policy,
            auto_delete_objects=bool(self.config.get("auto_delete_objects", False))
            and removal_policy == RemovalPolicy.DESTROY,
            enforce_ssl=True,
        )

    def _resolve_export_key(self) -> kms.IKey:
        key_arn = str(self.config.get("export_kms_key_arn", "") or "").strip()
        if key_arn:
            return kms.Key.from_key_arn(self, "ExportKey", key_arn)

        return kms.Key(
            self,
            "ExportKey",
            alias=f"alias/{self.env_name}-rds-snapshot-export",
            description="Encrypts RDS snapshot exports",
            enable_key_rotation=True,
            removal_policy=self._removal_policy(),
        )

    def _create_result_topics(self) -> Tuple[sns.Topic, sns.Topic]:
        """Async-invocation destinations for the exporter.

        Every invocation that returns normally lands on the success topic, skipped
        notifications included; the response body tells an export apart from a skip.
        """
        success_topic = sns.Topic(
            self,
            "ExporterSucceededTopic",
            topic_name=f"{self.env_name}-rds-snapshot-exporter-succeeded",
            display_name="RDS snapshot exporter invocation succeeded",
        )
        failure_topic = sns.Topic(
            self,
            "ExportFailedTopic",
            topic_name=f"{self.env_name}-rds-snapshot-export-failed",
            display_name="RDS snapshot export failed to start",
        )
        for email in self.config.get("notification_emails", []) or []:
            address = str(email).strip()
            if address:
                failure_topic.add_subscription(subs.EmailSubscription(address))
        return success_topic, failure_topic

    def _create_alarms(self) -> None:
        errors_metric = self.extractor.export_function.metric_errors(period=Duration.minutes(5))
        alarm = cw.Alarm(
            self,
            "ExporterErrorsAlarm",
            metric=errors_metric,
            threshold=1,
            evaluation_periods=1,
            datapoints_to_alarm=1,
            comparison_operator=cw.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
            treat_missing_data=cw.TreatMissingData.NOT_BREACHING,
            alarm_name=f"{self.env_name}-rds-snapshot-exporter-errors",
            alarm_description="RDS snapshot exporter Lambda reported errors",
        )
        alarm.add_alarm_action(cw_actions.SnsAction(self.failure_topic))

    def _create_outputs(self) -> None:
        CfnOutput(
            self,
            "SnapshotTopicArn",
            value=self.extractor.snapshot_topic.topic_arn,
            description="SNS topic receiving RDS snapshot events",
        )
        CfnOutput(
            self,
            "ExporterFunctionName",
            value=self.extractor.export_function.function_name,
            description="Lambda function starting snapshot export tasks",
        )
        CfnOutput(
            self,
            "ExportRoleArn",
            value=self.extractor.export_role.role_arn,
            description="IAM role assumed by RDS to write exports",
        )

    def _log_retention(self) -> Optional[logs.RetentionDays]:
        retention_map = {
            1: logs.RetentionDays.ONE_DAY,
            3: logs.RetentionDays.THREE_DAYS,
            5: logs.RetentionDays.FIVE_DAYS,
            7: logs.RetentionDays.ONE_WEEK,
            14: logs.RetentionDays.TWO_WEEKS,
            30: logs.RetentionDays.ONE_MONTH,
            90: logs.RetentionDays.THREE_MONTHS,
        }
        return retention_map.get(self.config.get("log_retention_days", 14), logs.RetentionDays.TWO_WEEKS)
