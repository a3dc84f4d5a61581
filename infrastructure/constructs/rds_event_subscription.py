"""RDS event subscription construct publishing to an SNS topic."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from aws_cdk import aws_rds as rds, aws_sns as sns
from constructs import Construct


class EventCategory(str, Enum):
    """RDS event categories.

    https://docs.aws.amazon.com/AmazonRDS/latest/UserGuide/USER_Events.Messages.html
    """

    AVAILABILITY = "availability"
    BACKUP = "backup"
    CONFIGURATION_CHANGE = "configuration change"
    CREATION = "creation"
    DELETION = "deletion"
    FAILOVER = "failover"
    FAILURE = "failure"
    LOW_STORAGE = "low storage"
    MAINTENANCE = "maintenance"
    NOTIFICATION = "notification"
    READ_REPLICA = "read replica"
    RECOVERY = "recovery"
    RESTORATION = "restoration"


class SourceType(str, Enum):
    INSTANCE = "db-instance"
    PARAMETER_GROUP = "db-parameter-group"
    SNAPSHOT = "db-snapshot"
    SECURITY_GROUP = "db-security-group"


class RdsEventSubscriptionConstruct(Construct):
    """Configure RDS to publish events of the given categories to ``topic``.

    When ``event_categories`` is empty every category is published; when
    ``source_ids`` is empty every source of ``source_type`` is included.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        topic: sns.ITopic,
        source_type: Optional[SourceType] = None,
        source_ids: Optional[Sequence[str]] = None,
        event_categories: Optional[Sequence[EventCategory]] = None,
        enabled: bool = True,
    ) -> None:
        super().__init__(scope, construct_id)

        rds.CfnEventSubscription(
            self,
            "Resource",
            sns_topic_arn=topic.topic_arn,
            enabled=enabled,
            event_categories=[category.value for category in event_categories] if event_categories else None,
            source_type=source_type.value if source_type else None,
            source_ids=list(source_ids) if source_ids else None,
        )
