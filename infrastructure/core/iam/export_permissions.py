"""Least-privilege grants for the RDS snapshot export.

The grants are plain data descriptors so they can be reviewed and tested
without synthesizing a stack; ``SnapshotExtractorConstruct`` renders them as
CDK policy statements. Two identities are covered:

- the export role, assumed by ``export.rds.amazonaws.com``, which reads and
  writes the destination prefix;
- the exporter function, which passes the export role, starts export tasks
  and lets RDS use the KMS key.

A statement may only use the ``*`` resource when it carries a
``wildcard_reason`` explaining why no specific ARN is available.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from infrastructure.core.iam import utils as iam_utils

EXPORT_SERVICE_PRINCIPAL = "export.rds.amazonaws.com"

OBJECT_ACCESS_ACTIONS = ("s3:GetObject*", "s3:PutObject*", "s3:DeleteObject*")
KMS_EXPORT_ACTIONS = ("kms:DescribeKey", "kms:CreateGrant")


@dataclass(frozen=True)
class GrantStatement:
    sid: str
    actions: Tuple[str, ...]
    resources: Tuple[str, ...]
    conditions: Optional[Mapping[str, Mapping[str, Any]]] = None
    wildcard_reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.actions:
            raise ValueError(f"Grant {self.sid} must list at least one action")
        if not self.resources:
            raise ValueError(f"Grant {self.sid} must list at least one resource")
        if self.uses_wildcard_resource and not self.wildcard_reason:
            raise ValueError(f"Grant {self.sid} uses a wildcard resource without a documented reason")

    @property
    def uses_wildcard_resource(self) -> bool:
        return "*" in self.resources

    def to_policy_statement(self) -> Dict[str, Any]:
        """Render as an IAM policy statement (JSON form)."""
        statement: Dict[str, Any] = {
            "Sid": self.sid,
            "Effect": "Allow",
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }
        if self.conditions:
            statement["Condition"] = {op: dict(values) for op, values in self.conditions.items()}
        return statement


@dataclass(frozen=True)
class PermissionBoundary:
    export_role: Tuple[GrantStatement, ...] = field(default_factory=tuple)
    exporter: Tuple[GrantStatement, ...] = field(default_factory=tuple)

    def to_policy_documents(self) -> Dict[str, Dict[str, Any]]:
        return {
            "ExportRole": _policy_document(self.export_role),
            "Exporter": _policy_document(self.exporter),
        }


def _policy_document(statements: Tuple[GrantStatement, ...]) -> Dict[str, Any]:
    return {"Version": "2012-10-17", "Statement": [s.to_policy_statement() for s in statements]}


def export_role_grants(bucket_arn: str, prefix: Optional[str]) -> Tuple[GrantStatement, ...]:
    """Grants for the role RDS assumes while writing the export."""
    statements = [
        GrantStatement(
            sid="ExportPrefixObjectAccess",
            actions=OBJECT_ACCESS_ACTIONS,
            resources=tuple(iam_utils.prefix_object_arns(bucket_arn, prefix)),
        ),
        # Bucket-level metadata lookup; not scoped by key prefix.
        GrantStatement(
            sid="ExportBucketLocation",
            actions=("s3:GetBucketLocation",),
            resources=(bucket_arn,),
        ),
    ]

    patterns = iam_utils.prefix_patterns(prefix)
    statements.append(
        GrantStatement(
            sid="ExportPrefixList",
            actions=("s3:ListBucket",),
            resources=(bucket_arn,),
            conditions={"StringLike": {"s3:prefix": patterns}} if patterns else None,
        )
    )
    return tuple(statements)


def snapshot_resource_pattern(snapshot_arn_prefix: str, name_prefix: Optional[str] = None) -> str:
    return f"{snapshot_arn_prefix}:{name_prefix or ''}*"


def exporter_grants(
    *,
    export_role_arn: str,
    key_arn: str,
    snapshot_arn_prefix: str,
    name_prefix: Optional[str] = None,
) -> Tuple[GrantStatement, ...]:
    """Grants for the exporter function's execution role."""
    return (
        GrantStatement(
            sid="PassExportRole",
            actions=("iam:PassRole",),
            resources=(export_role_arn,),
        ),
        GrantStatement(
            sid="StartSnapshotExport",
            actions=("rds:StartExportTask",),
            resources=(snapshot_resource_pattern(snapshot_arn_prefix, name_prefix),),
        ),
        GrantStatement(
            sid="UseExportKey",
            actions=KMS_EXPORT_ACTIONS,
            resources=(key_arn,),
        ),
    )


def build_permission_boundary(
    *,
    bucket_arn: str,
    prefix: Optional[str],
    export_role_arn: str,
    key_arn: str,
    snapshot_arn_prefix: str,
    name_prefix: Optional[str] = None,
) -> PermissionBoundary:
    return PermissionBoundary(
        export_role=export_role_grants(bucket_arn, prefix),
        exporter=exporter_grants(
            export_role_arn=export_role_arn,
            key_arn=key_arn,
            snapshot_arn_prefix=snapshot_arn_prefix,
            name_prefix=name_prefix,
        ),
    )
