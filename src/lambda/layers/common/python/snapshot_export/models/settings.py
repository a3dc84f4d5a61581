"""Trigger settings loaded from the Lambda environment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional

from snapshot_export.errors import ConfigurationError

ROLE_ARN_KEY = "IamRoleArn"
BUCKET_NAME_KEY = "S3BucketName"
KMS_KEY_ARN_KEY = "KmsKeyArn"
EVENTS_KEY = "Events"
SNAPSHOT_ARN_PREFIX_KEY = "SnapshotArnPrefix"
BUCKET_PREFIX_KEY = "S3Prefix"
PREFIX_FILTER_KEY = "PrefixFilter"


def normalize_bucket_prefix(prefix: Optional[str]) -> Optional[str]:
    """Strip exactly one trailing '/' from an S3 prefix; empty means unset."""
    if not prefix:
        return None
    if prefix.endswith("/"):
        prefix = prefix[:-1]
    return prefix or None


def parse_accepted_events(raw: Optional[str]) -> FrozenSet[str]:
    """Split a comma-delimited event list into a set of distinct messages."""
    if not raw:
        return frozenset()
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class TriggerConfig:
    role_arn: str
    bucket_name: str
    key_arn: str
    snapshot_arn_prefix: str
    accepted_events: FrozenSet[str]
    bucket_prefix: Optional[str] = None
    identifier_prefix_filter: Optional[str] = None

    @staticmethod
    def from_env(env: Mapping[str, str]) -> "TriggerConfig":
        """Build the config from a key-value environment.

        Required settings are checked in a fixed order (role ARN, bucket name,
        key ARN, accepted events, snapshot ARN prefix); the first missing one
        is reported through ``ConfigurationError``.
        """
        role_arn = env.get(ROLE_ARN_KEY)
        if not role_arn:
            raise ConfigurationError(ROLE_ARN_KEY)
        bucket_name = env.get(BUCKET_NAME_KEY)
        if not bucket_name:
            raise ConfigurationError(BUCKET_NAME_KEY)
        key_arn = env.get(KMS_KEY_ARN_KEY)
        if not key_arn:
            raise ConfigurationError(KMS_KEY_ARN_KEY)
        accepted_events = parse_accepted_events(env.get(EVENTS_KEY))
        if not accepted_events:
            raise ConfigurationError(EVENTS_KEY)
        snapshot_arn_prefix = env.get(SNAPSHOT_ARN_PREFIX_KEY)
        if not snapshot_arn_prefix:
            raise ConfigurationError(SNAPSHOT_ARN_PREFIX_KEY)

        return TriggerConfig(
            role_arn=role_arn,
            bucket_name=bucket_name,
            key_arn=key_arn,
            snapshot_arn_prefix=snapshot_arn_prefix,
            accepted_events=accepted_events,
            bucket_prefix=normalize_bucket_prefix(env.get(BUCKET_PREFIX_KEY)),
            identifier_prefix_filter=env.get(PREFIX_FILTER_KEY) or None,
        )
