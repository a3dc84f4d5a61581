"""RDS snapshot exporter Lambda.

Receives RDS snapshot lifecycle events through SNS and starts an RDS export
task that writes the snapshot to S3 as Parquet.

Flow
- Load ``TriggerConfig`` from the environment (cached for the process lifetime).
- Parse the SNS message body and filter it: accepted, skipped or rejected.
- Derive the export task identifier from ``Source ID`` and the request id.
- Call ``rds.start_export_task`` once and return its response unchanged.

Outcomes
- Skipped: ``{"status": "SKIPPED", "reason": ...}``; no API call.
- Accepted: the StartExportTask response; API errors propagate unchanged so the
  async-invocation failure destination receives them.
- ConfigurationError / MalformedMessageError: raised, nothing is submitted.

Input event (SNS -> Lambda)
{
  "Records": [{"Sns": {"Message": "{\"Event Message\": \"Manual snapshot created\", \"Source ID\": \"mydb-snap\"}"}}]
}
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from snapshot_export.errors import MalformedMessageError
from snapshot_export.models import TriggerConfig
from snapshot_export.trigger import (
    FilterStatus,
    build_export_request,
    build_task_identifier,
    evaluate_notification,
    token_truncated_away,
)
from snapshot_export.utils.logger import extract_correlation_id, get_logger


@lru_cache(maxsize=1)
def _load_config() -> TriggerConfig:
    return TriggerConfig.from_env(os.environ)


@lru_cache(maxsize=1)
def _rds_client():
    return boto3.client("rds")


def _extract_message(event: Dict[str, Any]) -> str:
    records = event.get("Records") if isinstance(event, dict) else None
    record = records[0] if isinstance(records, list) and records else None
    if not isinstance(record, dict):
        raise MalformedMessageError("Event has no SNS records")
    sns = record.get("Sns")
    message = sns.get("Message") if isinstance(sns, dict) else None
    if not isinstance(message, str):
        raise MalformedMessageError("SNS record has no message body")
    return message


def main(event: Dict[str, Any], context: Any) -> Optional[Dict[str, Any]]:
    invocation_token = extract_correlation_id(context) or ""
    logger = get_logger(__name__, correlation_id=invocation_token or None)

    try:
        config = _load_config()
    except Exception:
        logger.exception("Exporter configuration is incomplete")
        raise

    try:
        message = _extract_message(event)
    except MalformedMessageError:
        logger.exception("Rejected SNS envelope")
        raise
    logger.debug("Message received from SNS", extra={"sns_message": message})

    result = evaluate_notification(config, message, invocation_token)
    if result.status is FilterStatus.SKIPPED:
        logger.info("Skipping snapshot notification", extra={"reason": result.reason})
        return {"status": FilterStatus.SKIPPED.value, "reason": result.reason}

    accepted = result.event
    if result.status is FilterStatus.REJECTED or accepted is None:
        logger.error("Rejected malformed snapshot notification", extra={"reason": result.reason})
        raise result.error or MalformedMessageError(result.reason or "Malformed snapshot notification")

    task_identifier = build_task_identifier(accepted.source_identifier, accepted.invocation_token)
    if token_truncated_away(accepted.source_identifier):
        logger.warning(
            "Snapshot identifier leaves no room for the invocation token; repeated deliveries share a task id",
            extra={"source_identifier": accepted.source_identifier, "task_identifier": task_identifier},
        )

    request = build_export_request(config, accepted, task_identifier)
    params = request.to_api_params()
    logger.info(
        "Starting snapshot export",
        extra={
            "event_message": accepted.event_message,
            "task_identifier": request.task_identifier,
            "source_arn": request.source_arn,
            "s3_bucket": request.bucket_name,
            "s3_prefix": request.bucket_prefix,
        },
    )

    try:
        response = _rds_client().start_export_task(**params)
    except (ClientError, BotoCoreError):
        logger.exception("StartExportTask failed", extra={"task_identifier": request.task_identifier})
        raise

    logger.info(
        "Snapshot export started",
        extra={"task_identifier": request.task_identifier, "export_status": response.get("Status")},
    )
    return response
