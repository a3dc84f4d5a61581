"""Decide whether an RDS snapshot notification should start an export."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import ValidationError

from snapshot_export.errors import MalformedMessageError
from snapshot_export.models.events import NotificationEvent, SnapshotNotification
from snapshot_export.models.settings import TriggerConfig


class FilterStatus(str, Enum):
    ACCEPTED = "ACCEPTED"
    SKIPPED = "SKIPPED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class FilterResult:
    """Outcome of filtering one notification.

    Exactly one of ``event`` (accepted), ``reason`` (skipped) or ``error``
    (rejected) is meaningful for a given status.
    """

    status: FilterStatus
    event: Optional[NotificationEvent] = None
    reason: Optional[str] = None
    error: Optional[MalformedMessageError] = None

    @classmethod
    def accept(cls, event: NotificationEvent) -> "FilterResult":
        return cls(status=FilterStatus.ACCEPTED, event=event)

    @classmethod
    def skip(cls, reason: str) -> "FilterResult":
        return cls(status=FilterStatus.SKIPPED, reason=reason)

    @classmethod
    def reject(cls, message: str) -> "FilterResult":
        return cls(status=FilterStatus.REJECTED, reason=message, error=MalformedMessageError(message))


def parse_notification(body: str) -> SnapshotNotification:
    """Parse the raw message body, raising ``MalformedMessageError`` on bad input."""
    try:
        return SnapshotNotification.model_validate_json(body)
    except ValidationError as exc:
        raise MalformedMessageError(f"Message body is not a valid snapshot notification: {exc}") from exc


def evaluate_notification(config: TriggerConfig, body: str, invocation_token: str) -> FilterResult:
    try:
        notification = parse_notification(body)
    except MalformedMessageError as exc:
        return FilterResult(status=FilterStatus.REJECTED, reason=str(exc), error=exc)

    identifier = notification.source_identifier
    if not identifier:
        return FilterResult.reject("Message is missing Source ID")

    event_message = notification.event_message or ""
    if event_message not in config.accepted_events:
        return FilterResult.skip(
            f"Wrong event {event_message!r}, waiting for one of {sorted(config.accepted_events)}"
        )

    prefix = config.identifier_prefix_filter
    if prefix and not identifier.startswith(prefix):
        return FilterResult.skip(f"Source ID {identifier!r} does not start with {prefix!r}")

    return FilterResult.accept(
        NotificationEvent(
            event_message=event_message,
            source_identifier=identifier,
            invocation_token=invocation_token,
        )
    )
