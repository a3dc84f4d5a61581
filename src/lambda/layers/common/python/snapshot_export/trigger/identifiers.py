"""Export task identifier derivation."""

from __future__ import annotations

from snapshot_export.models.events import MAX_EXPORT_TASK_IDENTIFIER_LENGTH


def build_task_identifier(
    source_identifier: str,
    invocation_token: str,
    max_length: int = MAX_EXPORT_TASK_IDENTIFIER_LENGTH,
) -> str:
    """Return ``<source>-<token>`` cut to ``max_length`` without a trailing '-'.

    Truncation happens from the right, so the snapshot identifier is kept in
    full whenever it fits and the token absorbs the cut.
    """
    return f"{source_identifier}-{invocation_token}"[:max_length].rstrip("-")


def token_truncated_away(source_identifier: str, max_length: int = MAX_EXPORT_TASK_IDENTIFIER_LENGTH) -> bool:
    """True when no character of the invocation token survives truncation."""
    return len(source_identifier) + 1 >= max_length
