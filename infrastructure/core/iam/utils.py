"""Reusable IAM helper utilities for the snapshot export constructs."""

from __future__ import annotations

from typing import Iterable, Optional


def dedupe(values: Iterable[str]) -> list[str]:
    """Return items without duplicates while preserving order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = str(value or "").strip()
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result


def normalize_prefix(prefix: Optional[str]) -> str:
    """Return an S3 key prefix without a leading '/'; ``None`` becomes ''."""
    return str(prefix or "").strip().lstrip("/")


def prefix_object_arns(bucket_arn_value: str, prefix: Optional[str]) -> list[str]:
    """Return object ARNs covering ``prefix`` itself and everything below it."""
    normalized = normalize_prefix(prefix)
    return dedupe([f"{bucket_arn_value}/{normalized}", f"{bucket_arn_value}/{normalized}*"])


def prefix_patterns(prefix: Optional[str]) -> list[str]:
    """Return ``s3:prefix`` condition values for ``prefix`` and its sub-paths.

    The exporter sends the prefix without its trailing '/', so that form is
    allowed as well.
    """
    normalized = normalize_prefix(prefix)
    if not normalized:
        return []
    return dedupe([normalized.rstrip("/"), normalized, f"{normalized}*"])
