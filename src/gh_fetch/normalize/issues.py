"""Issue and pull request normalizer.

Converts REST payloads from the issues and pulls endpoints into the
canonical Issue model. The issues endpoint lists pull requests too; they are
recognized by the embedded "pull_request" object.

Lossy fallbacks (never errors):
    - missing title -> ""
    - missing author -> UNKNOWN_USER
    - missing created_at/updated_at -> time of conversion
    - pull request without closed_at but with merged_at -> closed_at = merged_at
"""

import logging
from datetime import datetime
from typing import Any

from gh_fetch.errors import ApiError
from gh_fetch.models import Issue, Label
from gh_fetch.normalize.common import (
    FieldError,
    optional,
    optional_timestamp,
    require,
    utcnow,
)
from gh_fetch.normalize.users import normalize_user

logger = logging.getLogger(__name__)


def is_pull_request(raw: dict[str, Any]) -> bool:
    """True when an issues-endpoint payload describes a pull request."""
    return isinstance(raw, dict) and raw.get("pull_request") is not None


def needs_merge_lookup(raw: dict[str, Any]) -> bool:
    """True for pull requests whose issue payload carries no merge information."""
    pull_request = raw.get("pull_request") if isinstance(raw, dict) else None
    return isinstance(pull_request, dict) and "merged_at" not in pull_request


def embedded_merged_at(raw: dict[str, Any]) -> datetime | None:
    """Merge time embedded in an issues-endpoint pull request payload."""
    return optional_timestamp(raw.get("pull_request"), "merged_at")


def normalize_labels(raw_labels: Any) -> list[Label]:
    """Convert the labels array, skipping entries that are not label objects."""
    if not isinstance(raw_labels, list):
        return []

    labels = []
    for raw in raw_labels:
        name = optional(raw, "name", str)
        if name is None:
            continue
        labels.append(
            Label(
                id=optional(raw, "id", int, 0) or 0,
                name=name,
                color=optional(raw, "color", str, "") or "",
                description=optional(raw, "description", str),
            )
        )
    return labels


def _identity(raw: dict[str, Any]) -> tuple[int, int]:
    if not isinstance(raw, dict):
        raise ApiError(f"Malformed issue payload: expected an object, got {type(raw).__name__}")
    try:
        return require(raw, "id", int), require(raw, "number", int)
    except FieldError as e:
        raise ApiError(f"Malformed issue payload: {e}") from e


def _build(
    raw: dict[str, Any],
    pull_request: bool,
    merged_at: datetime | None,
) -> Issue:
    issue_id, number = _identity(raw)
    now = utcnow()

    closed_at = optional_timestamp(raw, "closed_at")
    if pull_request and closed_at is None:
        closed_at = merged_at

    assignees = raw.get("assignees")

    return Issue(
        id=issue_id,
        number=number,
        title=optional(raw, "title", str, "") or "",
        body=optional(raw, "body", str),
        state=(optional(raw, "state", str, "open") or "open").lower(),
        labels=normalize_labels(raw.get("labels")),
        user=normalize_user(raw.get("user")),
        assignees=[normalize_user(a) for a in assignees] if isinstance(assignees, list) else [],
        created_at=optional_timestamp(raw, "created_at") or now,
        updated_at=optional_timestamp(raw, "updated_at") or now,
        closed_at=closed_at,
        merged_at=merged_at if pull_request else None,
        html_url=optional(raw, "html_url", str, "") or "",
        is_pull_request=pull_request,
        comments=optional(raw, "comments", int, 0) or 0,
    )


def normalize_issue(raw: dict[str, Any], merged_at: datetime | None = None) -> Issue:
    """Normalize an issues-endpoint payload.

    Args:
        raw: Issue JSON from /repos/{owner}/{repo}/issues.
        merged_at: Merge time looked up separately for pull requests whose
            payload lacks it. Ignored for plain issues.

    Raises:
        ApiError: If the payload is not an object or has no usable id or number.
    """
    pull_request = is_pull_request(raw)
    if pull_request and merged_at is None:
        merged_at = embedded_merged_at(raw)
    return _build(raw, pull_request, merged_at)


def normalize_pull(raw: dict[str, Any]) -> Issue:
    """Normalize a pulls-endpoint payload into the canonical record.

    Raises:
        ApiError: If the payload is not an object or has no usable id or number.
    """
    return _build(raw, True, optional_timestamp(raw, "merged_at"))
