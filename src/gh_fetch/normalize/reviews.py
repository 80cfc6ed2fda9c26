"""Pull request review and changed-file normalizers."""

import logging
from typing import Any

from gh_fetch.errors import ApiError
from gh_fetch.models import PullRequestFile, Review
from gh_fetch.normalize.common import FieldError, optional, optional_timestamp, require
from gh_fetch.normalize.users import normalize_user

logger = logging.getLogger(__name__)


def normalize_review(raw: dict[str, Any]) -> Review:
    """Normalize a pull request review.

    Reviews by deleted accounts get UNKNOWN_USER; a missing state becomes
    "UNKNOWN" and pending reviews have no submitted_at.

    Raises:
        ApiError: If the review has no id.
    """
    try:
        review_id = require(raw, "id", int)
    except FieldError as e:
        raise ApiError(f"Malformed review payload: {e}") from e

    return Review(
        id=review_id,
        user=normalize_user(raw.get("user")),
        body=optional(raw, "body", str),
        state=(optional(raw, "state", str, "UNKNOWN") or "UNKNOWN").upper(),
        submitted_at=optional_timestamp(raw, "submitted_at"),
        html_url=optional(raw, "html_url", str, "") or "",
        commit_id=optional(raw, "commit_id", str),
    )


def normalize_pull_file(raw: dict[str, Any]) -> PullRequestFile:
    """Normalize one entry of /pulls/{number}/files.

    Raises:
        ApiError: If the entry has no filename.
    """
    try:
        filename = require(raw, "filename", str)
    except FieldError as e:
        raise ApiError(f"Malformed pull request file payload: {e}") from e

    return PullRequestFile(
        filename=filename,
        status=optional(raw, "status", str, "modified") or "modified",
        additions=optional(raw, "additions", int, 0) or 0,
        deletions=optional(raw, "deletions", int, 0) or 0,
        changes=optional(raw, "changes", int, 0) or 0,
        patch=optional(raw, "patch", str),
    )
