"""Comment normalizers.

Conversation comments come from the typed issues API and are converted
leniently. Inline review comments are read field by field: a comment missing
any required field is dropped, optional diff metadata defaults to empty.

Required review comment fields: id, user.id, user.login, user.avatar_url,
body, path, created_at, updated_at, html_url.
"""

import logging
from typing import Any

from gh_fetch.errors import ApiError
from gh_fetch.models import Comment, ReviewComment
from gh_fetch.normalize.common import (
    FieldError,
    optional,
    optional_timestamp,
    require,
    require_timestamp,
    utcnow,
)
from gh_fetch.normalize.users import normalize_user, require_user

logger = logging.getLogger(__name__)


def normalize_comment(raw: dict[str, Any]) -> Comment:
    """Normalize an issue conversation comment.

    Raises:
        ApiError: If the comment has no id.
    """
    try:
        comment_id = require(raw, "id", int)
    except FieldError as e:
        raise ApiError(f"Malformed comment payload: {e}") from e

    created_at = optional_timestamp(raw, "created_at") or utcnow()

    return Comment(
        id=comment_id,
        user=normalize_user(raw.get("user")),
        body=optional(raw, "body", str, "") or "",
        created_at=created_at,
        updated_at=optional_timestamp(raw, "updated_at") or created_at,
        html_url=optional(raw, "html_url", str, "") or "",
    )


def normalize_review_comment(raw: Any) -> ReviewComment | None:
    """Normalize one inline review comment, or None if a required field is bad."""
    try:
        return ReviewComment(
            id=require(raw, "id", int),
            review_id=optional(raw, "pull_request_review_id", int),
            user=require_user(raw, "user"),
            body=require(raw, "body", str),
            path=require(raw, "path", str),
            line=optional(raw, "line", int),
            original_line=optional(raw, "original_line", int),
            diff_hunk=optional(raw, "diff_hunk", str, "") or "",
            side=optional(raw, "side", str),
            commit_id=optional(raw, "commit_id", str),
            created_at=require_timestamp(raw, "created_at"),
            updated_at=require_timestamp(raw, "updated_at"),
            html_url=require(raw, "html_url", str),
            position=optional(raw, "position", int),
            in_reply_to_id=optional(raw, "in_reply_to_id", int),
        )
    except FieldError as e:
        comment_id = raw.get("id") if isinstance(raw, dict) else None
        logger.debug("Dropping review comment %s: %s", comment_id, e)
        return None


def normalize_review_comments(raw_comments: list[Any]) -> list[ReviewComment]:
    """Normalize a page of review comments, dropping malformed entries."""
    comments = []
    for raw in raw_comments:
        comment = normalize_review_comment(raw)
        if comment is not None:
            comments.append(comment)

    dropped = len(raw_comments) - len(comments)
    if dropped:
        logger.warning("Dropped %d malformed review comments", dropped)
    return comments
