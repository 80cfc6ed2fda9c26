"""Discussion normalizer for the GraphQL discussion query.

The discussion itself degrades field by field to defaults; each comment node
is parsed independently and dropped if any required field is missing or
unparsable, so one corrupt node never loses the whole discussion.
"""

import logging
from typing import Any

from gh_fetch.errors import NotFound
from gh_fetch.models import Discussion, DiscussionComment, Repository
from gh_fetch.normalize.common import (
    FieldError,
    optional,
    optional_timestamp,
    require,
    require_timestamp,
    utcnow,
)
from gh_fetch.normalize.users import normalize_graphql_user, require_user

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Discussion"


def normalize_discussion_comment(node: Any) -> DiscussionComment | None:
    """Normalize one comment node, or None if it is malformed."""
    try:
        return DiscussionComment(
            id=require(node, "id", str),
            body=require(node, "body", str),
            author=require_user(node, "author", avatar_key="avatarUrl"),
            created_at=require_timestamp(node, "createdAt"),
            updated_at=require_timestamp(node, "updatedAt"),
        )
    except FieldError as e:
        logger.debug("Dropping discussion comment: %s", e)
        return None


def _title(discussion: dict[str, Any]) -> str:
    title = optional(discussion, "title", str)
    return UNKNOWN_TITLE if title is None else title


def _comment_nodes(discussion: dict[str, Any]) -> list[Any]:
    nodes = optional(optional(discussion, "comments", dict), "nodes", list)
    return nodes or []


def normalize_discussion(
    payload: dict[str, Any],
    repository: Repository,
    number: int,
) -> Discussion:
    """Convert a GraphQL discussion response.

    Args:
        payload: Full GraphQL response body ({"data": ..., "errors": ...}).
        repository: Repository the discussion was requested from.
        number: Requested discussion number, used when the payload omits it.

    Raises:
        NotFound: If data.repository.discussion is missing or null.
    """
    discussion = optional(
        optional(optional(payload, "data", dict), "repository", dict), "discussion", dict
    )
    if discussion is None:
        raise NotFound(f"Discussion #{number} not found in {repository.full_name}")

    nodes = _comment_nodes(discussion)
    comments = [c for c in (normalize_discussion_comment(n) for n in nodes) if c is not None]
    if len(comments) < len(nodes):
        logger.warning(
            "Dropped %d malformed comments from discussion #%d in %s",
            len(nodes) - len(comments),
            number,
            repository.full_name,
        )

    now = utcnow()
    return Discussion(
        number=optional(discussion, "number", int, number) or number,
        title=_title(discussion),
        body=optional(discussion, "body", str, "") or "",
        url=optional(discussion, "url", str, "") or "",
        author=normalize_graphql_user(discussion.get("author")),
        created_at=optional_timestamp(discussion, "createdAt") or now,
        updated_at=optional_timestamp(discussion, "updatedAt") or now,
        comments=comments,
    )
