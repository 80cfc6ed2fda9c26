"""User normalization.

Authors can be missing from GitHub payloads (deleted accounts show up as
null). Lenient paths substitute UNKNOWN_USER; strict paths raise a
FieldError so the enclosing item can be dropped.
"""

from typing import Any

from gh_fetch.models import UNKNOWN_USER, User
from gh_fetch.normalize.common import MissingField, WrongFieldType, optional, require


def parse_user_id(value: Any) -> int | None:
    """Accept a numeric id as int or as a string of digits."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def normalize_user(raw: Any) -> User:
    """Build a User from a REST user object, or the sentinel when absent."""
    if not isinstance(raw, dict):
        return UNKNOWN_USER
    return User(
        id=parse_user_id(raw.get("id")) or 0,
        login=optional(raw, "login", str, "unknown") or "unknown",
        avatar_url=optional(raw, "avatar_url", str, "") or "",
    )


def normalize_graphql_user(raw: Any) -> User:
    """Build a User from a GraphQL author object, or the sentinel when absent."""
    if not isinstance(raw, dict):
        return UNKNOWN_USER
    return User(
        id=parse_user_id(raw.get("id")) or 0,
        login=optional(raw, "login", str, "unknown") or "unknown",
        avatar_url=optional(raw, "avatarUrl", str, "") or "",
    )


def require_user(obj: Any, key: str, avatar_key: str = "avatar_url") -> User:
    """Read a user object whose id, login and avatar are all mandatory.

    Raises:
        FieldError: If the user or any of its fields is missing or malformed.
    """
    raw = require(obj, key, dict)
    if raw.get("id") is None:
        raise MissingField("id")
    user_id = parse_user_id(raw["id"])
    if user_id is None:
        raise WrongFieldType("id", int, raw["id"])
    return User(
        id=user_id,
        login=require(raw, "login", str),
        avatar_url=require(raw, avatar_key, str),
    )
