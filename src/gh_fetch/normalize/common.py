"""Schema-tolerant field access for raw GitHub JSON.

GitHub payloads are read field by field. A *required* field that is absent
or has the wrong type raises a FieldError, which item-level parsers turn into
"drop this item". An *optional* field that is absent, null, or mistyped
falls back to a default.
"""

import logging
from datetime import UTC, datetime
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FieldError(Exception):
    """A required field could not be read from a JSON object."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message)


class MissingField(FieldError):
    """The field is absent or null."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"missing required field '{key}'")


class WrongFieldType(FieldError):
    """The field is present but has an unexpected type."""

    def __init__(self, key: str, expected: type, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            key,
            f"field '{key}' should be {expected.__name__}, got {type(actual).__name__}",
        )


def _is_kind(value: Any, kind: type) -> bool:
    # bool is an int subclass but never a valid id or count
    if kind is int and isinstance(value, bool):
        return False
    return isinstance(value, kind)


def require(obj: Any, key: str, kind: type[T]) -> T:
    """Read a required field.

    Args:
        obj: JSON object (dict) to read from.
        key: Field name.
        kind: Expected Python type (str, int, dict, list, ...).

    Returns:
        The field value.

    Raises:
        MissingField: If obj is not a dict, or the field is absent or null.
        WrongFieldType: If the field holds a value of another type.
    """
    if not isinstance(obj, dict) or obj.get(key) is None:
        raise MissingField(key)
    value = obj[key]
    if not _is_kind(value, kind):
        raise WrongFieldType(key, kind, value)
    return value  # type: ignore[no-any-return]


def optional(obj: Any, key: str, kind: type[T], default: T | None = None) -> T | None:
    """Read an optional field, falling back to default when absent, null or mistyped."""
    if not isinstance(obj, dict):
        return default
    value = obj.get(key)
    if value is None:
        return default
    if not _is_kind(value, kind):
        logger.debug("Ignoring field '%s' with unexpected type %s", key, type(value).__name__)
        return default
    return value  # type: ignore[no-any-return]


def normalize_timestamp(ts: str | None) -> datetime | None:
    """Normalize GitHub API timestamp to UTC datetime.

    Handles GitHub's ISO 8601 timestamps (e.g., "2025-01-15T10:30:00Z").

    Returns:
        UTC datetime object or None if input is None or invalid.
    """
    if ts is None:
        return None

    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError) as e:
        logger.warning("Failed to parse timestamp '%s': %s", ts, e)
        return None

    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def require_timestamp(obj: Any, key: str) -> datetime:
    """Read a required timestamp field.

    Raises:
        FieldError: If the field is absent, not a string, or not a valid timestamp.
    """
    raw = require(obj, key, str)
    dt = normalize_timestamp(raw)
    if dt is None:
        raise WrongFieldType(key, datetime, raw)
    return dt


def optional_timestamp(obj: Any, key: str) -> datetime | None:
    """Read an optional timestamp field, None when absent or unparsable."""
    return normalize_timestamp(optional(obj, key, str))


def utcnow() -> datetime:
    """Current time in UTC, used where GitHub omits a timestamp."""
    return datetime.now(UTC)
