"""Declarative issue filter settings."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class IssueState(str, Enum):
    """Which issue states to keep."""

    OPEN = "open"
    CLOSED = "closed"
    ALL = "all"


class DateRange(BaseModel):
    """Inclusive creation-date window; either bound may be open."""

    model_config = ConfigDict(frozen=True)

    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive datetimes as UTC so they compare with GitHub timestamps."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @model_validator(mode="after")
    def validate_order(self) -> "DateRange":
        """Reject windows whose start is after their end."""
        if self.start and self.end and self.start > self.end:
            msg = "date range start must not be after end"
            raise ValueError(msg)
        return self

    def contains(self, moment: datetime) -> bool:
        """True if moment falls within the window, bounds included."""
        if self.start is not None and moment < self.start:
            return False
        return not (self.end is not None and moment > self.end)


def _default_exclude_labels() -> list[str]:
    return ["duplicate", "invalid", "wontfix", "question"]


def _default_excluded_keywords() -> list[str]:
    return ["discussion", "RFC", "tracking"]


class IssueFilters(BaseModel):
    """Filter predicates applied to every fetched issue.

    Defaults keep open and closed issues with a reasonably detailed body,
    skip pull requests, and drop triage noise (duplicates, questions, RFCs).
    """

    model_config = ConfigDict(frozen=True)

    state: IssueState = IssueState.ALL
    include_labels: list[str] = Field(default_factory=list)
    exclude_labels: list[str] = Field(default_factory=_default_exclude_labels)
    rust_errors_only: bool = False
    code_blocks_only: bool = False
    min_body_length: int | None = Field(default=50, ge=0)
    date_range: DateRange | None = None
    include_pull_requests: bool = False
    min_comments: int | None = Field(default=None, ge=0)
    required_keywords: list[str] = Field(default_factory=list)
    excluded_keywords: list[str] = Field(default_factory=_default_excluded_keywords)

    @classmethod
    def rust_error_focused(cls) -> "IssueFilters":
        """Issues that show a rustc error code next to a code sample."""
        return cls(
            include_labels=["E-help-wanted", "A-diagnostics", "A-borrowck", "E-easy", "E-medium"],
            rust_errors_only=True,
            code_blocks_only=True,
            min_body_length=100,
        )

    @classmethod
    def permissive(cls) -> "IssueFilters":
        """Filters that accept every issue and pull request."""
        return cls(
            exclude_labels=[],
            min_body_length=None,
            include_pull_requests=True,
            excluded_keywords=[],
        )
