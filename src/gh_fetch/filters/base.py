"""Base filter interface for issue filtering."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue


@dataclass
class FilterResult:
    """Result of a filter evaluation.

    Attributes:
        passed: Whether the issue passed the filter.
        reason: Optional reason for rejection (None if passed).
        filter_name: Name of the filter that produced this result.
    """

    passed: bool
    reason: str | None = None
    filter_name: str = ""


class BaseFilter(ABC):
    """Abstract base class for issue filters.

    All filters must implement:
    - is_enabled(): Check if the filter constrains anything under these settings
    - evaluate(): Evaluate an issue against the filter
    - describe(): Human-readable form of the active setting
    """

    name: str = "base"

    @abstractmethod
    def is_enabled(self, filters: IssueFilters) -> bool:
        """Check if this filter should run for the given settings."""

    @abstractmethod
    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        """Evaluate an issue against this filter."""

    @abstractmethod
    def describe(self, filters: IssueFilters) -> str:
        """Describe the active setting, e.g. "min_comments: 3"."""

    def passed(self) -> FilterResult:
        """Shorthand for a passing result."""
        return FilterResult(passed=True, filter_name=self.name)

    def rejected(self, reason: str) -> FilterResult:
        """Shorthand for a rejection."""
        return FilterResult(passed=False, reason=reason, filter_name=self.name)
