"""Creation date window filter."""

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue


class DateRangeFilter(BaseFilter):
    """Keep issues created inside the configured window, bounds inclusive.

    A window with neither bound set is treated as disabled.
    """

    name = "date_range"

    def is_enabled(self, filters: IssueFilters) -> bool:
        window = filters.date_range
        return window is not None and (window.start is not None or window.end is not None)

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        """Evaluate issue creation time.

        Args:
            issue: Normalized issue.
            filters: Filter settings with a date_range.

        Returns:
            FilterResult indicating pass/fail.
        """
        window = filters.date_range
        if window is not None and not window.contains(issue.created_at):
            return self.rejected(
                f"Issue created {issue.created_at.isoformat()} outside {self.describe(filters)}"
            )
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        window = filters.date_range
        start = window.start.isoformat() if window and window.start else "*"
        end = window.end.isoformat() if window and window.end else "*"
        return f"date_range: {start}..{end}"
