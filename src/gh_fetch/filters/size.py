"""Body length and comment count filters."""

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue


def body_length(issue: Issue) -> int:
    """Length of the body in UTF-8 bytes, 0 when there is no body."""
    return len(issue.body.encode("utf-8")) if issue.body else 0


class MinBodyLengthFilter(BaseFilter):
    """Reject issues whose body is shorter than min_body_length."""

    name = "min_body_length"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return filters.min_body_length is not None

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        """Evaluate body length.

        Args:
            issue: Normalized issue.
            filters: Filter settings with min_body_length set.

        Returns:
            FilterResult indicating pass/fail.
        """
        minimum = filters.min_body_length or 0
        length = body_length(issue)
        if length < minimum:
            return self.rejected(f"Body length {length} is below {minimum}")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"min_body_length: {filters.min_body_length}"


class MinCommentsFilter(BaseFilter):
    """Reject issues with fewer than min_comments comments."""

    name = "min_comments"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return filters.min_comments is not None

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        minimum = filters.min_comments or 0
        if issue.comments < minimum:
            return self.rejected(f"Issue has {issue.comments} comments, needs {minimum}")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"min_comments: {filters.min_comments}"
