"""State and pull request filters."""

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters, IssueState
from gh_fetch.models import Issue


class StateFilter(BaseFilter):
    """Keep only open or only closed issues; inactive for IssueState.ALL."""

    name = "state"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return filters.state is not IssueState.ALL

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        if issue.state != filters.state.value:
            return self.rejected(f"Issue is {issue.state}, wanted {filters.state.value}")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"state: {filters.state.value}"


class PullRequestFilter(BaseFilter):
    """Drop pull requests unless they were asked for."""

    name = "pull_request"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return not filters.include_pull_requests

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        if issue.is_pull_request:
            return self.rejected("Pull requests are excluded")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return "exclude_pull_requests: true"
