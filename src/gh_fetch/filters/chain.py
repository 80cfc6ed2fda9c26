"""Filter chain evaluating IssueFilters against normalized issues.

Filters run in a fixed order and the chain short-circuits on the first
rejection, so cheap structural checks (state, labels) run before the
content scans.
"""

import logging
from collections import defaultdict

from gh_fetch.filters.activity import DateRangeFilter
from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.content import CodeBlockFilter, RustErrorFilter
from gh_fetch.filters.keywords import ExcludedKeywordsFilter, RequiredKeywordsFilter
from gh_fetch.filters.labels import ExcludeLabelsFilter, IncludeLabelsFilter
from gh_fetch.filters.options import IssueFilters
from gh_fetch.filters.size import MinBodyLengthFilter, MinCommentsFilter
from gh_fetch.filters.state import PullRequestFilter, StateFilter
from gh_fetch.models import Issue

logger = logging.getLogger(__name__)


class FilterChain:
    """Composable filter chain for issue collection.

    Coordinates the individual filters, tracks rejection statistics, and
    renders the human-readable list of active settings.
    """

    def __init__(self, filters: IssueFilters | None = None) -> None:
        """Initialize filter chain.

        Args:
            filters: Filter settings. Defaults to IssueFilters().
        """
        self.settings = filters if filters is not None else IssueFilters()
        self.stats: dict[str, int] = defaultdict(int)

        self.filters: list[BaseFilter] = [
            StateFilter(),
            PullRequestFilter(),
            IncludeLabelsFilter(),
            ExcludeLabelsFilter(),
            MinBodyLengthFilter(),
            MinCommentsFilter(),
            DateRangeFilter(),
            RequiredKeywordsFilter(),
            ExcludedKeywordsFilter(),
            RustErrorFilter(),
            CodeBlockFilter(),
        ]
        self._active = [f for f in self.filters if f.is_enabled(self.settings)]

    def evaluate(self, issue: Issue) -> FilterResult:
        """Evaluate all enabled filters for an issue.

        Short-circuits on first failure and records the rejecting filter.

        Returns:
            FilterResult with pass/fail and rejection reason.
        """
        for filter_obj in self._active:
            result = filter_obj.evaluate(issue, self.settings)
            if not result.passed:
                self.stats[result.filter_name] += 1
                logger.debug(
                    "Issue #%d rejected by %s: %s",
                    issue.number,
                    result.filter_name,
                    result.reason,
                )
                return result

        return FilterResult(passed=True, filter_name="none")

    def matches(self, issue: Issue) -> bool:
        """True if the issue passes every enabled filter."""
        return self.evaluate(issue).passed

    def describe(self) -> list[str]:
        """Describe every active setting, in evaluation order."""
        return [f.describe(self.settings) for f in self._active]

    def get_stats(self) -> dict[str, int]:
        """Get filter rejection statistics.

        Returns:
            Dictionary mapping filter names to rejection counts.
        """
        return dict(self.stats)
