"""Label filters. Label names compare case-insensitively."""

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue


def _label_names(issue: Issue) -> set[str]:
    return {label.name.lower() for label in issue.labels}


class IncludeLabelsFilter(BaseFilter):
    """Require at least one of the include labels."""

    name = "include_labels"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return bool(filters.include_labels)

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        wanted = {label.lower() for label in filters.include_labels}
        if not _label_names(issue) & wanted:
            return self.rejected(
                f"Issue must have at least one of: {', '.join(filters.include_labels)}"
            )
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"include_labels: {filters.include_labels}"


class ExcludeLabelsFilter(BaseFilter):
    """Reject issues carrying any of the exclude labels."""

    name = "exclude_labels"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return bool(filters.exclude_labels)

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        unwanted = {label.lower() for label in filters.exclude_labels}
        found = _label_names(issue) & unwanted
        if found:
            return self.rejected(f"Issue has excluded labels: {', '.join(sorted(found))}")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"exclude_labels: {filters.exclude_labels}"
