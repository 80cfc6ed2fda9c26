"""Keyword filters over the lowercased title and body."""

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue


def _find(content: str, keywords: list[str]) -> list[str]:
    return [keyword for keyword in keywords if keyword.lower() in content]


class RequiredKeywordsFilter(BaseFilter):
    """Require at least one keyword as a substring of title or body."""

    name = "required_keywords"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return bool(filters.required_keywords)

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        if not _find(issue.content.lower(), filters.required_keywords):
            return self.rejected(
                f"Issue mentions none of: {', '.join(filters.required_keywords)}"
            )
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"required_keywords: {filters.required_keywords}"


class ExcludedKeywordsFilter(BaseFilter):
    """Reject issues mentioning any excluded keyword."""

    name = "excluded_keywords"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return bool(filters.excluded_keywords)

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        found = _find(issue.content.lower(), filters.excluded_keywords)
        if found:
            return self.rejected(f"Issue mentions excluded keywords: {', '.join(found)}")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return f"excluded_keywords: {filters.excluded_keywords}"
