"""Content filters: rustc error codes and code blocks.

The detection helpers are public so callers can use them without running a
whole filter chain.
"""

import re

from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.options import IssueFilters
from gh_fetch.models import Issue

ERROR_CODE_PATTERN = re.compile(r"E0\d{3,4}")

CODE_FENCE = "```"
INDENT = "    "


def extract_error_codes(text: str) -> set[str]:
    """Return the distinct rustc error codes (E0382, E0502, ...) found in text."""
    return set(ERROR_CODE_PATTERN.findall(text))


def has_rust_error_codes(text: str) -> bool:
    """True if text mentions at least one rustc error code."""
    return ERROR_CODE_PATTERN.search(text) is not None


def has_code_blocks(text: str) -> bool:
    """True for a fenced block or any non-blank line indented by four spaces."""
    if CODE_FENCE in text:
        return True
    lines = (line.removesuffix("\r") for line in text.split("\n"))
    return any(line.startswith(INDENT) and line.strip() for line in lines)


class RustErrorFilter(BaseFilter):
    """Keep issues whose title or body mentions a rustc error code."""

    name = "rust_errors_only"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return filters.rust_errors_only

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        if not has_rust_error_codes(issue.content):
            return self.rejected("Issue mentions no rustc error code")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return "rust_errors_only: true"


class CodeBlockFilter(BaseFilter):
    """Keep issues whose body contains code."""

    name = "code_blocks_only"

    def is_enabled(self, filters: IssueFilters) -> bool:
        return filters.code_blocks_only

    def evaluate(self, issue: Issue, filters: IssueFilters) -> FilterResult:
        if not has_code_blocks(issue.body or ""):
            return self.rejected("Issue body contains no code block")
        return self.passed()

    def describe(self, filters: IssueFilters) -> str:
        return "code_blocks_only: true"
