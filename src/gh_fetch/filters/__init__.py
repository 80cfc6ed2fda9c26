"""Issue filters.

Provides the IssueFilters settings model and a FilterChain that evaluates
them against normalized issues.
"""

from gh_fetch.filters.activity import DateRangeFilter
from gh_fetch.filters.base import BaseFilter, FilterResult
from gh_fetch.filters.chain import FilterChain
from gh_fetch.filters.content import (
    CodeBlockFilter,
    RustErrorFilter,
    extract_error_codes,
    has_code_blocks,
    has_rust_error_codes,
)
from gh_fetch.filters.keywords import ExcludedKeywordsFilter, RequiredKeywordsFilter
from gh_fetch.filters.labels import ExcludeLabelsFilter, IncludeLabelsFilter
from gh_fetch.filters.options import DateRange, IssueFilters, IssueState
from gh_fetch.filters.size import MinBodyLengthFilter, MinCommentsFilter
from gh_fetch.filters.state import PullRequestFilter, StateFilter

__all__ = [
    "BaseFilter",
    "CodeBlockFilter",
    "DateRange",
    "DateRangeFilter",
    "ExcludeLabelsFilter",
    "ExcludedKeywordsFilter",
    "FilterChain",
    "FilterResult",
    "IncludeLabelsFilter",
    "IssueFilters",
    "IssueState",
    "MinBodyLengthFilter",
    "MinCommentsFilter",
    "PullRequestFilter",
    "RequiredKeywordsFilter",
    "RustErrorFilter",
    "StateFilter",
    "extract_error_codes",
    "has_code_blocks",
    "has_rust_error_codes",
]
