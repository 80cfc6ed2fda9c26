"""gh-fetch: paced, filtered collection of GitHub issues, reviews and discussions."""

__version__ = "0.1.0"

from gh_fetch.config import FetchConfig, load_config  # noqa: E402
from gh_fetch.errors import (  # noqa: E402
    ApiError,
    AuthError,
    ConfigError,
    GitHubFetchError,
    InvalidRepository,
    NotFound,
    RateLimitExceeded,
)
from gh_fetch.fetcher import GitHubFetcher, parse_discussion_url  # noqa: E402
from gh_fetch.filters import DateRange, FilterChain, IssueFilters, IssueState  # noqa: E402
from gh_fetch.models import (  # noqa: E402
    CollectionResult,
    Comment,
    Discussion,
    DiscussionComment,
    Issue,
    Label,
    PullRequestFile,
    Repository,
    Review,
    ReviewComment,
    User,
)
from gh_fetch.pacing import RatePacer  # noqa: E402

__all__ = [
    "ApiError",
    "AuthError",
    "CollectionResult",
    "Comment",
    "ConfigError",
    "DateRange",
    "Discussion",
    "DiscussionComment",
    "FetchConfig",
    "FilterChain",
    "GitHubFetchError",
    "GitHubFetcher",
    "InvalidRepository",
    "Issue",
    "IssueFilters",
    "IssueState",
    "Label",
    "NotFound",
    "PullRequestFile",
    "RateLimitExceeded",
    "RatePacer",
    "Repository",
    "Review",
    "ReviewComment",
    "User",
    "__version__",
    "load_config",
    "parse_discussion_url",
]
