"""Exception hierarchy for gh-fetch.

Every error raised by the package derives from GitHubFetchError so callers
can catch one type at the boundary.
"""

from datetime import datetime


class GitHubFetchError(Exception):
    """Base exception for all gh-fetch errors."""


class AuthError(GitHubFetchError):
    """Raised when the GitHub token is missing, malformed, or rejected."""


class ApiError(GitHubFetchError):
    """Raised when a GitHub API call fails at the transport or forge level."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RateLimitExceeded(ApiError):
    """Raised when GitHub keeps reporting an exhausted rate limit."""

    def __init__(self, reset_at: datetime, retry_after: int | None = None) -> None:
        self.reset_at = reset_at
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded. Resets at {reset_at.isoformat()}",
            status_code=403,
        )


class NotFound(GitHubFetchError):
    """Raised when a requested issue, pull request, or discussion is absent."""


class InvalidRepository(GitHubFetchError):
    """Raised for malformed repository names or URLs."""


class ConfigError(GitHubFetchError):
    """Raised for unusable configuration values."""
