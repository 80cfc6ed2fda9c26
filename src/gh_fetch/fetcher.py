"""High-level fetcher composing transport, pacing, pagination and filtering.

GitHubFetcher is the public entry point of the package. Listing operations go
through the Paginator; single-record operations make one paced call and skip
filtering.
"""

import logging
import re
from datetime import UTC, datetime
from typing import Any

from gh_fetch.collect.paginator import Paginator
from gh_fetch.config import FetchConfig
from gh_fetch.errors import ApiError, InvalidRepository, NotFound, RateLimitExceeded
from gh_fetch.filters.chain import FilterChain
from gh_fetch.filters.options import IssueFilters
from gh_fetch.github.auth import GitHubAuth
from gh_fetch.github.graphql import GraphQLClient
from gh_fetch.github.http import GitHubClient
from gh_fetch.github.rest import RestClient
from gh_fetch.models import (
    CollectionResult,
    Comment,
    Discussion,
    Issue,
    PullRequestFile,
    Repository,
    Review,
    ReviewComment,
)
from gh_fetch.normalize.comments import normalize_comment, normalize_review_comments
from gh_fetch.normalize.common import optional, optional_timestamp
from gh_fetch.normalize.discussions import normalize_discussion
from gh_fetch.normalize.issues import needs_merge_lookup, normalize_issue, normalize_pull
from gh_fetch.normalize.reviews import normalize_pull_file, normalize_review
from gh_fetch.pacing import RatePacer

logger = logging.getLogger(__name__)

DISCUSSION_URL_PATTERN = re.compile(r"https://([^/]+)/([^/]+)/([^/]+)/discussions/(\d+)/?")


def _as_repository(repo: Repository | str) -> Repository:
    if isinstance(repo, Repository):
        return repo
    return Repository.parse(repo)


def parse_discussion_url(url: str) -> tuple[Repository, int]:
    """Split a discussion URL into its repository and discussion number.

    Raises:
        InvalidRepository: If the URL is not https://<host>/<owner>/<repo>/discussions/<n>.
    """
    match = DISCUSSION_URL_PATTERN.fullmatch(url)
    if match is None:
        raise InvalidRepository(f"Invalid GitHub discussion URL: {url}")
    _, owner, name, number = match.groups()
    return Repository.new(owner, name), int(number)


class GitHubFetcher:
    """Fetch issues, pull requests, reviews and discussions from GitHub.

    Use as an async context manager so the underlying HTTP client is closed:

        async with GitHubFetcher(config) as fetcher:
            result = await fetcher.collect_issues("rust-lang/rust", max_issues=50)
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        token: str | None = None,
        http_client: GitHubClient | None = None,
        pacer: RatePacer | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            config: Connection and pacing settings. Defaults to FetchConfig().
            token: Explicit token; otherwise read from config.github.token_env.
            http_client: Prebuilt transport, mainly for tests. Not closed by
                the fetcher.
            pacer: Pacer override; otherwise derived from config.rate_limit.

        Raises:
            AuthError: If no usable token is available.
        """
        self.config = config or FetchConfig()

        self._owns_client = http_client is None
        if http_client is None:
            auth = GitHubAuth(token=token, token_env=self.config.github.token_env)
            http_client = GitHubClient(
                auth,
                self.config.github,
                max_retries=self.config.rate_limit.max_retries,
            )
        self.http = http_client

        self.pacer = pacer or RatePacer.from_config(self.config.rate_limit)
        self.rest = RestClient(self.http, self.pacer)
        self.graphql = GraphQLClient(self.http, self.pacer, self.config.github.graphql_path)
        self.paginator = Paginator(max_pages=self.config.rate_limit.max_pages)

        logger.debug("Initialized fetcher with %r", self.pacer)

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self.http.close()

    async def __aenter__(self) -> "GitHubFetcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # Issues

    async def _merged_at(self, repository: Repository, raw: dict[str, Any]) -> datetime | None:
        """Look up the merge time of a listed pull request.

        A failed lookup is treated as "not merged" so one missing pull request
        does not abort a whole listing.
        """
        number = optional(raw, "number", int)
        if number is None:
            return None
        try:
            pull = await self.rest.get_pull(repository.owner, repository.name, number)
        except RateLimitExceeded:
            raise
        except (ApiError, NotFound) as e:
            logger.warning("Could not fetch merge status for PR #%d: %s", number, e)
            return None
        return optional_timestamp(pull, "merged_at")

    async def collect_issues(
        self,
        repo: Repository | str,
        filters: IssueFilters | None = None,
        max_issues: int | None = None,
    ) -> CollectionResult:
        """Collect issues matching filters, stopping after max_issues matches.

        Args:
            repo: Repository or "owner/name" / URL string.
            filters: Filter settings. Defaults to IssueFilters().
            max_issues: Optional cap on matching issues.

        Returns:
            CollectionResult with the matching issues in GitHub's order
            (most recently updated first).
        """
        repository = _as_repository(repo)
        settings = filters if filters is not None else IssueFilters()
        chain = FilterChain(settings)

        since = None
        if settings.date_range is not None and settings.date_range.start is not None:
            since = settings.date_range.start.isoformat()

        async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
            return await self.rest.list_issues_page(
                repository.owner,
                repository.name,
                page,
                per_page=per_page,
                state=settings.state.value,
                since=since,
            )

        async def normalize(raw: dict[str, Any]) -> Issue:
            merged_at = None
            # Excluded pull requests are rejected by the chain; skip the lookup
            if settings.include_pull_requests and needs_merge_lookup(raw):
                merged_at = await self._merged_at(repository, raw)
            return normalize_issue(raw, merged_at=merged_at)

        return await self.paginator.collect(
            repository, fetch_page, normalize, chain, max_items=max_issues
        )

    async def fetch_issues(
        self,
        repo: Repository | str,
        filters: IssueFilters | None = None,
    ) -> list[Issue]:
        """Fetch every issue matching filters."""
        result = await self.collect_issues(repo, filters)
        return result.issues

    async def fetch_issues_with_limit(
        self,
        repo: Repository | str,
        filters: IssueFilters | None,
        max_issues: int,
    ) -> CollectionResult:
        """Fetch at most max_issues matching issues."""
        return await self.collect_issues(repo, filters, max_issues=max_issues)

    async def fetch_issue(self, repo: Repository | str, number: int) -> Issue:
        """Fetch a single issue by number, unfiltered.

        Raises:
            NotFound: If the issue does not exist.
        """
        repository = _as_repository(repo)
        raw = await self.rest.get_issue(repository.owner, repository.name, number)
        return normalize_issue(raw)

    async def fetch_pr(self, repo: Repository | str, number: int) -> Issue:
        """Fetch a single pull request by number, unfiltered.

        Raises:
            NotFound: If the pull request does not exist.
        """
        repository = _as_repository(repo)
        raw = await self.rest.get_pull(repository.owner, repository.name, number)
        return normalize_pull(raw)

    # Comments, reviews and files

    async def fetch_comments(self, repo: Repository | str, number: int) -> list[Comment]:
        """Fetch all conversation comments of an issue or pull request."""
        repository = _as_repository(repo)

        async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
            return await self.rest.list_issue_comments_page(
                repository.owner, repository.name, number, page, per_page
            )

        return await self.paginator.collect_all(fetch_page, normalize_comment)

    async def fetch_pr_reviews(self, repo: Repository | str, number: int) -> list[Review]:
        """Fetch all reviews of a pull request."""
        repository = _as_repository(repo)

        async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
            return await self.rest.list_reviews_page(
                repository.owner, repository.name, number, page, per_page
            )

        return await self.paginator.collect_all(fetch_page, normalize_review)

    async def fetch_pr_review_comments(
        self,
        repo: Repository | str,
        number: int,
    ) -> list[ReviewComment]:
        """Fetch inline review comments of a pull request.

        Malformed comments are dropped; the rest are returned.
        """
        repository = _as_repository(repo)

        async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
            return await self.rest.list_review_comments_page(
                repository.owner, repository.name, number, page, per_page
            )

        raw_comments = await self.paginator.collect_all(fetch_page, lambda raw: raw)
        return normalize_review_comments(raw_comments)

    async def fetch_pr_files(self, repo: Repository | str, number: int) -> list[PullRequestFile]:
        """Fetch the files changed by a pull request."""
        repository = _as_repository(repo)

        async def fetch_page(page: int, per_page: int) -> list[dict[str, Any]]:
            return await self.rest.list_pull_files_page(
                repository.owner, repository.name, number, page, per_page
            )

        return await self.paginator.collect_all(fetch_page, normalize_pull_file)

    # Discussions

    async def fetch_discussion(self, repo: Repository | str, number: int) -> Discussion:
        """Fetch a discussion and its first 100 comments.

        Raises:
            NotFound: If the discussion does not exist or cannot be fetched.
        """
        repository = _as_repository(repo)
        payload = await self.graphql.fetch_discussion(repository.owner, repository.name, number)
        return normalize_discussion(payload, repository, number)

    async def fetch_discussion_by_url(self, url: str) -> Discussion:
        """Fetch a discussion from its web URL.

        Raises:
            InvalidRepository: If the URL is not a discussion URL.
            NotFound: If the discussion does not exist.
        """
        repository, number = parse_discussion_url(url)
        return await self.fetch_discussion(repository, number)

    # Connectivity

    async def test_connection(self) -> None:
        """Check that GitHub is reachable with the configured token.

        Raises:
            AuthError: If the token is rejected.
            ApiError: If the API cannot be reached.
        """
        await self.rest.get_rate_limit()
        logger.info("GitHub API connection successful")

    async def get_rate_limit(self) -> str:
        """Describe the core rate limit, e.g. "Rate limit: 4990/5000 remaining, ..."."""
        data = await self.rest.get_rate_limit()
        core = optional(optional(data, "resources", dict), "core", dict) or {}

        remaining = optional(core, "remaining", int, 0)
        limit = optional(core, "limit", int, 0)
        reset = datetime.fromtimestamp(optional(core, "reset", int, 0) or 0, tz=UTC)

        return f"Rate limit: {remaining}/{limit} remaining, resets at {reset.isoformat()}"
