"""GitHub REST endpoints used by the fetcher.

Each method performs exactly one HTTP request followed by one pacer pause and
returns raw JSON. Listing methods fetch a single numbered page; walking the
pages is the Paginator's job.
"""

import logging
from typing import Any, cast

from gh_fetch.errors import ApiError, NotFound
from gh_fetch.github.http import GitHubClient, GitHubResponse
from gh_fetch.pacing import RatePacer

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 100


class RestClient:
    """Paced access to the GitHub REST API."""

    def __init__(self, http_client: GitHubClient, pacer: RatePacer) -> None:
        """Initialize REST API client.

        Args:
            http_client: GitHubClient instance for HTTP requests.
            pacer: Pacer consulted after every request.
        """
        self._http = http_client
        self._pacer = pacer

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> GitHubResponse:
        try:
            return await self._http.get(path, params=params)
        finally:
            await self._pacer.pause()

    async def _get_page(
        self,
        path: str,
        page: int,
        per_page: int,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch one page of a list endpoint.

        Raises:
            ApiError: On any non-success response.
        """
        query = dict(params or {})
        query["per_page"] = per_page
        query["page"] = page

        response = await self._get(path, params=query)
        if not response.is_success:
            raise ApiError(
                f"Failed to fetch {path} page {page}: {response.error_message()}",
                status_code=response.status_code,
            )

        data = response.data
        if not isinstance(data, list):
            raise ApiError(f"Expected a JSON list from {path}, got {type(data).__name__}")
        return cast("list[dict[str, Any]]", data)

    async def _get_object(self, path: str, what: str) -> dict[str, Any]:
        """Fetch a single resource.

        Raises:
            NotFound: On 404.
            ApiError: On any other non-success response.
        """
        response = await self._get(path)
        if response.is_not_found:
            raise NotFound(f"{what} not found: {response.error_message()}")
        if not response.is_success or not isinstance(response.data, dict):
            raise ApiError(
                f"Failed to fetch {what}: {response.error_message()}",
                status_code=response.status_code,
            )
        return cast("dict[str, Any]", response.data)

    async def list_issues_page(
        self,
        owner: str,
        repo: str,
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
        state: str = "all",
        since: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch one page of issues (pull requests included), most recently updated first."""
        params: dict[str, Any] = {
            "state": state,
            "sort": "updated",
            "direction": "desc",
        }
        if since:
            params["since"] = since

        logger.debug("Fetching issues page %d for %s/%s (state=%s)", page, owner, repo, state)
        return await self._get_page(f"/repos/{owner}/{repo}/issues", page, per_page, params)

    async def get_issue(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Fetch one issue (or pull request viewed as an issue)."""
        return await self._get_object(
            f"/repos/{owner}/{repo}/issues/{number}", f"Issue #{number} in {owner}/{repo}"
        )

    async def get_pull(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """Fetch one pull request."""
        return await self._get_object(
            f"/repos/{owner}/{repo}/pulls/{number}", f"PR #{number} in {owner}/{repo}"
        )

    async def list_issue_comments_page(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[dict[str, Any]]:
        """Fetch one page of conversation comments on an issue or pull request."""
        return await self._get_page(
            f"/repos/{owner}/{repo}/issues/{number}/comments", page, per_page
        )

    async def list_reviews_page(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[dict[str, Any]]:
        """Fetch one page of reviews on a pull request."""
        return await self._get_page(f"/repos/{owner}/{repo}/pulls/{number}/reviews", page, per_page)

    async def list_review_comments_page(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[dict[str, Any]]:
        """Fetch one page of inline review comments on a pull request."""
        return await self._get_page(
            f"/repos/{owner}/{repo}/pulls/{number}/comments", page, per_page
        )

    async def list_pull_files_page(
        self,
        owner: str,
        repo: str,
        number: int,
        page: int,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> list[dict[str, Any]]:
        """Fetch one page of files changed by a pull request."""
        return await self._get_page(f"/repos/{owner}/{repo}/pulls/{number}/files", page, per_page)

    async def get_rate_limit(self) -> dict[str, Any]:
        """Fetch the /rate_limit document.

        Raises:
            ApiError: If the request fails.
        """
        response = await self._get("/rate_limit")
        if not response.is_success or not isinstance(response.data, dict):
            raise ApiError(
                f"Failed to get rate limit: {response.error_message()}",
                status_code=response.status_code,
            )
        return cast("dict[str, Any]", response.data)
