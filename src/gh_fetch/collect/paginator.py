"""Page-number pagination driver.

Walks a numbered list endpoint page by page until a page comes back empty,
an optional cap of matching items is reached, or a safety ceiling on the
number of pages is hit. Reaching the ceiling ends collection normally with
whatever was gathered.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from datetime import UTC, datetime
from typing import Any, TypeVar

from gh_fetch.errors import ConfigError
from gh_fetch.filters.chain import FilterChain
from gh_fetch.models import CollectionResult, Issue, Repository

logger = logging.getLogger(__name__)

T = TypeVar("T")

# fetch_page(page, per_page) -> raw items of that page
PageFetcher = Callable[[int, int], Awaitable[list[dict[str, Any]]]]


class PaginationStats:
    """Counters for one pagination run."""

    def __init__(self) -> None:
        self.pages_fetched = 0
        self.items_seen = 0
        self.items_kept = 0
        self.hit_page_ceiling = False

    def to_dict(self) -> dict[str, int | bool]:
        """Convert stats to dictionary."""
        return {
            "pages_fetched": self.pages_fetched,
            "items_seen": self.items_seen,
            "items_kept": self.items_kept,
            "hit_page_ceiling": self.hit_page_ceiling,
        }


class Paginator:
    """Drive numbered-page fetches with a cap and a page ceiling."""

    DEFAULT_PER_PAGE = 100
    DEFAULT_MAX_PAGES = 100

    def __init__(
        self,
        max_pages: int = DEFAULT_MAX_PAGES,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        """Initialize paginator.

        Args:
            max_pages: Safety ceiling on pages fetched per run.
            per_page: Page size requested from GitHub.

        Raises:
            ConfigError: If either value is below 1.
        """
        if max_pages < 1:
            raise ConfigError(f"max_pages must be at least 1, got {max_pages}")
        if per_page < 1:
            raise ConfigError(f"per_page must be at least 1, got {per_page}")
        self.max_pages = max_pages
        self.per_page = per_page

    async def pages(
        self,
        fetch_page: PageFetcher,
        stats: PaginationStats | None = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield non-empty pages in order, starting at page 1.

        Stops at the first empty page or after max_pages pages.
        """
        stats = stats if stats is not None else PaginationStats()
        page = 1

        while True:
            logger.debug("Fetching page %d", page)
            items = await fetch_page(page, self.per_page)
            stats.pages_fetched += 1

            if not items:
                return

            stats.items_seen += len(items)
            yield items

            page += 1
            if page > self.max_pages:
                stats.hit_page_ceiling = True
                logger.warning("Reached maximum page limit (%d)", self.max_pages)
                return

    async def collect(
        self,
        repository: Repository,
        fetch_page: PageFetcher,
        normalize: Callable[[dict[str, Any]], Awaitable[Issue]],
        chain: FilterChain,
        max_items: int | None = None,
    ) -> CollectionResult:
        """Collect filter-matching issues across pages.

        Every raw item is normalized and filtered before it can count toward
        max_items, so the cap limits matches rather than fetched volume.

        Args:
            repository: Repository being collected (recorded in the result).
            fetch_page: Page fetch capability.
            normalize: Converts one raw item into an Issue.
            chain: Filter chain applied to each normalized issue.
            max_items: Optional cap on matching issues.

        Returns:
            CollectionResult with at most max_items issues.
        """
        logger.info("Collecting issues from %s", repository.full_name)

        stats = PaginationStats()
        issues: list[Issue] = []

        if max_items is None or max_items > 0:
            async with aclosing(self.pages(fetch_page, stats)) as pages:
                async for items in pages:
                    for raw in items:
                        issue = await normalize(raw)
                        if not chain.matches(issue):
                            continue
                        issues.append(issue)
                        if max_items is not None and len(issues) >= max_items:
                            break

                    if max_items is not None and len(issues) >= max_items:
                        logger.info("Reached maximum issue limit: %d", max_items)
                        break

        stats.items_kept = len(issues)
        logger.info(
            "Collected %d issues from %s (pages=%d, seen=%d, rejected=%s)",
            len(issues),
            repository.full_name,
            stats.pages_fetched,
            stats.items_seen,
            chain.get_stats(),
        )

        return CollectionResult(
            repository=repository,
            issues=issues,
            collection_time=datetime.now(UTC),
            filters_applied=chain.describe(),
        )

    async def collect_all(
        self,
        fetch_page: PageFetcher,
        parse: Callable[[dict[str, Any]], T | None],
    ) -> list[T]:
        """Collect every item across pages without filtering or a cap.

        Args:
            fetch_page: Page fetch capability.
            parse: Converts one raw item; returning None drops it.
        """
        stats = PaginationStats()
        results: list[T] = []

        async for items in self.pages(fetch_page, stats):
            for raw in items:
                parsed = parse(raw)
                if parsed is not None:
                    results.append(parsed)

        stats.items_kept = len(results)
        logger.debug("Collected %d items: %s", len(results), stats.to_dict())
        return results
