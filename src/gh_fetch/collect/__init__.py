"""Paginated collection of GitHub list endpoints."""

from gh_fetch.collect.paginator import PageFetcher, PaginationStats, Paginator

__all__ = ["PageFetcher", "PaginationStats", "Paginator"]
