"""GitHub API clients."""

from gh_fetch.github.auth import GitHubAuth
from gh_fetch.github.graphql import DISCUSSION_QUERY, GraphQLClient
from gh_fetch.github.http import GitHubClient, GitHubResponse, RateLimitInfo
from gh_fetch.github.rest import RestClient

__all__ = [
    "DISCUSSION_QUERY",
    "GitHubAuth",
    "GitHubClient",
    "GitHubResponse",
    "GraphQLClient",
    "RateLimitInfo",
    "RestClient",
]
