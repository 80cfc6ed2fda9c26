"""GitHub GraphQL access for discussions.

Discussions have no REST representation, so they are read with a single
GraphQL query that also returns the first 100 top-level comments.
"""

import logging
from typing import Any

from gh_fetch.errors import NotFound
from gh_fetch.github.http import GitHubClient, GitHubResponse
from gh_fetch.pacing import RatePacer

logger = logging.getLogger(__name__)

# User ids are requested as databaseId so they are numeric like the REST ids
DISCUSSION_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    discussion(number: $number) {
      number
      title
      body
      url
      author {
        login
        ... on User {
          id: databaseId
          avatarUrl
        }
      }
      createdAt
      updatedAt
      comments(first: 100) {
        nodes {
          id
          body
          author {
            login
            ... on User {
              id: databaseId
              avatarUrl
            }
          }
          createdAt
          updatedAt
        }
      }
    }
  }
}
"""


class GraphQLClient:
    """Paced GitHub GraphQL client."""

    def __init__(
        self,
        http_client: GitHubClient,
        pacer: RatePacer,
        endpoint: str = "/graphql",
    ) -> None:
        """Initialize GraphQL client.

        Args:
            http_client: HTTP client for making requests.
            pacer: Pacer consulted after every request.
            endpoint: GraphQL path relative to the API base URL.
        """
        self._http = http_client
        self._pacer = pacer
        self._endpoint = endpoint

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> GitHubResponse:
        """POST a query and return the unchecked response.

        Args:
            query: GraphQL query string.
            variables: Optional query variables.
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = await self._http.post(self._endpoint, json=payload)
        finally:
            await self._pacer.pause()

        errors = response.data.get("errors") if isinstance(response.data, dict) else None
        if errors:
            entries = errors if isinstance(errors, list) else [errors]
            messages = [
                str(err.get("message", "Unknown error")) if isinstance(err, dict) else str(err)
                for err in entries
            ]
            logger.warning("GraphQL errors: %s", "; ".join(messages))

        return response

    async def fetch_discussion(self, owner: str, name: str, number: int) -> dict[str, Any]:
        """Run the discussion query and return the raw JSON payload.

        Raises:
            NotFound: If GitHub answers with a non-success status or a non-JSON body.
        """
        logger.info("Fetching discussion data for %s/%s #%d", owner, name, number)

        response = await self.execute(
            DISCUSSION_QUERY,
            {"owner": owner, "name": name, "number": number},
        )

        if not response.is_success or not isinstance(response.data, dict):
            raise NotFound(
                f"Discussion #{number} in {owner}/{name} could not be fetched: "
                f"{response.error_message()}"
            )

        return response.data
