"""GitHub token handling.

Tokens come either from an explicit value or from the environment variable
named in the configuration. Nothing here writes to the environment.
"""

import logging
import os
import re
from collections.abc import Mapping

from gh_fetch.errors import AuthError

logger = logging.getLogger(__name__)


class GitHubAuth:
    """GitHub authentication manager.

    Token prefix formats:
    - ghp_: Personal access token (classic)
    - github_pat_: Fine-grained personal access token
    - gho_: OAuth access token
    - ghu_: User-to-server token
    - ghs_: Server-to-server token
    - ghr_: Refresh token
    - Classic tokens: 40 character hex string (no prefix)
    """

    VALID_PREFIXES = ("ghp_", "github_pat_", "gho_", "ghu_", "ghs_", "ghr_")

    CLASSIC_TOKEN_PATTERN = re.compile(r"^[a-f0-9]{40}$")

    def __init__(
        self,
        token: str | None = None,
        token_env: str = "GITHUB_TOKEN",
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize GitHub authentication.

        Args:
            token: GitHub token. If None, read from the token_env variable.
            token_env: Name of the environment variable holding the token.
            environ: Environment mapping to read from (os.environ by default).

        Raises:
            AuthError: If the token is missing or has an unknown format.
        """
        env = os.environ if environ is None else environ

        if token:
            loaded_token = token
            token_source = "explicit parameter"
        else:
            loaded_token = env.get(token_env, "")
            token_source = f"{token_env} environment variable"

        if not loaded_token:
            raise AuthError(f"{token_env} environment variable not set and no token was given")

        logger.debug("Using GitHub token from %s", token_source)

        self._token: str = loaded_token.strip()
        self._validate_token()

    def _validate_token(self) -> None:
        """Validate token format.

        Raises:
            AuthError: If token format is invalid.
        """
        token = self._token
        if not token:
            raise AuthError("Token is empty")

        has_valid_prefix = token.startswith(self.VALID_PREFIXES)
        is_classic = bool(self.CLASSIC_TOKEN_PATTERN.match(token))

        if not has_valid_prefix and not is_classic:
            raise AuthError(
                f"Invalid token format. Expected prefix {self.VALID_PREFIXES} "
                "or 40-character hex string (classic token)"
            )

        if has_valid_prefix and len(token) < 20:
            raise AuthError("Token appears too short to be valid")

    @property
    def token(self) -> str:
        """The validated token."""
        return self._token

    def get_authorization_header(self) -> dict[str, str]:
        """Authorization header accepted by both the REST and GraphQL APIs."""
        return {"Authorization": f"Bearer {self._token}"}

    def __repr__(self) -> str:
        return f"GitHubAuth(token='{self._token[:4]}...')"
