"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from gh_fetch import __version__
from gh_fetch.errors import ConfigError


class GitHubConfig(BaseModel):
    """GitHub connection settings."""

    token_env: str = "GITHUB_TOKEN"
    api_base_url: str = "https://api.github.com"
    graphql_path: str = "/graphql"
    user_agent: str = f"gh-fetch/{__version__}"
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop the trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"api_base_url must be an http(s) URL, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")


class RateLimitConfig(BaseModel):
    """Request pacing configuration.

    The pacer is a fixed throttle: an explicit delay_between_requests_ms wins,
    otherwise the delay is derived from requests_per_minute.
    """

    requests_per_minute: int = Field(default=60, ge=0, description="Requests per minute budget")
    delay_between_requests_ms: int | None = Field(
        default=None, ge=0, description="Explicit delay between requests"
    )
    max_retries: int = Field(default=3, ge=0, description="Transport retries per request")
    max_pages: int = Field(default=100, ge=1, description="Safety ceiling on pages per listing")


class FetchConfig(BaseModel):
    """Root configuration model."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)


def load_config(path: Path) -> FetchConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated FetchConfig object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If the file is not valid YAML or the values are invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    try:
        with path.open() as f:
            raw_config: dict[str, Any] | None = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    try:
        return FetchConfig.model_validate(raw_config or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
