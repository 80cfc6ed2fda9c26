"""Fixed-delay request pacing.

A RatePacer turns a requests-per-minute budget into a constant pause that is
taken after every outbound call. It does not look at the rate limit headers
GitHub returns; the throttle is static.
"""

import asyncio
import logging

from gh_fetch.config import RateLimitConfig
from gh_fetch.errors import ConfigError

logger = logging.getLogger(__name__)

MILLISECONDS_PER_MINUTE = 60_000


class RatePacer:
    """Pause a fixed number of milliseconds around each API call."""

    def __init__(self, delay_ms: int) -> None:
        """Initialize pacer.

        Args:
            delay_ms: Delay taken by every pause() call, in milliseconds.

        Raises:
            ConfigError: If delay_ms is negative.
        """
        if delay_ms < 0:
            raise ConfigError(f"Pacing delay must be non-negative, got {delay_ms}ms")
        self._delay_ms = delay_ms
        self.pauses = 0

    @classmethod
    def from_requests_per_minute(cls, requests_per_minute: int) -> "RatePacer":
        """Derive the delay from a per-minute budget, clamping the budget to at least 1."""
        return cls(MILLISECONDS_PER_MINUTE // max(requests_per_minute, 1))

    @classmethod
    def from_config(cls, config: RateLimitConfig) -> "RatePacer":
        """Build a pacer from configuration; an explicit delay wins over the budget."""
        if config.delay_between_requests_ms is not None:
            return cls(config.delay_between_requests_ms)
        return cls.from_requests_per_minute(config.requests_per_minute)

    @classmethod
    def disabled(cls) -> "RatePacer":
        """Pacer that never sleeps."""
        return cls(0)

    @property
    def delay_ms(self) -> int:
        """Configured delay in milliseconds."""
        return self._delay_ms

    @property
    def delay_seconds(self) -> float:
        """Configured delay in seconds."""
        return self._delay_ms / 1000

    async def pause(self) -> None:
        """Sleep for the configured delay."""
        self.pauses += 1
        if self._delay_ms:
            logger.debug("Pacing: sleeping %dms", self._delay_ms)
            await asyncio.sleep(self.delay_seconds)

    def __repr__(self) -> str:
        return f"RatePacer(delay_ms={self._delay_ms})"
