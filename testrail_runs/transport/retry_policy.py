"""Retry policy for the TestRail HTTP transport.

Provides configurable retry logic with exponential backoff.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class RetryPolicy:
    """Configurable retry policy with exponential backoff."""
    max_retries: int = 3
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 30.0
    retry_statuses: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )

    def get_delay(self, attempt: int, retry_after: Optional[str] = None) -> float:
        """Calculate delay for a given retry attempt (0-indexed).

        Args:
            attempt: Current attempt number (0 = first retry).
            retry_after: Value of a Retry-After header, if the server sent one.

        Returns:
            Delay in seconds before next retry.
        """
        delay = min(self.initial_delay * (self.backoff_factor ** attempt), self.max_delay)
        seconds = parse_retry_after(retry_after)
        if seconds is not None:
            delay = max(delay, seconds)
        return delay

    def should_retry(self, status_code: int) -> bool:
        return status_code in self.retry_statuses


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Seconds from a Retry-After header; None for dates or garbage."""
    if value is None or not value.strip().isdigit():
        return None
    return float(value.strip())


def default_retry_policy() -> RetryPolicy:
    """Create default retry policy.

    3 retries, 1s initial delay, 2x backoff, 30s max.
    """
    return RetryPolicy()


def no_retry_policy() -> RetryPolicy:
    """Create a no-retry policy (fail immediately)."""
    return RetryPolicy(max_retries=0)
