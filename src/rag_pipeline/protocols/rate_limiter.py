"""Rate limiter protocol.

The limiter itself is provided by the hosting application; the pipeline
only asks whether a call is allowed.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RateLimiter(Protocol):
    """Protocol for fixed-window rate limiters."""

    def is_allowed(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """Record a request for ``key`` and report whether it is within the limit.

        Args:
            key: Limit bucket (e.g. "ai:title")
            max_requests: Requests allowed per window
            window_seconds: Window length in seconds

        Returns:
            True if the request may proceed
        """
        ...
