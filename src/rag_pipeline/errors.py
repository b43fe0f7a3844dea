"""Error taxonomy for the pipeline.

Every failure that crosses the pipeline boundary is a ``PipelineError``
carrying a stable ``ErrorKind``. Adapters translate transport exceptions
into one of the subclasses; the orchestrator converts anything else into
``InternalError``.

Example:
    ```python
    try:
        text = await pipeline.analyze_title("my title")
    except PipelineError as e:
        if e.kind is ErrorKind.RATE_LIMITED:
            await asyncio.sleep(e.retry_after or 1)
    ```
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable error kinds exposed to callers."""

    RATE_LIMITED = "rate_limited"
    UPSTREAM_BLOCKED = "upstream_blocked"
    UPSTREAM_MALFORMED = "upstream_malformed"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class PipelineError(Exception):
    """Base class for all typed pipeline failures.

    Attributes:
        kind: The error kind
        message: Human-readable message, safe to show to callers
        retry_after: Seconds the caller should wait before retrying, if known
        failed_at: Pipeline state in which the failure happened, set by the orchestrator
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.retry_after = retry_after
        self.failed_at: str | None = None

    @property
    def retryable(self) -> bool:
        """Whether retrying the same input can succeed."""
        return self.kind in (ErrorKind.RATE_LIMITED, ErrorKind.TIMEOUT)

    def to_dict(self) -> dict[str, Any]:
        """Caller-facing payload (no traceback, no provider internals)."""
        payload: dict[str, Any] = {"kind": self.kind.value, "message": self.message}
        if self.retry_after is not None:
            payload["retry_after"] = self.retry_after
        if self.failed_at is not None:
            payload["failed_at"] = self.failed_at
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class RateLimitedError(PipelineError):
    """Caller should back off."""

    kind = ErrorKind.RATE_LIMITED


class UpstreamBlockedError(PipelineError):
    """The generative provider refused or filtered the request."""

    kind = ErrorKind.UPSTREAM_BLOCKED


class UpstreamMalformedError(PipelineError):
    """The provider response violated its contract."""

    kind = ErrorKind.UPSTREAM_MALFORMED


class PipelineTimeoutError(PipelineError):
    """A remote call exceeded its time budget."""

    kind = ErrorKind.TIMEOUT


class NotFoundError(PipelineError):
    """There is no content to operate on."""

    kind = ErrorKind.NOT_FOUND


class InternalError(PipelineError):
    """Unexpected failure."""

    kind = ErrorKind.INTERNAL
