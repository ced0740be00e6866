"""Cooperative cancellation for long-running resolutions."""

import threading
import time

from codeowners.errors import ResolutionCancelledError


class CancellationToken:
    """Thread-safe flag that callers set to stop an ongoing resolution."""

    def __init__(self) -> None:
        self._is_cancelled = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._is_cancelled.set()

    def is_cancelled(self) -> bool:
        return self._is_cancelled.is_set()


class ResolutionGuard:
    """Bundles a cancellation token and a monotonic deadline.

    ``check`` is called before each unit of I/O (folder load, import load).
    """

    def __init__(
        self, token: CancellationToken | None = None, deadline: float | None = None
    ) -> None:
        self.token = token
        self.deadline = deadline

    @classmethod
    def with_timeout(
        cls, seconds: float, token: CancellationToken | None = None
    ) -> "ResolutionGuard":
        return cls(token, time.monotonic() + seconds)

    def check(self) -> None:
        if self.token is not None and self.token.is_cancelled():
            raise ResolutionCancelledError("resolution was cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise ResolutionCancelledError("resolution exceeded its deadline")
