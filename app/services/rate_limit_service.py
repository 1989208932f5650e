"""Rate limiting service for API usage control."""

import threading
import time
from collections.abc import Callable

from app.models.responses import RateLimitInfo


class RateLimitService:
    """Fixed-window request counter keyed by client (usually the IP address)."""

    def __init__(
        self,
        limit: int = 100,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize rate limit service with window size and request budget."""
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        # client -> (window start, requests made)
        self._windows: dict[str, tuple[float, int]] = {}
        self._lock = threading.Lock()

    def _current_window(self, client: str, now: float) -> tuple[float, int]:
        window = self._windows.get(client)
        if window is None or now - window[0] >= self.window_seconds:
            return now, 0
        return window

    def _info(self, start: float, count: int, now: float) -> RateLimitInfo:
        return RateLimitInfo(
            requests_made=count,
            requests_limit=self.limit,
            window_seconds=self.window_seconds,
            retry_after=max(1, int(start + self.window_seconds - now + 0.999)),
        )

    def check_rate_limit(self, client: str) -> RateLimitInfo:
        """Current usage of a client without counting a request."""
        with self._lock:
            now = self._clock()
            start, count = self._current_window(client, now)
            return self._info(start, count, now)

    def hit(self, client: str) -> tuple[bool, RateLimitInfo]:
        """
        Count one request.

        Returns:
            (allowed, info). A refused request is not counted.
        """
        with self._lock:
            now = self._clock()
            start, count = self._current_window(client, now)
            if count >= self.limit:
                self._windows[client] = (start, count)
                return False, self._info(start, count, now)
            self._windows[client] = (start, count + 1)
            self._prune(now)
            return True, self._info(start, count + 1, now)

    def _prune(self, now: float) -> None:
        expired = [
            client for client, (start, _) in self._windows.items()
            if now - start >= self.window_seconds
        ]
        for client in expired:
            del self._windows[client]

    def reset(self, client: str | None = None) -> None:
        """Reset one client, or everyone."""
        with self._lock:
            if client is None:
                self._windows.clear()
            else:
                self._windows.pop(client, None)
