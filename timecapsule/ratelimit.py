"""
Request pacing for Spotify API calls.

Calls are spaced by a fixed delay. A 429 response is surfaced as
``RateLimitError`` (with the server's Retry-After hint) and is never retried
automatically; the user re-runs the action instead.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional, TypeVar

from spotipy.exceptions import SpotifyException

from .config import SPOTIFY_API_DELAY

T = TypeVar("T")


class RateLimitError(Exception):
    """Raised when Spotify answers 429 Too Many Requests."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after


def _retry_after(error: SpotifyException) -> Optional[int]:
    headers = getattr(error, "headers", None) or {}
    value = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class RateLimiter:
    """
    Spaces calls at least ``delay`` seconds apart.

    Usage:
        limiter = RateLimiter(delay=0.5)
        result = limiter.call(spotify.current_user_playlists, limit=50)
    """

    def __init__(self, delay: float = SPOTIFY_API_DELAY):
        self.delay = delay
        self._last = 0.0
        self._lock = threading.Lock()

    def _wait(self) -> None:
        if self.delay <= 0:
            return
        with self._lock:
            remaining = self._last + self.delay - time.monotonic()
            if remaining > 0:
                time.sleep(remaining)
            self._last = time.monotonic()

    def call(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Execute a paced call.

        Raises:
            RateLimitError: If Spotify responds with 429
            SpotifyException: For any other Spotify error
        """
        self._wait()
        try:
            return func(*args, **kwargs)
        except SpotifyException as e:
            if e.http_status == 429:
                retry_after = _retry_after(e)
                raise RateLimitError(
                    f"Rate limited by Spotify (retry after {retry_after or '?'}s)",
                    retry_after=retry_after,
                ) from e
            raise
