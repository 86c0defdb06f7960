"""
Best-effort client for the playlist counter service.

Failures never reach the caller: they are logged at debug level and the
methods return None.
"""

from __future__ import annotations

from typing import Optional

import requests

from .config import COUNTER_BASE_URL
from .error_handling import get_logger

logger = get_logger(__name__)


class PlaylistCounter:
    def __init__(self, base_url: str = COUNTER_BASE_URL, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def count(self) -> Optional[int]:
        """Number of playlists created so far, or None if the service is unavailable."""
        try:
            resp = self.session.get(f"{self.base_url}/api/playlists/playlistIds")
            resp.raise_for_status()
            return int(resp.json()["count"])
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError) as e:
            logger.debug(f"Playlist count unavailable: {e}")
            return None

    def record(self, playlist_id: str) -> Optional[int]:
        """Record a created playlist and return the refreshed count."""
        try:
            resp = self.session.post(
                f"{self.base_url}/api/playlists/",
                json={"playlistId": playlist_id},
            )
            resp.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.debug(f"Recording playlist {playlist_id} failed: {e}")
            return None
        return self.count()
