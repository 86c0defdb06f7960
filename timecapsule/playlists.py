"""
Playlist materialization.

Neither operation is idempotent: Spotify does not enforce unique names, so
creating twice makes two playlists.
"""

from __future__ import annotations

from typing import Sequence

import requests
from spotipy.exceptions import SpotifyException

from .client import CatalogClient
from .config import MAX_TRACKS_PER_CALL
from .errors import AddFailure, CreateFailure, FetchFailure
from .error_handling import get_logger
from .models import AddResult, PlaylistRef
from .ratelimit import RateLimitError

logger = get_logger(__name__)

_WRITE_ERRORS = (SpotifyException, requests.exceptions.RequestException, RateLimitError)


class PlaylistMaterializer:
    def __init__(self, client: CatalogClient):
        self.client = client

    def current_user_id(self) -> str:
        """Resolve the owner id for playlist creation (GET /me)."""
        try:
            return self.client.me()["id"]
        except (*_WRITE_ERRORS, KeyError, TypeError) as e:
            logger.error(f"Fetching user profile failed: {e}")
            raise FetchFailure("profile", str(e)) from e

    def create_playlist(self, owner_id: str, name: str, description: str) -> PlaylistRef:
        """
        Create an empty playlist.

        Raises:
            CreateFailure: On any transport or authorization error
        """
        try:
            resp = self.client.create_playlist(owner_id, name, description)
            ref = PlaylistRef(id=resp["id"], name=resp.get("name", name))
        except (*_WRITE_ERRORS, KeyError, TypeError) as e:
            logger.error(f"Creating playlist {name!r} failed: {e}")
            raise CreateFailure(str(e)) from e
        logger.info(f"Created playlist {ref.name!r} ({ref.id})")
        return ref

    def add_tracks(
        self,
        playlist_id: str,
        uris: Sequence[str],
        max_per_call: int = MAX_TRACKS_PER_CALL,
    ) -> AddResult:
        """
        Insert tracks at the top of a playlist in a single request.

        Only the first ``max_per_call`` uris are sent; the rest are dropped
        (not retried or paginated). ``AddResult.dropped`` reports how many.

        Raises:
            AddFailure: On any transport or authorization error
        """
        submitted = tuple(uris[:max_per_call])
        dropped = len(uris) - len(submitted)
        if dropped:
            logger.warning(f"Only the first {max_per_call} tracks are added; dropping {dropped}")
        try:
            self.client.add_items(playlist_id, submitted, position=0)
        except _WRITE_ERRORS as e:
            logger.error(f"Adding {len(submitted)} tracks to {playlist_id} failed: {e}")
            raise AddFailure(str(e)) from e
        logger.info(f"Added {len(submitted)} tracks to {playlist_id}")
        return AddResult(playlist_id=playlist_id, submitted=submitted, dropped=dropped)
