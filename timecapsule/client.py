"""
Thin, credential-guarded wrapper around ``spotipy.Spotify``.

Every request first checks that the bearer credential is present and not
expired; otherwise ``CredentialError`` is raised and no request is made.
Requests are paced through a ``RateLimiter``. spotipy's own urllib3 retries
are switched off, so a failed or rate-limited request is surfaced once.
"""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import urlparse

import spotipy

from .auth import Credential
from .config import MAX_TRACKS_PER_CALL, PLAYLIST_PAGE_LIMIT, RECOMMENDATION_LIMIT
from .errors import CredentialError
from .ratelimit import RateLimiter


class CatalogClient:
    """Only the Spotify endpoints the time capsule needs."""

    def __init__(
        self,
        credential: Optional[Credential],
        sp: Optional[spotipy.Spotify] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        self.credential = credential
        self._sp = sp
        self.limiter = limiter or RateLimiter()

    @property
    def sp(self) -> spotipy.Spotify:
        self.require_credential()
        if self._sp is None:
            self._sp = spotipy.Spotify(
                auth=self.credential.access_token,
                retries=0,
                status_retries=0,
            )
        return self._sp

    def require_credential(self) -> None:
        if self.credential is None or not self.credential.is_valid():
            raise CredentialError("Missing or expired Spotify credential")

    def _call(self, fn_name: str, *args, **kwargs):
        sp = self.sp
        return self.limiter.call(getattr(sp, fn_name), *args, **kwargs)

    def me(self) -> dict:
        """GET /me"""
        return self._call("current_user")

    def my_playlists(self, limit: int = PLAYLIST_PAGE_LIMIT) -> dict:
        """GET /me/playlists?limit=50 (single page)."""
        return self._call("current_user_playlists", limit=limit)

    def playlist_tracks(self, playlist_id: str, limit: int = MAX_TRACKS_PER_CALL) -> dict:
        """GET /playlists/{playlist_id}/tracks (single page)."""
        return self._call(
            "playlist_items", playlist_id, limit=limit, additional_types=("track",)
        )

    def recommendations(
        self,
        seed_artists: Sequence[str],
        seed_genres: Sequence[str],
        seed_tracks: Sequence[str],
        limit: int = RECOMMENDATION_LIMIT,
    ) -> dict:
        """GET /recommendations"""
        return self._call(
            "recommendations",
            seed_artists=list(seed_artists),
            seed_genres=list(seed_genres),
            seed_tracks=list(seed_tracks),
            limit=limit,
        )

    def create_playlist(self, owner_id: str, name: str, description: str) -> dict:
        """POST /users/{owner_id}/playlists"""
        return self._call("user_playlist_create", owner_id, name, description=description)

    def add_items(self, playlist_id: str, uris: Sequence[str], position: int = 0) -> dict:
        """POST /playlists/{playlist_id}/tracks"""
        return self._call("playlist_add_items", playlist_id, list(uris), position=position)


def playlist_id_from_href(href: str) -> Optional[str]:
    """Pull ``{id}`` out of ``.../v1/playlists/{id}/tracks``."""
    parts = urlparse(href).path.strip("/").split("/")
    if "playlists" in parts:
        i = parts.index("playlists")
        if i + 1 < len(parts) and parts[i + 1]:
            return parts[i + 1]
    return None
