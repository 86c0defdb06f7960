"""
Library aggregation: every track of every playlist, flattened.

Reads one page of the user's playlists (up to 50; later pages are not
followed) and one page of items (up to 100) from each playlist. Tracks
keep playlist order, then item order within a playlist, duplicates
included. Any failure discards everything fetched so far.
"""

from __future__ import annotations

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests
from spotipy.exceptions import SpotifyException
from tqdm import tqdm

from .auth import Credential
from .client import CatalogClient, playlist_id_from_href
from .errors import FetchFailure
from .error_handling import get_logger
from .models import LibrarySnapshot, Track
from .ratelimit import RateLimitError

logger = get_logger(__name__)

_FETCH_ERRORS = (SpotifyException, requests.exceptions.RequestException, RateLimitError)


class LibraryAggregator:
    def __init__(self, client: CatalogClient, max_workers: int = 1, progress: bool = False):
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.client = client
        self.max_workers = max_workers
        self.progress = progress

    def aggregate(self) -> LibrarySnapshot:
        """
        Build a fresh snapshot of the user's library.

        Raises:
            CredentialError: If the credential is missing/expired (no request made)
            FetchFailure: stage "playlists" or "tracks"
        """
        self.client.require_credential()
        try:
            page = self.client.my_playlists()
        except _FETCH_ERRORS as e:
            logger.error(f"Fetching playlists failed: {e}")
            raise FetchFailure("playlists", str(e)) from e

        playlists = page.get("items") or []
        if page.get("next"):
            logger.debug("More than one page of playlists; only the first is used")
        playlist_ids = [_playlist_id(p) for p in playlists]
        playlist_ids = [pid for pid in playlist_ids if pid]
        logger.info(f"Fetching tracks from {len(playlist_ids)} playlists")

        try:
            pages = self._fetch_track_pages(playlist_ids)
        except _FETCH_ERRORS as e:
            logger.error(f"Fetching playlist tracks failed: {e}")
            raise FetchFailure("tracks", str(e)) from e

        tracks = []
        skipped = 0
        for items in pages:
            for item in items:
                track = Track.from_item(item or {})
                if track is None:
                    skipped += 1
                    continue
                tracks.append(track)
        if skipped:
            logger.debug(f"Skipped {skipped} playlist items without a track")

        snapshot = LibrarySnapshot.from_tracks(tracks)
        logger.info(f"Aggregated {len(snapshot)} tracks")
        return snapshot

    def _fetch_items(self, playlist_id: str) -> list:
        return self.client.playlist_tracks(playlist_id).get("items") or []

    def _fetch_track_pages(self, playlist_ids: list[str]) -> list[list]:
        bar = tqdm(
            total=len(playlist_ids),
            desc="  Fetching playlists",
            unit="playlist",
            leave=False,
            file=sys.stderr,
            disable=not self.progress,
        )
        with bar:
            if self.max_workers == 1 or len(playlist_ids) < 2:
                pages = []
                for playlist_id in playlist_ids:
                    pages.append(self._fetch_items(playlist_id))
                    bar.update(1)
                return pages
            return self._fetch_concurrently(playlist_ids, bar)

    def _fetch_concurrently(self, playlist_ids: list[str], bar: tqdm) -> list[list]:
        # Set by the first failing worker; queued fetches then return without a request
        failed = threading.Event()

        def fetch(playlist_id: str) -> Optional[list]:
            if failed.is_set():
                return None
            try:
                return self._fetch_items(playlist_id)
            except BaseException:
                failed.set()
                raise

        # Results are indexed by playlist position, so completion order doesn't matter
        ordered: list[Optional[list]] = [None] * len(playlist_ids)
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = [executor.submit(fetch, pid) for pid in playlist_ids]
            for i, future in enumerate(futures):
                ordered[i] = future.result()
                bar.update(1)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
        return ordered


def _playlist_id(playlist: Optional[dict]) -> Optional[str]:
    playlist = playlist or {}
    if playlist.get("id"):
        return playlist["id"]
    href = (playlist.get("tracks") or {}).get("href")
    return playlist_id_from_href(href) if href else None


def aggregate(
    credential: Optional[Credential],
    max_workers: int = 1,
    progress: bool = False,
    client: Optional[CatalogClient] = None,
) -> LibrarySnapshot:
    """Aggregate the library of the user owning ``credential``."""
    client = client or CatalogClient(credential)
    return LibraryAggregator(client, max_workers=max_workers, progress=progress).aggregate()
