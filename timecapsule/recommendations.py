"""
Recommendation seeding and retrieval.

Seeding is deterministic: the first aggregated track and the first artist
are always used, so the same snapshot and genres give the same request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import pandas as pd
import requests
from spotipy.exceptions import SpotifyException

from .client import CatalogClient
from .config import GENRES, MAX_GENRES, MAX_TOTAL_SEEDS, RECOMMENDATION_LIMIT
from .errors import FetchFailure
from .error_handling import get_logger
from .models import LibrarySnapshot, Track
from .ratelimit import RateLimitError

logger = get_logger(__name__)

RECOMMENDATION_COLUMNS = [
    "id", "uri", "name", "artists", "album", "image", "release_date", "popularity", "song_link",
]


@dataclass(frozen=True)
class RecommendationSeed:
    track_id: str
    artist_ids: tuple[str, ...]
    genres: tuple[str, ...]

    @property
    def total(self) -> int:
        return 1 + len(self.artist_ids) + len(self.genres)

    def as_query(self) -> dict:
        return {
            "seed_artists": list(self.artist_ids),
            "seed_genres": list(self.genres),
            "seed_tracks": [self.track_id],
        }


@dataclass(frozen=True)
class Recommendation:
    id: int
    uri: str
    name: str
    artists: str
    album: Optional[str]
    image: Optional[str]
    release_date: Optional[str]
    popularity: Optional[int]
    song_link: Optional[str]

    @classmethod
    def from_track(cls, row_id: int, track: Track) -> "Recommendation":
        return cls(
            id=row_id,
            uri=track.uri,
            name=track.name,
            artists=", ".join(a.name for a in track.artists),
            album=track.album_name,
            image=track.album_image_url,
            release_date=track.release_date,
            popularity=track.popularity,
            song_link=track.external_url,
        )


def validate_genres(genres: Iterable[str]) -> list[str]:
    """Normalize genre labels, rejecting ones that aren't offered."""
    out = []
    for g in genres:
        label = g.strip().lower()
        if label not in GENRES:
            raise ValueError(f"Unknown genre {g!r}; choose from {', '.join(GENRES)}")
        if label not in out:
            out.append(label)
    return out


def build_seed(
    snapshot: LibrarySnapshot,
    genres: Sequence[str],
    max_genres: int = MAX_GENRES,
) -> Optional[RecommendationSeed]:
    """
    Derive the recommendation seed.

    Returns None unless the snapshot has at least one song id and one artist id
    and at least one genre is chosen. Genres beyond ``max_genres`` (and beyond
    the 5-seed total) are dropped, keeping the first ones.

    Raises:
        ValueError: If ``max_genres`` leaves no room for a genre
    """
    if max_genres < 1:
        raise ValueError(f"max_genres must be >= 1, got {max_genres}")
    song_ids = [s for s in snapshot.song_ids if s]
    genres = list(dict.fromkeys(g for g in genres if g))
    if not song_ids or not snapshot.artist_ids or not genres:
        return None

    # one track + one artist, the rest of the budget goes to genres
    budget = min(max_genres, MAX_TOTAL_SEEDS - 2)
    if len(genres) > budget:
        logger.warning(f"Using the first {budget} of {len(genres)} genres")
        genres = genres[:budget]
    return RecommendationSeed(
        track_id=song_ids[0],
        artist_ids=(snapshot.artist_ids[0],),
        genres=tuple(genres),
    )


def fetch_recommendations(
    client: CatalogClient,
    seed: RecommendationSeed,
    limit: int = RECOMMENDATION_LIMIT,
) -> list[Recommendation]:
    """
    Fetch recommendations as table rows numbered from 1.

    Raises:
        CredentialError: If the credential is missing/expired
        FetchFailure: stage "recommendations"
    """
    try:
        resp = client.recommendations(limit=limit, **seed.as_query())
    except (SpotifyException, requests.exceptions.RequestException, RateLimitError) as e:
        logger.error(f"Fetching recommendations failed: {e}")
        raise FetchFailure("recommendations", str(e)) from e

    tracks = [t for t in resp.get("tracks") or [] if t]
    return [Recommendation.from_track(i, Track.from_api(t)) for i, t in enumerate(tracks, start=1)]


def select_recommendations(rows: Sequence[Recommendation], ids: Iterable[int]) -> list[str]:
    """Uris of the rows whose ids were selected, in table order."""
    wanted = set(ids)
    return [row.uri for row in rows if row.id in wanted]


def recommendations_frame(rows: Sequence[Recommendation]) -> pd.DataFrame:
    return pd.DataFrame([row.__dict__ for row in rows], columns=RECOMMENDATION_COLUMNS)
