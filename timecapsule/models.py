from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

TRACK_COLUMNS = [
    "track_id", "uri", "name", "artists", "primary_artist_id", "album_name",
    "album_image_url", "release_date", "popularity", "added_at", "external_url",
]


def parse_instant(value) -> Optional[datetime]:
    """Parse an ISO timestamp from the API into an aware UTC datetime (None if unparsable)."""
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


@dataclass(frozen=True)
class Artist:
    id: Optional[str]
    name: str = ""


@dataclass(frozen=True)
class Track:
    id: Optional[str]
    uri: str
    name: str = ""
    artists: tuple[Artist, ...] = ()
    album_name: Optional[str] = None
    album_image_url: Optional[str] = None
    release_date: Optional[str] = None
    popularity: Optional[int] = None
    added_at: Optional[datetime] = None
    external_url: Optional[str] = None

    @property
    def primary_artist_id(self) -> Optional[str]:
        return self.artists[0].id if self.artists else None

    @classmethod
    def from_api(cls, track: dict, added_at=None) -> "Track":
        album = track.get("album") or {}
        images = album.get("images") or []
        return cls(
            id=track.get("id"),
            uri=track.get("uri"),
            name=track.get("name") or "",
            artists=tuple(
                Artist(a.get("id"), a.get("name") or "") for a in track.get("artists") or []
            ),
            album_name=album.get("name"),
            album_image_url=images[0].get("url") if images else None,
            release_date=album.get("release_date"),
            popularity=track.get("popularity"),
            added_at=parse_instant(added_at),
            external_url=(track.get("external_urls") or {}).get("spotify"),
        )

    @classmethod
    def from_item(cls, item: dict) -> Optional["Track"]:
        """Build from a playlist item ``{added_at, track}``; None for removed/local entries."""
        track = item.get("track")
        if not track:
            return None
        return cls.from_api(track, added_at=item.get("added_at"))


@dataclass(frozen=True)
class LibrarySnapshot:
    """
    Point-in-time copy of the user's aggregated library.

    ``song_ids`` has one entry per track. ``artist_ids`` holds the first
    artist of each track that has one, so it can be shorter than ``tracks``.
    """

    tracks: tuple[Track, ...] = ()
    song_ids: tuple[Optional[str], ...] = ()
    artist_ids: tuple[str, ...] = ()

    @classmethod
    def from_tracks(cls, tracks: Sequence[Track]) -> "LibrarySnapshot":
        tracks = tuple(tracks)
        return cls(
            tracks=tracks,
            song_ids=tuple(t.id for t in tracks),
            artist_ids=tuple(t.primary_artist_id for t in tracks if t.primary_artist_id),
        )

    @classmethod
    def empty(cls) -> "LibrarySnapshot":
        return cls()

    def __len__(self) -> int:
        return len(self.tracks)

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "track_id": t.id,
                "uri": t.uri,
                "name": t.name,
                "artists": [a.name for a in t.artists],
                "primary_artist_id": t.primary_artist_id,
                "album_name": t.album_name,
                "album_image_url": t.album_image_url,
                "release_date": t.release_date,
                "popularity": t.popularity,
                "added_at": t.added_at,
                "external_url": t.external_url,
            }
            for t in self.tracks
        ]
        df = pd.DataFrame(rows, columns=TRACK_COLUMNS)
        df["added_at"] = pd.to_datetime(df["added_at"], errors="coerce", utc=True)
        return df


@dataclass(frozen=True)
class CapsuleSample:
    uris: tuple[str, ...] = ()

    @property
    def size(self) -> int:
        return len(self.uris)


@dataclass(frozen=True)
class PlaylistRef:
    id: str
    name: str


@dataclass(frozen=True)
class AddResult:
    playlist_id: str
    submitted: tuple[str, ...] = field(default_factory=tuple)
    dropped: int = 0
