from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from timecapsule.auth import Credential
from timecapsule.client import CatalogClient


def make_track(n, artist_id="default", added_at="2021-07-01T12:00:00Z"):
    """A playlist item as returned by GET /playlists/{id}/tracks."""
    artists = [] if artist_id is None else [
        {"id": f"a{n}" if artist_id == "default" else artist_id, "name": f"Artist {n}"}
    ]
    return {
        "added_at": added_at,
        "track": {
            "id": f"t{n}",
            "uri": f"spotify:track:t{n}",
            "name": f"Song {n}",
            "artists": artists,
            "album": {
                "name": f"Album {n}",
                "images": [{"url": f"http://img/{n}.jpg"}],
                "release_date": "2020-01-01",
            },
            "popularity": 50,
            "external_urls": {"spotify": f"https://open.spotify.com/track/t{n}"},
        },
    }


def valid_credential():
    return Credential("token", datetime.now(timezone.utc) + timedelta(hours=1))


def expired_credential():
    return Credential("token", datetime(2000, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def mock_sp():
    return MagicMock()


@pytest.fixture
def client(mock_sp):
    return CatalogClient(valid_credential(), sp=mock_sp)


def library_pages(mock_sp, playlists):
    """Wire ``mock_sp`` to serve ``playlists`` (a list of item lists)."""
    hrefs = [f"https://api.spotify.com/v1/playlists/p{i}/tracks" for i in range(len(playlists))]
    mock_sp.current_user_playlists.return_value = {
        "items": [{"id": f"p{i}", "tracks": {"href": h}} for i, h in enumerate(hrefs)],
        "next": None,
    }
    by_id = {f"p{i}": items for i, items in enumerate(playlists)}
    mock_sp.playlist_items.side_effect = lambda pid, **kwargs: {"items": by_id[pid]}
