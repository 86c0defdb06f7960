import pytest
from spotipy.exceptions import SpotifyException

from conftest import make_track
from timecapsule.errors import FetchFailure
from timecapsule.models import LibrarySnapshot, Track
from timecapsule.recommendations import (
    build_seed,
    fetch_recommendations,
    recommendations_frame,
    select_recommendations,
    validate_genres,
)


@pytest.fixture
def snapshot():
    items = [make_track(1, artist_id=None), make_track(2), make_track(3)]
    return LibrarySnapshot.from_tracks([Track.from_item(i) for i in items])


def test_seed_uses_first_track_and_artist(snapshot):
    seed = build_seed(snapshot, ["chill", "disco"])
    assert seed.track_id == "t1"
    assert seed.artist_ids == ("a2",)
    assert seed.genres == ("chill", "disco")


def test_seed_is_deterministic(snapshot):
    assert build_seed(snapshot, ["chill"]) == build_seed(snapshot, ["chill"])


def test_seed_caps_genres(snapshot):
    seed = build_seed(snapshot, ["chill", "disco", "classical", "hip-hop"])
    assert seed.genres == ("chill", "disco", "classical")
    assert seed.total <= 5


def test_seed_total_capped_even_with_larger_max(snapshot):
    seed = build_seed(snapshot, ["chill", "disco", "classical", "hip-hop", "alternative"], max_genres=5)
    assert seed.total == 5
    assert len(seed.genres) == 3


@pytest.mark.parametrize("max_genres", [0, -1])
def test_seed_rejects_cap_without_genres(snapshot, max_genres):
    with pytest.raises(ValueError):
        build_seed(snapshot, ["chill"], max_genres=max_genres)


@pytest.mark.parametrize("genres", [[], [""]])
def test_seed_requires_genres(snapshot, genres):
    assert build_seed(snapshot, genres) is None


def test_seed_requires_songs_and_artists():
    assert build_seed(LibrarySnapshot.empty(), ["chill"]) is None
    no_artists = LibrarySnapshot.from_tracks([Track.from_item(make_track(1, artist_id=None))])
    assert build_seed(no_artists, ["chill"]) is None


def test_seed_query(snapshot):
    assert build_seed(snapshot, ["chill"]).as_query() == {
        "seed_artists": ["a2"],
        "seed_genres": ["chill"],
        "seed_tracks": ["t1"],
    }


def test_validate_genres():
    assert validate_genres(["Chill", "disco", "chill"]) == ["chill", "disco"]
    with pytest.raises(ValueError):
        validate_genres(["polka"])


def test_fetch_recommendations(client, mock_sp, snapshot):
    recs = [make_track(n)["track"] for n in (10, 11)]
    recs[1]["artists"].append({"id": "b", "name": "Guest"})
    mock_sp.recommendations.return_value = {"tracks": recs}

    rows = fetch_recommendations(client, build_seed(snapshot, ["chill"]))

    mock_sp.recommendations.assert_called_once_with(
        seed_artists=["a2"], seed_genres=["chill"], seed_tracks=["t1"], limit=20
    )
    assert [r.id for r in rows] == [1, 2]
    assert rows[1].artists == "Artist 11, Guest"
    assert rows[0].album == "Album 10"
    assert rows[0].image == "http://img/10.jpg"
    assert rows[0].song_link == "https://open.spotify.com/track/t10"

    assert select_recommendations(rows, [2]) == ["spotify:track:t11"]
    df = recommendations_frame(rows)
    assert list(df["name"]) == ["Song 10", "Song 11"]


def test_fetch_recommendations_failure(client, mock_sp, snapshot):
    mock_sp.recommendations.side_effect = SpotifyException(404, -1, "gone")
    with pytest.raises(FetchFailure) as ctx:
        fetch_recommendations(client, build_seed(snapshot, ["chill"]))
    assert ctx.value.stage == "recommendations"
    assert ctx.value.user_message == "Failed to load recommendations from Spotify."
