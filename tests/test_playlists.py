import pytest
import requests
from spotipy.exceptions import SpotifyException

from conftest import expired_credential
from timecapsule.client import CatalogClient
from timecapsule.errors import AddFailure, CreateFailure, CredentialError, FetchFailure
from timecapsule.playlists import PlaylistMaterializer


def test_create_playlist(client, mock_sp):
    mock_sp.user_playlist_create.return_value = {"id": "pl1", "name": "Summer '21"}
    ref = PlaylistMaterializer(client).create_playlist("u1", "Summer '21", "desc")

    assert (ref.id, ref.name) == ("pl1", "Summer '21")
    mock_sp.user_playlist_create.assert_called_once_with("u1", "Summer '21", description="desc")


def test_create_twice_makes_two_playlists(client, mock_sp):
    mock_sp.user_playlist_create.side_effect = [{"id": "pl1"}, {"id": "pl2"}]
    materializer = PlaylistMaterializer(client)
    first = materializer.create_playlist("u1", "Same", "d")
    second = materializer.create_playlist("u1", "Same", "d")
    assert first.id != second.id


def test_create_failure(client, mock_sp):
    mock_sp.user_playlist_create.side_effect = SpotifyException(403, -1, "forbidden")
    with pytest.raises(CreateFailure):
        PlaylistMaterializer(client).create_playlist("u1", "x", "d")


def test_add_tracks_truncates_to_100(client, mock_sp):
    uris = [f"spotify:track:{i}" for i in range(150)]
    result = PlaylistMaterializer(client).add_tracks("pl1", uris)

    mock_sp.playlist_add_items.assert_called_once_with("pl1", uris[:100], position=0)
    assert result.submitted == tuple(uris[:100])
    assert result.dropped == 50


def test_add_tracks_custom_cap(client, mock_sp):
    result = PlaylistMaterializer(client).add_tracks("pl1", ["a", "b", "c"], max_per_call=2)
    mock_sp.playlist_add_items.assert_called_once_with("pl1", ["a", "b"], position=0)
    assert result.dropped == 1


def test_add_failure_is_not_retried(client, mock_sp):
    mock_sp.playlist_add_items.side_effect = requests.exceptions.ConnectionError("down")
    with pytest.raises(AddFailure):
        PlaylistMaterializer(client).add_tracks("pl1", ["a"])
    assert mock_sp.playlist_add_items.call_count == 1


def test_current_user_id(client, mock_sp):
    mock_sp.current_user.return_value = {"id": "u1"}
    assert PlaylistMaterializer(client).current_user_id() == "u1"

    mock_sp.current_user.side_effect = SpotifyException(401, -1, "no")
    with pytest.raises(FetchFailure) as ctx:
        PlaylistMaterializer(client).current_user_id()
    assert ctx.value.stage == "profile"


def test_expired_credential_short_circuits(mock_sp):
    materializer = PlaylistMaterializer(CatalogClient(expired_credential(), sp=mock_sp))
    with pytest.raises(CredentialError):
        materializer.create_playlist("u1", "x", "d")
    with pytest.raises(CredentialError):
        materializer.add_tracks("pl1", ["a"])
    mock_sp.user_playlist_create.assert_not_called()
    mock_sp.playlist_add_items.assert_not_called()
