"""
Playlist session: the steps from naming a playlist to filling it.

    IDLE --choose_name--> NAME_CHOSEN --create--> PLAYLIST_CREATED --add--> SONGS_ADDED

Choosing an empty name returns to IDLE. After songs are added the session
is finished; start a new one for another playlist.
"""

from __future__ import annotations

import html
from enum import Enum
from typing import Optional, Sequence

from .counter import PlaylistCounter
from .errors import InvalidTransition
from .models import AddResult, PlaylistRef
from .playlists import PlaylistMaterializer


class SessionState(str, Enum):
    IDLE = "idle"
    NAME_CHOSEN = "name_chosen"
    PLAYLIST_CREATED = "playlist_created"
    SONGS_ADDED = "songs_added"


class PlaylistSession:
    def __init__(
        self,
        materializer: PlaylistMaterializer,
        description: str,
        counter: Optional[PlaylistCounter] = None,
    ):
        self.materializer = materializer
        self.description = description
        self.counter = counter
        self.state = SessionState.IDLE
        self.name = ""
        self.playlist: Optional[PlaylistRef] = None
        self.created_count: Optional[int] = None

    @property
    def can_create(self) -> bool:
        return self.state is SessionState.NAME_CHOSEN

    @property
    def can_add(self) -> bool:
        return self.state is SessionState.PLAYLIST_CREATED

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransition(f"Not allowed in state {self.state.value} (needs {allowed})")

    def choose_name(self, name: str) -> SessionState:
        self._require(SessionState.IDLE, SessionState.NAME_CHOSEN)
        self.name = html.escape((name or "").strip())
        self.state = SessionState.NAME_CHOSEN if self.name else SessionState.IDLE
        return self.state

    def create(self, owner_id: str) -> PlaylistRef:
        """
        Create the playlist, then record it with the counter service.

        The counter call happens only after creation succeeds and its
        failure does not affect the session.
        """
        self._require(SessionState.NAME_CHOSEN)
        self.playlist = self.materializer.create_playlist(owner_id, self.name, self.description)
        self.state = SessionState.PLAYLIST_CREATED
        if self.counter is not None:
            self.created_count = self.counter.record(self.playlist.id)
        return self.playlist

    def add(self, uris: Sequence[str]) -> AddResult:
        self._require(SessionState.PLAYLIST_CREATED)
        if not uris:
            raise InvalidTransition("No songs to add")
        result = self.materializer.add_tracks(self.playlist.id, list(uris))
        self.state = SessionState.SONGS_ADDED
        return result
