"""
Bearer credentials for the Spotify Web API.

The authorization flow itself is Spotify's; this module only turns its
results into a ``Credential`` the rest of the package can check for expiry.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qsl

from spotipy.oauth2 import SpotifyOAuth

from .config import SCOPES
from .errors import ConfigurationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Credential:
    access_token: str
    expires_at: datetime
    token_type: str = "Bearer"

    @classmethod
    def from_expires_in(cls, access_token: str, expires_in, token_type: str = "Bearer",
                        now: Optional[datetime] = None) -> "Credential":
        now = now or _utcnow()
        return cls(access_token, now + timedelta(seconds=int(expires_in)), token_type)

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        return bool(self.access_token) and (now or _utcnow()) < self.expires_at


def parse_redirect_fragment(fragment: str) -> Optional[Credential]:
    """
    Parse the implicit-grant redirect fragment.

    Args:
        fragment: e.g. ``#access_token=abc&token_type=Bearer&expires_in=3600``

    Returns:
        Credential, or None if the fragment carries no usable token
    """
    if not fragment or not fragment.startswith("#"):
        return None
    params = dict(parse_qsl(fragment[1:]))
    token = params.get("access_token")
    if not token:
        return None
    try:
        expires_in = int(params.get("expires_in", "3600"))
    except ValueError:
        return None
    return Credential.from_expires_in(token, expires_in, params.get("token_type") or "Bearer")


def credential_from_env(cache_dir: Path) -> Credential:
    """
    Get a credential using SPOTIPY_* environment variables.

    Uses the refresh token if available (headless), otherwise interactive auth.

    Raises:
        ConfigurationError: If client id/secret are missing
    """
    client_id = os.environ.get("SPOTIPY_CLIENT_ID")
    client_secret = os.environ.get("SPOTIPY_CLIENT_SECRET")
    redirect_uri = os.environ.get("SPOTIPY_REDIRECT_URI", "http://127.0.0.1:8888/callback")
    refresh_token = os.environ.get("SPOTIPY_REFRESH_TOKEN")

    if not all([client_id, client_secret]):
        raise ConfigurationError(
            "Missing SPOTIPY_CLIENT_ID or SPOTIPY_CLIENT_SECRET. "
            "Set them in environment variables or .env file."
        )

    cache_dir.mkdir(parents=True, exist_ok=True)
    auth = SpotifyOAuth(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        scope=" ".join(SCOPES),
        cache_path=str(cache_dir / ".cache"),
    )
    if refresh_token:
        token_info = auth.refresh_access_token(refresh_token)
    else:
        token_info = auth.get_access_token(as_dict=True)

    expires_at = token_info.get("expires_at")
    if expires_at:
        return Credential(
            token_info["access_token"],
            datetime.fromtimestamp(int(expires_at), timezone.utc),
            token_info.get("token_type", "Bearer"),
        )
    return Credential.from_expires_in(
        token_info["access_token"],
        token_info.get("expires_in", 3600),
        token_info.get("token_type", "Bearer"),
    )
