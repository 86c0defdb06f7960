"""
Timecapsule - Spotify playlists from a season of your past.

Samples songs you added to your playlists during a chosen season and year,
or asks Spotify for recommendations seeded from your library, and saves
either as a new playlist.

Usage:
    from timecapsule import (
        CatalogClient, Credential, LibraryAggregator, build_season_map,
        get_season_range, select_window,
    )

    client = CatalogClient(Credential.from_expires_in(token, 3600))
    snapshot = LibraryAggregator(client).aggregate()
    season_map = build_season_map([2021])
    sample = select_window(snapshot, get_season_range(season_map, 2021, "Summer"), 20)
"""

from .auth import Credential, credential_from_env, parse_redirect_fragment
from .client import CatalogClient
from .counter import PlaylistCounter
from .errors import (
    TimeCapsuleError,
    ConfigurationError,
    CredentialError,
    FetchFailure,
    EmptySelection,
    CreateFailure,
    AddFailure,
    InvalidTransition,
)
from .library import LibraryAggregator, aggregate
from .models import AddResult, Artist, CapsuleSample, LibrarySnapshot, PlaylistRef, Track
from .playlists import PlaylistMaterializer
from .recommendations import (
    Recommendation,
    RecommendationSeed,
    build_seed,
    fetch_recommendations,
    select_recommendations,
)
from .sampling import shuffle, take
from .seasons import Season, SeasonRange, build_season_map, get_season_range
from .selector import clamp_limit, select_window, tracks_in_window
from .session import PlaylistSession, SessionState

__version__ = "0.1.0"

__all__ = [
    # Credentials & client
    "Credential",
    "credential_from_env",
    "parse_redirect_fragment",
    "CatalogClient",
    "PlaylistCounter",
    # Errors
    "TimeCapsuleError",
    "ConfigurationError",
    "CredentialError",
    "FetchFailure",
    "EmptySelection",
    "CreateFailure",
    "AddFailure",
    "InvalidTransition",
    # Data model
    "Artist",
    "Track",
    "LibrarySnapshot",
    "CapsuleSample",
    "PlaylistRef",
    "AddResult",
    # Pipeline
    "Season",
    "SeasonRange",
    "build_season_map",
    "get_season_range",
    "shuffle",
    "take",
    "LibraryAggregator",
    "aggregate",
    "clamp_limit",
    "select_window",
    "tracks_in_window",
    "RecommendationSeed",
    "Recommendation",
    "build_seed",
    "fetch_recommendations",
    "select_recommendations",
    "PlaylistMaterializer",
    "PlaylistSession",
    "SessionState",
]
