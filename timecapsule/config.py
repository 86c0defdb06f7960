"""
Configuration module for timecapsule.

All environment variables and configuration constants are defined here.
Values can be overridden in a ``.env`` file at the project root (source
checkout) or in the working directory.
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env file early so environment variables are available
_env_path = PROJECT_ROOT / ".env"
if not _env_path.exists():
    _env_path = find_dotenv(usecwd=True)
if _env_path:
    load_dotenv(_env_path)

# ============================================================================
# TIME CAPSULE
# ============================================================================

DEFAULT_YEARS = "2019,2020,2021,2022"
MAX_SONG_LIMIT = 100

# ============================================================================
# RECOMMENDATIONS
# ============================================================================

GENRES = (
    "classical",
    "hip-hop",
    "chill",
    "alternative",
    "disco",
    "afro-beat",
)
MAX_GENRES = 3
MAX_TOTAL_SEEDS = 5  # Spotify rejects more than 5 seeds per request
RECOMMENDATION_LIMIT = 20

# ============================================================================
# SPOTIFY API
# ============================================================================

PLAYLIST_PAGE_LIMIT = 50
MAX_TRACKS_PER_CALL = 100
SPOTIFY_API_DELAY = float(os.environ.get("SPOTIFY_API_DELAY", "0.0"))
SCOPES = (
    "playlist-read-collaborative",
    "playlist-modify-public",
    "playlist-read-private",
    "playlist-modify-private",
)

CAPSULE_DESCRIPTION = "Time capsule playlist created by Spotify Time Capsule."
RECOMMENDATION_DESCRIPTION = "Playlist created from Spotify Time Capsule suggestions."

# ============================================================================
# COLLABORATORS, PATHS AND LOGGING
# ============================================================================

COUNTER_BASE_URL = os.environ.get("COUNTER_BASE_URL", "http://localhost:8080")


def default_data_dir(root: Path = PROJECT_ROOT) -> Path:
    """``data/`` inside a source checkout, ``~/.timecapsule`` for an installed package."""
    if (root / "pyproject.toml").exists():
        return root / "data"
    return Path.home() / ".timecapsule"


DATA_DIR = Path(os.environ.get("TIMECAPSULE_DATA_DIR") or default_data_dir())
LOG_LEVEL = os.environ.get("TIMECAPSULE_LOG_LEVEL", "INFO")


def load_years(raw: str | None = None) -> list[int]:
    """
    Parse the configured capsule years.

    Args:
        raw: Comma separated years; defaults to ``TIMECAPSULE_YEARS`` or 2019-2022

    Returns:
        Sorted list of unique years

    Raises:
        ConfigurationError: If a value isn't a year or nothing is configured
    """
    if raw is None:
        raw = os.environ.get("TIMECAPSULE_YEARS", DEFAULT_YEARS)
    years = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            years.add(int(part))
        except ValueError:
            raise ConfigurationError(f"Invalid year in TIMECAPSULE_YEARS: {part!r}") from None
    if not years:
        raise ConfigurationError("TIMECAPSULE_YEARS is empty")
    return sorted(years)
