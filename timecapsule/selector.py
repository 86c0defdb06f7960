"""
Time window selection: sample tracks added during a season.
"""

from __future__ import annotations

import random
from typing import Optional

from .config import MAX_SONG_LIMIT
from .errors import EmptySelection
from .error_handling import get_logger
from .models import CapsuleSample, LibrarySnapshot, Track
from .sampling import shuffle, take
from .seasons import SeasonRange

logger = get_logger(__name__)


def clamp_limit(raw) -> int:
    """
    Turn user input into a song limit.

    Non-numeric or non-positive input gives 0; anything above the
    maximum is capped at 100.
    """
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return 0
    if value != value or value <= 0:  # NaN
        return 0
    return int(min(value, MAX_SONG_LIMIT))


def tracks_in_window(snapshot: LibrarySnapshot, season_range: SeasonRange) -> list[Track]:
    """Tracks added within the range, both ends inclusive, in snapshot order."""
    if not snapshot.tracks:
        return []
    df = snapshot.to_frame()
    mask = df["added_at"].between(season_range.start, season_range.end, inclusive="both")
    return [snapshot.tracks[i] for i in df.index[mask.fillna(False)]]


def select_window(
    snapshot: LibrarySnapshot,
    season_range: SeasonRange,
    limit: int,
    rng: Optional[random.Random] = None,
) -> CapsuleSample:
    """
    Randomly sample up to ``limit`` tracks added during ``season_range``.

    Args:
        snapshot: Library snapshot to select from (always used in full)
        season_range: Inclusive time window
        limit: Number of songs, 0-100
        rng: Random source (for reproducible sampling)

    Returns:
        CapsuleSample with the sampled uris in sampled order

    Raises:
        ValueError: If limit is outside 0-100
        EmptySelection: If no track was added inside the window
    """
    if not 0 <= limit <= MAX_SONG_LIMIT:
        raise ValueError(f"limit must be between 0 and {MAX_SONG_LIMIT}, got {limit}")
    if limit == 0:
        return CapsuleSample()

    matches = tracks_in_window(snapshot, season_range)
    if not matches:
        logger.info(f"No tracks added between {season_range.start} and {season_range.end}")
        raise EmptySelection()

    sampled = take(shuffle(matches, rng), limit)
    logger.info(f"Sampled {len(sampled)} of {len(matches)} tracks in window")
    return CapsuleSample(uris=tuple(t.uri for t in sampled))
