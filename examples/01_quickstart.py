#!/usr/bin/env python3
"""
Timecapsule Quickstart Example

Before running, set environment variables:
    export SPOTIPY_CLIENT_ID="your_client_id"
    export SPOTIPY_CLIENT_SECRET="your_client_secret"
    export SPOTIPY_REDIRECT_URI="http://127.0.0.1:8888/callback"
"""

from timecapsule import (
    CatalogClient,
    EmptySelection,
    LibraryAggregator,
    build_season_map,
    build_seed,
    credential_from_env,
    fetch_recommendations,
    get_season_range,
    select_window,
)
from timecapsule import config

# Authorize and aggregate your library (first 50 playlists)
client = CatalogClient(credential_from_env(config.DATA_DIR))
snapshot = LibraryAggregator(client, progress=True).aggregate()
print(f"\n📊 Your Library: {len(snapshot):,} tracks, {len(set(snapshot.artist_ids)):,} artists")

# Sample 20 songs you added in summer 2021
season_map = build_season_map(config.load_years())
summer = get_season_range(season_map, 2021, "Summer")
try:
    capsule = select_window(snapshot, summer, 20)
    print(f"\n⏳ Summer 2021 capsule: {capsule.size} songs")
except EmptySelection as e:
    print(f"\n{e.user_message}")

# Recommendations seeded from your library
seed = build_seed(snapshot, ["chill", "alternative"])
if seed:
    for row in fetch_recommendations(client, seed)[:5]:
        print(f"   • {row.name} - {row.artists}")
