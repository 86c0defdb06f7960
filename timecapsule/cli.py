"""
Timecapsule CLI - build Spotify playlists from a season of your past.
"""

from __future__ import annotations

import argparse
import sys

from . import config
from .auth import Credential, credential_from_env, parse_redirect_fragment
from .client import CatalogClient
from .counter import PlaylistCounter
from .errors import CredentialError
from .error_handling import report_errors, setup_logging
from .frames import capsule_frame, export_table
from .library import LibraryAggregator
from .playlists import PlaylistMaterializer
from .recommendations import (
    build_seed,
    fetch_recommendations,
    recommendations_frame,
    select_recommendations,
    validate_genres,
)
from .seasons import Season, build_season_map, get_season_range
from .selector import clamp_limit, select_window
from .session import PlaylistSession


def _credential(args) -> Credential:
    if args.fragment:
        credential = parse_redirect_fragment(args.fragment)
        if credential is None:
            raise CredentialError("No access token in redirect fragment")
        return credential
    if args.token:
        return Credential.from_expires_in(args.token, args.expires_in)
    return credential_from_env(config.DATA_DIR)


def _materialize(client: CatalogClient, name: str, description: str, uris: list[str]) -> None:
    if not uris:
        print("No songs to add; playlist not created.")
        return
    materializer = PlaylistMaterializer(client)
    session = PlaylistSession(materializer, description, counter=PlaylistCounter())
    session.choose_name(name)
    if not session.can_create:
        raise SystemExit("Error: --name must not be empty")
    playlist = session.create(materializer.current_user_id())
    result = session.add(uris)
    print(f"✅ Added {len(result.submitted)} songs to '{playlist.name}'")
    if result.dropped:
        print(f"⚠️  {result.dropped} songs were left out (at most {config.MAX_TRACKS_PER_CALL} per playlist)")
    if session.created_count:
        print(f"Users have created {session.created_count} playlists since 2022.")


@report_errors
def cmd_seasons(args) -> int:
    season_map = build_season_map(config.load_years())
    for year, seasons in season_map.items():
        if args.year and year != args.year:
            continue
        for season, rng in seasons.items():
            print(f"{season.value:<7} {year}  {rng.start:%Y-%m-%d} → {rng.end:%Y-%m-%d}")
    return 0


@report_errors
def cmd_capsule(args) -> int:
    season_map = build_season_map(config.load_years())
    season_range = get_season_range(season_map, args.year, args.season)
    if season_range is None:
        print("❌ Invalid time range selected.", file=sys.stderr)
        return 1

    limit = clamp_limit(args.limit)
    client = CatalogClient(_credential(args))
    snapshot = LibraryAggregator(client, max_workers=args.workers, progress=True).aggregate()
    sample = select_window(snapshot, season_range, limit)
    print(f"{sample.size} songs found in this timeframe. Maximum {config.MAX_SONG_LIMIT} allowed.")

    if args.out:
        path = export_table(capsule_frame(snapshot, sample), args.out)
        print(f"✅ Exported {sample.size:,} rows to {path}")
    if args.name:
        _materialize(client, args.name, config.CAPSULE_DESCRIPTION, list(sample.uris))
    return 0


@report_errors
def cmd_recommend(args) -> int:
    try:
        genres = validate_genres(args.genre)
    except ValueError as e:
        raise SystemExit(f"Error: {e}")
    if len(genres) > config.MAX_GENRES:
        raise SystemExit(f"Error: choose at most {config.MAX_GENRES} genres")

    client = CatalogClient(_credential(args))
    snapshot = LibraryAggregator(client, max_workers=args.workers, progress=True).aggregate()
    seed = build_seed(snapshot, genres)
    if seed is None:
        print("❌ Your library has no songs to base recommendations on.", file=sys.stderr)
        return 1

    rows = fetch_recommendations(client, seed)
    df = recommendations_frame(rows)
    print(df[["id", "name", "artists", "album", "popularity"]].to_string(index=False))

    if args.out:
        path = export_table(df, args.out)
        print(f"✅ Exported {len(df):,} rows to {path}")
    if args.name:
        uris = select_recommendations(rows, args.pick) if args.pick else [r.uri for r in rows]
        _materialize(client, args.name, config.RECOMMENDATION_DESCRIPTION, uris)
    return 0


@report_errors
def cmd_count(args) -> int:
    count = PlaylistCounter().count()
    if count is None:
        print("Playlist count is unavailable.")
    else:
        print(f"Users have created {count} playlists since 2022.")
    return 0


def _add_auth_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--token", help="Spotify access token (default: SPOTIPY_* OAuth flow)")
    p.add_argument("--expires-in", type=int, default=3600, help="Token lifetime in seconds")
    p.add_argument("--fragment", help="Redirect fragment, e.g. '#access_token=...&expires_in=3600'")
    p.add_argument("--workers", type=int, default=1,
                   help="Concurrent playlist fetches (default: 1, sequential)")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="timecapsule",
        description="Sample songs you added in a past season into a new Spotify playlist.",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Log to stderr as well as the log file")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_seasons = sub.add_parser("seasons", help="Show the date range of each season.")
    ap_seasons.add_argument("--year", type=int)
    ap_seasons.set_defaults(func=cmd_seasons)

    ap_capsule = sub.add_parser("capsule", help="Sample songs from a season.")
    ap_capsule.add_argument("--year", type=int, required=True)
    ap_capsule.add_argument("--season", required=True, choices=[s.value for s in Season],
                            type=str.capitalize)
    ap_capsule.add_argument("--limit", default="20", help="Number of songs (max 100)")
    ap_capsule.add_argument("--name", help="Create a playlist with this name")
    ap_capsule.add_argument("--out", help="Export the sample (.parquet or .csv)")
    _add_auth_args(ap_capsule)
    ap_capsule.set_defaults(func=cmd_capsule)

    ap_rec = sub.add_parser("recommend", help="Recommendations seeded from your library.")
    ap_rec.add_argument("--genre", action="append", required=True, choices=config.GENRES,
                        help=f"Seed genre (repeat, up to {config.MAX_GENRES})")
    ap_rec.add_argument("--pick", type=int, nargs="+", help="Row ids to put in the playlist (default: all)")
    ap_rec.add_argument("--name", help="Create a playlist with this name")
    ap_rec.add_argument("--out", help="Export the recommendations (.parquet or .csv)")
    _add_auth_args(ap_rec)
    ap_rec.set_defaults(func=cmd_recommend)

    ap_count = sub.add_parser("count", help="How many playlists users have created.")
    ap_count.set_defaults(func=cmd_count)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(config.DATA_DIR / "logs", config.LOG_LEVEL, verbose=args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
