from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from rich.markup import escape

from .auth import SpotifyAuthorizer
from .config import load_settings
from .console import console, input_yesno, logger, set_verbose
from .errors import (
    AuthorizationError,
    ConfigError,
    InvalidPlaylistUrl,
    PlaylistNotFound,
    TransportError,
)
from .migrate import Migrator, print_summary, write_report
from .services.youtube import YouTubeService
from .utils import resolve_playlist_id

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INVALID_URL = 2
EXIT_ENUMERATION = 3
EXIT_AUTHORIZATION = 4
EXIT_DESTINATION = 5
EXIT_CONFIG = 6


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        # Keep exit status 2 for an invalid playlist URL only.
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="tubify",
        description="Copy a YouTube playlist into a new Spotify playlist.",
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="YouTube playlist URL, e.g. https://www.youtube.com/playlist?list=<id>",
    )
    parser.add_argument("--output", help="Where to write the missed tracks (NDJSON)")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Write the missed tracks file without asking",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    if not args.url:
        console.print("[red]Usage:[/red] tubify <URL>")
        return EXIT_USAGE
    try:
        resolve_playlist_id(args.url)
    except InvalidPlaylistUrl as exc:
        logger.error(f"[red]{escape(str(exc))}[/red]")
        return EXIT_INVALID_URL

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error(f"[red]{escape(str(exc))}[/red]")
        return EXIT_CONFIG

    try:
        migrator = Migrator(
            settings,
            YouTubeService(api_key=settings.youtube_api_key),
            SpotifyAuthorizer(settings),
        )
        info, items = migrator.prepare(args.url)
    except (TransportError, PlaylistNotFound, json.JSONDecodeError) as exc:
        logger.error(f"[red]Could not read the YouTube playlist:[/red] {escape(str(exc))}")
        return EXIT_ENUMERATION

    try:
        spotify = migrator.connect()
    except (AuthorizationError, TransportError, json.JSONDecodeError, OSError) as exc:
        logger.error(f"[red]Spotify authorization failed:[/red] {escape(str(exc))}")
        return EXIT_AUTHORIZATION

    try:
        report = migrator.migrate(info, items, spotify)
    except TransportError as exc:
        logger.error(f"[red]Could not create the Spotify playlist:[/red] {escape(str(exc))}")
        return EXIT_DESTINATION

    print_summary(report)

    if report.missed:
        output = args.output or settings.missed_tracks_path
        if args.yes:
            write_report(output, report.missed)
        elif not sys.stdin.isatty():
            logger.info("[yellow]Non-interactive session; missed tracks file not written.[/yellow]")
        elif input_yesno(
            "There were a few tracks that could not be placed. Would you like to write to file for review?"
        ):
            write_report(output, report.missed)

    return EXIT_OK


__all__ = ["main", "build_parser"]
