from __future__ import annotations

import json
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence, Tuple

from rich.markup import escape
from rich.table import Table

from .auth import SpotifyAuthorizer
from .config import Settings
from .console import console, logger
from .errors import TransportError
from .models import AccessToken, MigrationReport, PlaylistInfo, VideoItem
from .services.spotify import SpotifyService
from .services.youtube import YouTubeService
from .utils import resolve_playlist_id


class Migrator:
    """Copies one YouTube playlist into a freshly created Spotify playlist."""

    def __init__(
        self,
        settings: Settings,
        youtube: YouTubeService,
        authorizer: SpotifyAuthorizer,
        spotify_factory: Optional[Callable[[AccessToken], SpotifyService]] = None,
    ):
        self.settings = settings
        self.youtube = youtube
        self.authorizer = authorizer
        self.spotify_factory = spotify_factory or SpotifyService

    # Source --------------------------------------------------------------
    def prepare(self, url: str) -> Tuple[PlaylistInfo, List[VideoItem]]:
        playlist_id = resolve_playlist_id(url)
        items = self.youtube.get_items(playlist_id, page_size=self.settings.page_size)
        info = self.youtube.get_playlist_info(playlist_id)
        logger.info(f"[cyan]Playlist[/cyan] {escape(info.title)} [cyan]contains {len(items)} videos...[/cyan]")
        return info, items

    # Destination ---------------------------------------------------------
    def connect(self) -> SpotifyService:
        token = self.authorizer.authorize()
        return self.spotify_factory(token)

    def migrate(self, info: PlaylistInfo, items: Sequence[VideoItem], spotify: SpotifyService) -> MigrationReport:
        destination_id = spotify.create_playlist(self.settings.spotify_user_id, info.title)
        report = MigrationReport(source_title=info.title, destination_id=destination_id)

        # Consumed front to back so inserts keep the source playlist order.
        queue: Deque[VideoItem] = deque(items)
        while queue:
            video = queue.popleft()
            track = spotify.search_track(video.title)
            if track is None:
                logger.warning(f"[yellow]No match for:[/yellow] {escape(video.title)}")
                report.missed.append(video)
                continue
            logger.info(f"Adding [bold]{escape(track.name)}[/bold] to playlist {escape(info.title)}")
            try:
                spotify.add_track(destination_id, track.uri)
            except TransportError as err:
                logger.error(f"[red]Append failed:[/red] {escape(str(err))}")
                report.failed_appends.append((video, track, str(err)))
                continue
            report.added.append((video, track))
        return report

    def run(self, url: str) -> MigrationReport:
        info, items = self.prepare(url)
        spotify = self.connect()
        return self.migrate(info, items, spotify)


def write_report(path: str, items: Sequence[VideoItem]) -> None:
    """Write missed videos as newline-delimited JSON, replacing any previous file."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write("\n".join(json.dumps(item.to_record(), ensure_ascii=False) for item in items))
    logger.info(f"[green]Missed tracks written to[/green] {path}")


def print_summary(report: MigrationReport) -> None:
    console.print(
        f"\n[bold]{escape(report.source_title)}[/bold]: "
        f"[green]{len(report.added)} added[/green], "
        f"[yellow]{len(report.missed)} missed[/yellow], "
        f"[red]{len(report.failed_appends)} failed[/red]"
    )
    if report.missed:
        table = Table(title="Missed tracks", show_lines=False)
        table.add_column("#", justify="right")
        table.add_column("Title")
        table.add_column("Video ID")
        for idx, video in enumerate(report.missed, start=1):
            table.add_row(str(idx), escape(video.title), video.video_id or "")
        console.print(table)
    for video, track, error in report.failed_appends:
        console.print(f"[red]Not added:[/red] {escape(video.title)} -> {track.uri} ({escape(error)})")


__all__ = ["Migrator", "write_report", "print_summary"]
