from __future__ import annotations

from typing import Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from ..console import logger
from ..errors import TransportError
from ..models import AccessToken, TrackCandidate


def build_client(token: AccessToken) -> spotipy.Spotify:
    return spotipy.Spotify(auth=token.access_token, retries=0, status_retries=0)


class SpotifyService:
    def __init__(self, token: Optional[AccessToken] = None, client: Optional[spotipy.Spotify] = None):
        if client is None:
            if token is None:
                raise ValueError("SpotifyService needs an access token or a client")
            client = build_client(token)
        self.client = client

    # Playlist management -------------------------------------------------
    def create_playlist(
        self,
        user_id: str,
        name: str,
        public: bool = True,
        description: str = "Migrated from YouTube by Tubify",
    ) -> str:
        try:
            playlist = self.client.user_playlist_create(
                user_id, name, public=public, description=description
            )
        except (SpotifyException, requests.RequestException) as err:
            raise TransportError(f"Could not create Spotify playlist {name!r}: {err}") from err
        logger.info(f"[green]Created Spotify playlist[/green] {name} ({playlist['id']})")
        return playlist["id"]

    def add_track(self, playlist_id: str, uri: str) -> None:
        try:
            self.client.playlist_add_items(playlist_id, [uri])
        except (SpotifyException, requests.RequestException) as err:
            raise TransportError(f"Could not add {uri} to playlist {playlist_id}: {err}") from err

    # Search --------------------------------------------------------------
    def search_track(self, title: str) -> Optional[TrackCandidate]:
        """Return the first track the search yields for ``title``, if any."""
        try:
            results = self.client.search(q=title, type="track")
        except (SpotifyException, requests.RequestException) as err:
            logger.error(f"[red]Spotify search error:[/red] {err}")
            return None
        items = (results or {}).get("tracks", {}).get("items", [])
        if not items:
            return None
        return TrackCandidate.from_api(items[0])


__all__ = ["SpotifyService", "build_client"]
