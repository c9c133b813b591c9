from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_SCOPE = "playlist-modify-public playlist-modify-private"
DEFAULT_REDIRECT_URI = "http://127.0.0.1:8080/callback"

# YouTube caps playlistItems.list at 50 per page
DEFAULT_PAGE_SIZE = 50
DEFAULT_MISSED_TRACKS_PATH = "missed-tracks.txt"

REQUIRED_VARS = ("YT_API_KEY", "SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET", "SPOTIFY_USER_ID")


@dataclass(frozen=True)
class Settings:
    youtube_api_key: str
    spotify_client_id: str
    spotify_client_secret: str
    spotify_user_id: str
    redirect_uri: str = DEFAULT_REDIRECT_URI
    scope: str = SPOTIFY_SCOPE
    page_size: int = DEFAULT_PAGE_SIZE
    missed_tracks_path: str = DEFAULT_MISSED_TRACKS_PATH

    @property
    def callback_host(self) -> str:
        return urlparse(self.redirect_uri).hostname or "127.0.0.1"

    @property
    def callback_port(self) -> int:
        return urlparse(self.redirect_uri).port or 80


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build the run settings from the environment (and .env, loaded at import)."""
    env = os.environ if environ is None else environ
    missing: List[str] = [name for name in REQUIRED_VARS if not env.get(name, "").strip()]
    if missing:
        raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

    raw_page_size = env.get("TUBIFY_PAGE_SIZE", "").strip()
    try:
        page_size = int(raw_page_size) if raw_page_size else DEFAULT_PAGE_SIZE
    except ValueError as err:
        raise ConfigError(f"TUBIFY_PAGE_SIZE must be an integer, got {raw_page_size!r}") from err
    if not 1 <= page_size <= DEFAULT_PAGE_SIZE:
        raise ConfigError(f"TUBIFY_PAGE_SIZE must be between 1 and {DEFAULT_PAGE_SIZE}")

    return Settings(
        youtube_api_key=env["YT_API_KEY"].strip(),
        spotify_client_id=env["SPOTIFY_CLIENT_ID"].strip(),
        spotify_client_secret=env["SPOTIFY_CLIENT_SECRET"].strip(),
        spotify_user_id=env["SPOTIFY_USER_ID"].strip(),
        redirect_uri=env.get("SPOTIFY_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        page_size=page_size,
        missed_tracks_path=env.get("TUBIFY_MISSED_TRACKS") or DEFAULT_MISSED_TRACKS_PATH,
    )


__all__ = [
    "SPOTIFY_AUTHORIZE_URL",
    "SPOTIFY_TOKEN_URL",
    "SPOTIFY_SCOPE",
    "DEFAULT_REDIRECT_URI",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_MISSED_TRACKS_PATH",
    "Settings",
    "load_settings",
]
