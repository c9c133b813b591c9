from __future__ import annotations

import urllib.parse

from .errors import InvalidPlaylistUrl


def resolve_playlist_id(url: str) -> str:
    """Return the ``list`` query parameter of a YouTube playlist URL."""
    try:
        parsed = urllib.parse.urlparse(url or "")
    except ValueError as err:
        raise InvalidPlaylistUrl(url) from err
    query = urllib.parse.parse_qs(parsed.query)
    playlist_id = (query.get("list") or [""])[0]
    if not playlist_id:
        raise InvalidPlaylistUrl(url)
    return playlist_id


__all__ = ["resolve_playlist_id"]
