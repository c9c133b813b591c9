from __future__ import annotations

from typing import List, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import DEFAULT_PAGE_SIZE
from ..console import logger
from ..errors import PlaylistNotFound, TransportError
from ..models import PlaylistInfo, VideoItem


def build_client(api_key: str):
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


def _execute(request, what: str) -> dict:
    try:
        return request.execute()
    except HttpError as err:
        status = getattr(err.resp, "status", None)
        raise TransportError(f"YouTube {what} failed (HTTP {status}): {err}") from err
    except (httplib2.HttpLib2Error, OSError) as err:
        raise TransportError(f"YouTube {what} failed: {err}") from err


class YouTubeService:
    def __init__(self, api_key: Optional[str] = None, client=None):
        if client is None:
            if not api_key:
                raise ValueError("YouTubeService needs an API key or a client")
            client = build_client(api_key)
        self.client = client

    def get_playlist_info(self, playlist_id: str) -> PlaylistInfo:
        request = self.client.playlists().list(part="snippet,contentDetails", id=playlist_id)
        response = _execute(request, "playlist lookup")
        items = response.get("items", [])
        if not items:
            raise PlaylistNotFound(f"YouTube playlist {playlist_id} not found or not public")
        first = items[0]
        return PlaylistInfo(
            id=first.get("id", playlist_id),
            title=first["snippet"]["title"],
            item_count=(first.get("contentDetails") or {}).get("itemCount"),
        )

    def get_items(self, playlist_id: str, page_size: int = DEFAULT_PAGE_SIZE) -> List[VideoItem]:
        """Fetch every playlist item, following nextPageToken until it runs out."""
        items: List[VideoItem] = []
        page_token: Optional[str] = None
        page = 0
        while True:
            params = {"part": "snippet", "playlistId": playlist_id, "maxResults": page_size}
            if page_token:
                params["pageToken"] = page_token
            response = _execute(self.client.playlistItems().list(**params), "playlist items")
            page += 1
            batch = [VideoItem.from_api(element) for element in response.get("items", [])]
            items.extend(batch)
            logger.debug(f"[cyan]Page {page}:[/cyan] {len(batch)} items")
            page_token = response.get("nextPageToken")
            if not page_token:
                break
        return items


__all__ = ["YouTubeService", "build_client"]
