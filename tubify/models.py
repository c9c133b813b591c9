from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class VideoItem:
    video_id: Optional[str]
    title: str
    position: Optional[int] = None
    raw: Optional[dict] = None

    @classmethod
    def from_api(cls, item: dict) -> "VideoItem":
        snippet = item.get("snippet") or {}
        return cls(
            video_id=(snippet.get("resourceId") or {}).get("videoId"),
            title=snippet.get("title", ""),
            position=snippet.get("position"),
            raw=item,
        )

    def to_record(self) -> dict:
        if self.raw is not None:
            return self.raw
        return {"videoId": self.video_id, "title": self.title, "position": self.position}


@dataclass
class TrackCandidate:
    id: Optional[str]
    name: str
    uri: str
    popularity: Optional[int] = None
    is_playable: Optional[bool] = None
    raw: Optional[dict] = None

    @classmethod
    def from_api(cls, track: dict) -> "TrackCandidate":
        return cls(
            id=track.get("id"),
            name=track.get("name", ""),
            uri=track["uri"],
            popularity=track.get("popularity"),
            is_playable=track.get("is_playable"),
            raw=track,
        )


@dataclass
class AccessToken:
    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_api(cls, payload: dict) -> "AccessToken":
        return cls(
            access_token=payload["access_token"],
            token_type=payload.get("token_type", "Bearer"),
            expires_in=payload.get("expires_in"),
            refresh_token=payload.get("refresh_token"),
            scope=payload.get("scope"),
        )

    def __repr__(self) -> str:
        return f"AccessToken(token_type={self.token_type!r}, scope={self.scope!r})"


@dataclass
class PlaylistInfo:
    id: str
    title: str
    item_count: Optional[int] = None


@dataclass
class MigrationReport:
    source_title: str
    destination_id: Optional[str] = None
    added: List[Tuple[VideoItem, TrackCandidate]] = field(default_factory=list)
    missed: List[VideoItem] = field(default_factory=list)
    failed_appends: List[Tuple[VideoItem, TrackCandidate, str]] = field(default_factory=list)


__all__ = ["VideoItem", "TrackCandidate", "AccessToken", "PlaylistInfo", "MigrationReport"]
