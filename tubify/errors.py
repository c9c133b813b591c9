from __future__ import annotations


class TubifyError(Exception):
    """Base error for a migration run."""


class ConfigError(TubifyError):
    """Required configuration is missing or malformed."""


class InvalidPlaylistUrl(TubifyError):
    def __init__(self, url: str):
        super().__init__(
            f"Invalid playlist url {url!r} - must have format "
            "https://www.youtube.com/playlist?list=<id>"
        )
        self.url = url


class PlaylistNotFound(TubifyError):
    """The playlist metadata request returned no items."""


class TransportError(TubifyError):
    """Network or HTTP failure talking to a remote API."""


class AuthorizationError(TubifyError):
    """The Spotify authorization flow did not yield an access token."""


class AuthorizationDenied(AuthorizationError):
    def __init__(self, reason: str):
        super().__init__(f"Spotify authorization denied: {reason}")
        self.reason = reason


class UnknownAuthorizationError(AuthorizationError):
    def __init__(self) -> None:
        super().__init__("Unknown error occurred getting Spotify token")


__all__ = [
    "TubifyError",
    "ConfigError",
    "InvalidPlaylistUrl",
    "PlaylistNotFound",
    "TransportError",
    "AuthorizationError",
    "AuthorizationDenied",
    "UnknownAuthorizationError",
]
