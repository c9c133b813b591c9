import socket

import pytest

from tubify.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """
    Keep the developer's real credentials out of the tests.
    """
    for key in [
        "YT_API_KEY",
        "SPOTIFY_CLIENT_ID",
        "SPOTIFY_CLIENT_SECRET",
        "SPOTIFY_USER_ID",
        "SPOTIFY_REDIRECT_URI",
        "TUBIFY_MISSED_TRACKS",
        "TUBIFY_PAGE_SIZE",
    ]:
        monkeypatch.delenv(key, raising=False)


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        youtube_api_key="yt-key",
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_user_id="user-1",
        redirect_uri=f"http://127.0.0.1:{_free_port()}/callback",
        missed_tracks_path=str(tmp_path / "missed-tracks.txt"),
    )
