from __future__ import annotations

import urllib.parse
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Callable, Dict, List, Optional

import requests

from .config import SPOTIFY_AUTHORIZE_URL, SPOTIFY_TOKEN_URL, Settings
from .console import logger
from .errors import (
    AuthorizationDenied,
    AuthorizationError,
    TransportError,
    UnknownAuthorizationError,
)
from .models import AccessToken
from .transport import collect_json

CALLBACK_PAGE = b"Tubify received the Spotify authorization. You can close this window."


class _CallbackServer(HTTPServer):
    params: Dict[str, List[str]]


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer

    def do_GET(self) -> None:
        query = urllib.parse.urlparse(self.path).query
        self.server.params = urllib.parse.parse_qs(query)
        # The browser gets a 200 whatever the outcome; the caller decides.
        self.send_response(200, "OK")
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(CALLBACK_PAGE)))
        self.end_headers()
        self.wfile.write(CALLBACK_PAGE)

    def log_message(self, format: str, *args) -> None:
        logger.debug(f"[cyan]Callback:[/cyan] {format % args}")


class CallbackListener:
    """Loopback HTTP listener that serves exactly one redirect request."""

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self._server: Optional[_CallbackServer] = None

    def __enter__(self) -> "CallbackListener":
        self._server = _CallbackServer((self.host, self.port), _CallbackHandler)
        self._server.params = {}
        logger.info(f"[cyan]Waiting for Spotify redirect on[/cyan] {self.host}:{self.port}")
        return self

    def __exit__(self, *exc_info) -> None:
        if self._server is not None:
            self._server.server_close()
            self._server = None

    def wait(self) -> Dict[str, str]:
        if self._server is None:
            raise RuntimeError("CallbackListener.wait() called outside its context")
        self._server.timeout = None
        self._server.handle_request()
        return {key: values[0] for key, values in self._server.params.items() if values}


class SpotifyAuthorizer:
    def __init__(
        self,
        settings: Settings,
        opener: Callable[[str], object] = webbrowser.open,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.opener = opener
        self.session = session or requests.Session()

    def authorize_url(self) -> str:
        params = {
            "client_id": self.settings.spotify_client_id,
            "response_type": "code",
            "redirect_uri": self.settings.redirect_uri,
            "scope": self.settings.scope,
        }
        return f"{SPOTIFY_AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"

    def authorize(self) -> AccessToken:
        """Run the authorization-code flow and return the exchanged token."""
        with CallbackListener(self.settings.callback_host, self.settings.callback_port) as listener:
            url = self.authorize_url()
            logger.info("[cyan]Opening browser for Spotify login...[/cyan]")
            logger.debug(f"Authorize URL: {url}")
            self.opener(url)
            params = listener.wait()

        code = params.get("code")
        if code:
            logger.info("[green]Authorization code received.[/green]")
            return self.exchange_code(code)
        error = params.get("error")
        if error:
            raise AuthorizationDenied(error)
        raise UnknownAuthorizationError()

    def exchange_code(self, code: str) -> AccessToken:
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
        }
        try:
            response = self.session.post(
                SPOTIFY_TOKEN_URL,
                data=data,
                auth=(self.settings.spotify_client_id, self.settings.spotify_client_secret),
                stream=True,
            )
        except requests.RequestException as err:
            raise TransportError(f"Spotify token request failed: {err}") from err

        payload = collect_json(response)
        if not isinstance(payload, dict) or not payload.get("access_token"):
            details = payload if not isinstance(payload, dict) else (
                payload.get("error_description") or payload.get("error") or payload
            )
            raise AuthorizationError(f"Spotify token exchange failed: {details}")
        token = AccessToken.from_api(payload)
        logger.info(f"[green]Spotify token obtained.[/green] Scopes: {token.scope or '(unknown)'}")
        return token


__all__ = ["CallbackListener", "SpotifyAuthorizer"]
