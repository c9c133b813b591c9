import threading
import urllib.parse

import pytest
import requests

from tubify.auth import CallbackListener, SpotifyAuthorizer
from tubify.config import SPOTIFY_TOKEN_URL
from tubify.errors import (
    AuthorizationDenied,
    AuthorizationError,
    UnknownAuthorizationError,
)


class FakeTokenResponse:
    url = SPOTIFY_TOKEN_URL

    def __init__(self, body):
        self.body = body

    def iter_content(self, chunk_size=1):
        yield self.body

    def close(self):
        pass


class FakeSession:
    def __init__(self, body=b'{"access_token": "tok", "token_type": "Bearer", "expires_in": 3600, "scope": "playlist-modify-public"}'):
        self.body = body
        self.posts = []

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        return FakeTokenResponse(self.body)


class BrowserStub:
    """Plays the browser: follows the redirect URI with the given query."""

    def __init__(self, query):
        self.query = query
        self.opened = []
        self.responses = []
        self.thread = None

    def __call__(self, url):
        self.opened.append(url)
        params = urllib.parse.parse_qs(urllib.parse.urlparse(url).query)
        redirect = params["redirect_uri"][0]
        target = f"{redirect}?{self.query}" if self.query else redirect
        self.thread = threading.Thread(target=self._visit, args=(target,), daemon=True)
        self.thread.start()
        return True

    def _visit(self, target):
        session = requests.Session()
        session.trust_env = False
        self.responses.append(session.get(target, timeout=10))


def test_authorize_url_parameters(settings):
    url = SpotifyAuthorizer(settings, session=FakeSession()).authorize_url()

    parsed = urllib.parse.urlparse(url)
    params = urllib.parse.parse_qs(parsed.query)
    assert parsed.netloc == "accounts.spotify.com"
    assert parsed.path == "/authorize"
    assert params["client_id"] == ["client-id"]
    assert params["response_type"] == ["code"]
    assert params["redirect_uri"] == [settings.redirect_uri]
    assert "playlist-modify-public" in params["scope"][0]


def test_authorize_exchanges_received_code(settings):
    session = FakeSession()
    browser = BrowserStub("code=X")

    token = SpotifyAuthorizer(settings, opener=browser, session=session).authorize()
    browser.thread.join(timeout=10)

    assert token.access_token == "tok"
    assert token.expires_in == 3600
    assert browser.responses[0].status_code == 200
    (url, kwargs), = session.posts
    assert url == SPOTIFY_TOKEN_URL
    assert kwargs["data"]["code"] == "X"
    assert kwargs["data"]["grant_type"] == "authorization_code"
    assert kwargs["data"]["redirect_uri"] == settings.redirect_uri
    assert kwargs["auth"] == ("client-id", "client-secret")


def test_exchange_request_uses_basic_auth_and_form_body(settings):
    session = FakeSession()
    SpotifyAuthorizer(settings, session=session).exchange_code("X")

    (url, kwargs), = session.posts
    prepared = requests.Request("POST", url, data=kwargs["data"], auth=kwargs["auth"]).prepare()
    assert prepared.headers["Authorization"] == requests.auth._basic_auth_str("client-id", "client-secret")
    assert prepared.headers["Content-Type"] == "application/x-www-form-urlencoded"
    body = urllib.parse.parse_qs(prepared.body)
    assert body["code"] == ["X"]
    assert body["redirect_uri"] == [settings.redirect_uri]


def test_authorize_denied_skips_token_exchange(settings):
    session = FakeSession()
    browser = BrowserStub("error=access_denied")

    with pytest.raises(AuthorizationDenied) as excinfo:
        SpotifyAuthorizer(settings, opener=browser, session=session).authorize()
    browser.thread.join(timeout=10)

    assert excinfo.value.reason == "access_denied"
    assert session.posts == []
    assert browser.responses[0].status_code == 200


def test_authorize_without_code_or_error(settings):
    session = FakeSession()
    browser = BrowserStub("state=abc")

    with pytest.raises(UnknownAuthorizationError):
        SpotifyAuthorizer(settings, opener=browser, session=session).authorize()
    browser.thread.join(timeout=10)

    assert session.posts == []


def test_listener_is_released_after_use(settings):
    browser = BrowserStub("error=access_denied")
    authorizer = SpotifyAuthorizer(settings, opener=browser, session=FakeSession())
    with pytest.raises(AuthorizationDenied):
        authorizer.authorize()
    browser.thread.join(timeout=10)

    # Port is free again: a second listener can bind it.
    with CallbackListener(settings.callback_host, settings.callback_port):
        pass


def test_exchange_error_body(settings):
    session = FakeSession(body=b'{"error": "invalid_grant", "error_description": "Invalid authorization code"}')

    with pytest.raises(AuthorizationError) as excinfo:
        SpotifyAuthorizer(settings, session=session).exchange_code("stale")

    assert "Invalid authorization code" in str(excinfo.value)


def test_listener_is_released_after_token_exchange(settings):
    browser = BrowserStub("code=X")
    SpotifyAuthorizer(settings, opener=browser, session=FakeSession()).authorize()
    browser.thread.join(timeout=10)

    with CallbackListener(settings.callback_host, settings.callback_port):
        pass


def test_listener_is_released_when_browser_fails(settings):
    def broken_opener(url):
        raise RuntimeError("no browser available")

    session = FakeSession()
    with pytest.raises(RuntimeError):
        SpotifyAuthorizer(settings, opener=broken_opener, session=session).authorize()

    assert session.posts == []
    with CallbackListener(settings.callback_host, settings.callback_port):
        pass
