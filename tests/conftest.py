"""Pytest configuration and shared fixtures"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest

from spotify_mcp.auth import CredentialStore
from spotify_mcp.client import SpotifyClient
from spotify_mcp.config import Config
from spotify_mcp.gateway import ToolGateway
from spotify_mcp.operations import PlaylistService

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

API_BASE_URL = "https://api.test/v1"
ACCOUNTS_BASE_URL = "https://accounts.test"
TOKEN_PATH = "/api/token"
START = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeSpotify:
    """In-memory Spotify accounts + Web API served through httpx.MockTransport.

    Routes are keyed by (method, path). Unrouted requests get a 404.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []
        self.token_response(access_token="access-1", expires_in=3600)

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        text: str | None = None,
    ) -> None:
        if text is not None:
            self.routes[(method, path)] = lambda request: httpx.Response(
                status, text=text
            )
        else:
            self.routes[(method, path)] = lambda request: httpx.Response(
                status, json=json
            )

    def add_error(self, method: str, path: str, exc: type[Exception]) -> None:
        def raise_error(request):
            raise exc("connection refused", request=request)

        self.routes[(method, path)] = raise_error

    def token_response(self, status: int = 200, **payload) -> None:
        self.add("POST", TOKEN_PATH, json=payload, status=status)

    def api(self, method: str, path: str, json: Any = None, status: int = 200) -> None:
        self.add(method, f"/v1{path}", json=json, status=status)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": {"status": 404}})
        return route(request)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @property
    def token_calls(self) -> list[httpx.Request]:
        return self.calls(TOKEN_PATH)

    @property
    def api_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != TOKEN_PATH]


def form_body(request: httpx.Request) -> dict[str, list[str]]:
    """Decode an application/x-www-form-urlencoded request body."""
    return parse_qs(request.content.decode())


def make_track(
    name: str = "Dance Monkey",
    artists: tuple[str, ...] = ("Tones and I",),
    track_id: str = "trk1",
    duration_ms: int = 209755,
    popularity: int = 80,
) -> dict:
    """Spotify track object with the fields the formatter reads."""
    return {
        "id": track_id,
        "name": name,
        "uri": f"spotify:track:{track_id}",
        "duration_ms": duration_ms,
        "popularity": popularity,
        "artists": [{"name": artist} for artist in artists],
        "album": {"name": f"{name} (Album)"},
    }


def make_playlist(
    name: str = "Road Trip",
    playlist_id: str = "pl1",
    description: str | None = "Songs for the car",
    total: int = 12,
    public: bool = False,
) -> dict:
    return {
        "id": playlist_id,
        "name": name,
        "description": description,
        "public": public,
        "tracks": {"total": total},
        "external_urls": {"spotify": f"https://open.spotify.com/playlist/{playlist_id}"},
    }


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove SPOTIFY_* environment variables and any .env from the working dir."""
    for key in list(os.environ):
        if key.startswith("SPOTIFY_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config():
    """Config with test credentials and fake endpoints"""
    return Config(
        client_id="test-client",
        client_secret="test-secret",
        refresh_token="test-refresh",
        api_base_url=API_BASE_URL,
        accounts_base_url=ACCOUNTS_BASE_URL,
        log_level="DEBUG",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_spotify():
    return FakeSpotify()


@pytest.fixture
def http_client(fake_spotify):
    """httpx client whose transport is the fake Spotify"""
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_spotify.handler))


@pytest.fixture
def store(config, http_client, clock):
    return CredentialStore(config, http_client, clock=clock)


@pytest.fixture
def client(config, store, http_client):
    return SpotifyClient(config, token_provider=store, http_client=http_client)


@pytest.fixture
def service(client):
    return PlaylistService(client)


@pytest.fixture
def gateway(service):
    return ToolGateway(service)
