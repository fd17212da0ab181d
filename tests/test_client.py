"""Tests for SpotifyClient"""

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from spotify_mcp.auth import CredentialStore
from spotify_mcp.client import SpotifyClient
from spotify_mcp.consts import USER_AGENT
from spotify_mcp.exceptions import RemoteServiceError


class TestSpotifyClient:
    """Test SpotifyClient HTTP operations

    This class is the authoritative source for HTTP error handling tests.
    Service layers should focus on domain-specific behaviour.
    """

    @pytest.mark.asyncio
    async def test_get_json_success(self, client, fake_spotify):
        """Test successful get_json request with bearer token"""
        fake_spotify.api("GET", "/me", json={"id": "user1"})

        result = await client.get_json("/me")

        assert result == {"id": "user1"}
        request = fake_spotify.calls("/v1/me")[0]
        assert request.headers["Authorization"] == "Bearer access-1"

    @pytest.mark.asyncio
    async def test_get_json_passes_params(self, client, fake_spotify):
        fake_spotify.api("GET", "/search", json={})

        await client.get_json("/search", params={"q": "jazz", "limit": 5})

        request = fake_spotify.calls("/v1/search")[0]
        assert request.url.params["q"] == "jazz"
        assert request.url.params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_post_json_sends_body(self, client, fake_spotify):
        """Test post_json sends JSON body with bearer token"""
        fake_spotify.api("POST", "/playlists/pl1/tracks", json={"snapshot_id": "s"})

        result = await client.post_json(
            "/playlists/pl1/tracks", json={"uris": ["spotify:track:1"]}
        )

        assert result == {"snapshot_id": "s"}
        request = fake_spotify.calls("/v1/playlists/pl1/tracks")[0]
        assert json.loads(request.content) == {"uris": ["spotify:track:1"]}
        assert request.headers["Authorization"] == "Bearer access-1"

    @pytest.mark.asyncio
    async def test_empty_body_returns_empty_dict(self, client, fake_spotify):
        fake_spotify.routes[("POST", "/v1/empty")] = lambda request: httpx.Response(201)

        assert await client.post_json("/empty") == {}

    @pytest.mark.parametrize(
        "status,reason",
        [(400, "Bad Request"), (401, "Unauthorized"), (404, "Not Found"), (429, "Too Many Requests"), (502, "Bad Gateway")],
    )
    @pytest.mark.asyncio
    async def test_non_2xx_raises_remote_service_error(
        self, client, fake_spotify, status, reason
    ):
        """Test HTTP errors become RemoteServiceError with status and body"""
        fake_spotify.api(
            "GET", "/me", json={"error": {"status": status, "message": "nope"}}, status=status
        )

        with pytest.raises(RemoteServiceError) as exc_info:
            await client.get_json("/me")

        error = exc_info.value
        assert error.status == status
        assert error.status_text == reason
        assert '"message": "nope"' in error.body or '"message":"nope"' in error.body
        assert error.message.startswith(f"Spotify API error: {status} {reason}\n")

    @pytest.mark.asyncio
    async def test_401_does_not_touch_credentials(self, client, store, fake_spotify):
        """Test that a downstream 401 leaves the cached token alone"""
        fake_spotify.api("GET", "/me", json={"error": "expired"}, status=401)

        with pytest.raises(RemoteServiceError):
            await client.get_json("/me")
        expires_at = store.expires_at

        with pytest.raises(RemoteServiceError):
            await client.get_json("/me")

        assert store.expires_at == expires_at
        assert len(fake_spotify.token_calls) == 1

    @pytest.mark.asyncio
    async def test_network_error_propagates(self, client, fake_spotify):
        fake_spotify.add_error("GET", "/v1/me", httpx.ConnectError)

        with pytest.raises(httpx.ConnectError):
            await client.get_json("/me")

    @pytest.mark.asyncio
    async def test_uses_token_provider(self, config, http_client, fake_spotify):
        """Test that any TokenProvider can supply the bearer token"""
        provider = Mock()
        provider.get_valid_token = AsyncMock(return_value="injected")
        client = SpotifyClient(config, token_provider=provider, http_client=http_client)
        fake_spotify.api("GET", "/me", json={"id": "u"})

        await client.get_json("/me")

        assert fake_spotify.calls("/v1/me")[0].headers["Authorization"] == "Bearer injected"
        assert fake_spotify.token_calls == []

    def test_defaults(self, config):
        """Test default HTTP client and credential store creation"""
        client = SpotifyClient(config)

        assert isinstance(client.token_provider, CredentialStore)
        assert client.http_client.headers["User-Agent"] == USER_AGENT
        assert client.url("/me") == "https://api.test/v1/me"

    @pytest.mark.asyncio
    async def test_async_context_closes_http_client(self, config):
        async with SpotifyClient(config) as client:
            assert not client.http_client.is_closed

        assert client.http_client.is_closed
