"""Spotify client for low-level Web API calls."""

import logging
from typing import Any

import httpx

from .auth import CredentialStore
from .config import Config
from .consts import USER_AGENT
from .exceptions import RemoteServiceError
from .protocols import TokenProvider

logger = logging.getLogger("spotify-mcp.client")


class SpotifyClient:
    """Spotify Web API client with authentication.

    Responsibilities:
    - Provide authenticated JSON GET/POST methods
    - Turn non-2xx responses into RemoteServiceError
    """

    def __init__(
        self,
        config: Config,
        token_provider: TokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize SpotifyClient.

        Args:
            config: Config instance.
            token_provider: Access token provider. If None, creates a CredentialStore.
            http_client: HTTP client. If None, creates a new one.
        """
        self.config = config

        self.http_client = http_client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )

        self.token_provider = token_provider or CredentialStore(
            self.config, self.http_client
        )

        logger.info(f"Spotify client created for {self.config.api_base_url}")

    async def __aenter__(self) -> "SpotifyClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.http_client.aclose()
        logger.debug("HTTP client closed")

    def url(self, path: str) -> str:
        """Absolute API URL for a path such as '/me/playlists'."""
        return f"{self.config.api_base_url}{path}"

    async def get_json(self, path: str, **kwargs) -> Any:
        """Get JSON from an API path with authentication.

        Args:
            path: API path relative to the base URL.
            **kwargs: Additional arguments for httpx.get.

        Returns:
            Parsed JSON data.

        Raises:
            CredentialRenewalError: From the token provider.
            RemoteServiceError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        return await self._request("GET", path, **kwargs)

    async def post_json(self, path: str, **kwargs) -> Any:
        """Post JSON to an API path with authentication.

        Args:
            path: API path relative to the base URL.
            **kwargs: Additional arguments for httpx.post.

        Returns:
            Parsed JSON response data.

        Raises:
            CredentialRenewalError: From the token provider.
            RemoteServiceError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        return await self._request("POST", path, **kwargs)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        token = await self.token_provider.get_valid_token()
        headers["Authorization"] = f"Bearer {token}"

        url = self.url(path)
        logger.debug(f"{method} {url}")
        response = await self.http_client.request(
            method, url, headers=headers, **kwargs
        )
        if not response.is_success:
            logger.warning(f"{method} {url} failed with {response.status_code}")
            raise RemoteServiceError(
                response.status_code, response.reason_phrase, response.text
            )
        logger.debug(f"{method} {url} successful")
        if not response.content:
            return {}
        return response.json()
