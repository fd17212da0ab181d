"""Access token management with refresh-token renewal."""

import asyncio
import base64
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx

from .config import Config
from .consts import TOKEN_LIFETIME_SAFETY_FACTOR
from .exceptions import CredentialRenewalError

logger = logging.getLogger("spotify-mcp.auth")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def basic_auth_header(client_id: str, client_secret: str) -> str:
    """Build the HTTP basic authorization header value for client credentials."""
    raw = f"{client_id}:{client_secret}".encode()
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


class CredentialStore:
    """Access token cache backed by a refresh token.

    Responsibilities:
    - Hand out the cached access token while it is believed valid
    - Exchange the refresh token for a new access token when it is not
    - Shorten each token's lifetime by a safety margin

    The store is created once per process and owns the only mutable
    credential state. Reads of a valid cached token take no lock; renewals
    are serialized so concurrent callers share one exchange.
    """

    def __init__(
        self,
        config: Config,
        http_client: httpx.AsyncClient,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize CredentialStore.

        Args:
            config: Config instance with client credentials and token URL.
            http_client: HTTP client (for token requests only).
            clock: Returns the current UTC time. Defaults to datetime.now(UTC).
        """
        self.config = config
        self.http_client = http_client
        self._clock = clock or _utcnow
        self._refresh_token = config.refresh_token
        self._access_token: str | None = None
        self._expires_at: datetime | None = None
        self._renewal_lock = asyncio.Lock()

    @property
    def expires_at(self) -> datetime | None:
        """Instant after which the cached token is no longer handed out."""
        return self._expires_at

    async def get_valid_token(self) -> str:
        """Get a valid access token, renewing it if needed.

        Returns:
            Valid bearer token string.

        Raises:
            CredentialRenewalError: If the token exchange fails.
        """
        if self._is_valid():
            return self._access_token

        async with self._renewal_lock:
            # another caller may have renewed while we waited
            if not self._is_valid():
                await self._renew()
            return self._access_token

    def _is_valid(self) -> bool:
        """Check if the cached token can still be used."""
        if not self._access_token or self._expires_at is None:
            return False
        return self._clock() < self._expires_at

    async def _renew(self) -> None:
        """Exchange the refresh token for a new access token."""
        logger.debug("Renewing access token")

        try:
            response = await self.http_client.post(
                self.config.token_url,
                headers={
                    "Authorization": basic_auth_header(
                        self.config.client_id, self.config.client_secret
                    )
                },
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                },
            )
        except httpx.RequestError as e:
            logger.error(f"Token request failed: {type(e).__name__}")
            raise CredentialRenewalError(
                f"Failed to get access token: {e}"
            ) from e

        body = response.text
        if not response.is_success:
            logger.error(f"Token endpoint returned {response.status_code}")
            raise CredentialRenewalError(
                f"Failed to get access token: {response.status_code} "
                f"{response.reason_phrase}\n{body}",
                status=response.status_code,
                body=body,
            )

        try:
            token_data = response.json()
            access_token = token_data["access_token"]
            expires_in = float(token_data["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Token endpoint returned a malformed response")
            raise CredentialRenewalError(
                "Token endpoint returned a malformed response",
                status=response.status_code,
                body=body,
            ) from e

        if not isinstance(access_token, str) or not access_token:
            raise CredentialRenewalError(
                "Token endpoint returned an empty access_token",
                status=response.status_code,
                body=body,
            )

        self._access_token = access_token
        self._expires_at = self._clock() + timedelta(
            seconds=expires_in * TOKEN_LIFETIME_SAFETY_FACTOR
        )
        # the accounts service may rotate the refresh token
        rotated = token_data.get("refresh_token")
        if isinstance(rotated, str) and rotated:
            self._refresh_token = rotated

        logger.info(f"Access token renewed, valid until {self._expires_at.isoformat()}")
