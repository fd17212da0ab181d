"""One-time helper that obtains a refresh token via authorization code + PKCE.

Run ``spotify-mcp-auth`` with SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET set,
approve access in the browser, and copy the printed environment variables
into the MCP server configuration.
"""

import asyncio
import base64
import hashlib
import logging
import secrets
import sys
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

import httpx
from pydantic import Field, computed_field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth import basic_auth_header
from .config import ENV_PREFIX, setup_logging
from .consts import (
    AUTH_SCOPES,
    AUTHORIZE_URL_PATH,
    DEFAULT_ACCOUNTS_BASE_URL,
    DEFAULT_REDIRECT_PORT,
    TOKEN_URL_PATH,
    USER_AGENT,
)
from .exceptions import CredentialRenewalError

logger = logging.getLogger("spotify-mcp.oauth")


class AuthSettings(BaseSettings):
    """Settings for the authorization helper; no refresh token needed yet."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, env_file=".env", case_sensitive=False, extra="ignore"
    )

    client_id: str = Field(..., min_length=1, repr=False)
    client_secret: str = Field(..., min_length=1, repr=False)
    accounts_base_url: str = Field(default=DEFAULT_ACCOUNTS_BASE_URL)
    redirect_port: int = Field(default=DEFAULT_REDIRECT_PORT, gt=0, lt=65536)

    @computed_field
    @property
    def redirect_uri(self) -> str:
        """Callback URL; must be registered in the Spotify app settings."""
        return f"http://127.0.0.1:{self.redirect_port}/callback"


def generate_pkce_pair() -> tuple[str, str]:
    """Create a PKCE code verifier and its S256 challenge."""
    verifier = secrets.token_urlsafe(64)
    challenge = pkce_challenge(verifier)
    return verifier, challenge


def pkce_challenge(verifier: str) -> str:
    """S256 code challenge: unpadded base64url of the verifier's SHA-256."""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def build_authorize_url(
    settings: AuthSettings,
    code_challenge: str,
    state: str,
    scopes: tuple[str, ...] = AUTH_SCOPES,
) -> str:
    """URL of the consent page the user must visit."""
    params = {
        "client_id": settings.client_id,
        "response_type": "code",
        "redirect_uri": settings.redirect_uri,
        "code_challenge_method": "S256",
        "code_challenge": code_challenge,
        "state": state,
        "scope": " ".join(scopes),
    }
    return f"{settings.accounts_base_url}{AUTHORIZE_URL_PATH}?{urlencode(params)}"


async def exchange_code(
    settings: AuthSettings,
    code: str,
    code_verifier: str,
    http_client: httpx.AsyncClient,
) -> dict[str, Any]:
    """Exchange an authorization code for access and refresh tokens.

    Raises:
        CredentialRenewalError: If the token endpoint rejects the exchange.
    """
    try:
        response = await http_client.post(
            f"{settings.accounts_base_url}{TOKEN_URL_PATH}",
            headers={
                "Authorization": basic_auth_header(
                    settings.client_id, settings.client_secret
                )
            },
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": settings.redirect_uri,
                "client_id": settings.client_id,
                "code_verifier": code_verifier,
            },
        )
    except httpx.RequestError as e:
        raise CredentialRenewalError(f"Token exchange failed: {e}") from e

    if not response.is_success:
        raise CredentialRenewalError(
            f"Token exchange failed: {response.status_code} {response.reason_phrase}",
            status=response.status_code,
            body=response.text,
        )

    try:
        tokens = response.json()
    except ValueError as e:
        raise CredentialRenewalError(
            "Token endpoint returned a malformed response",
            status=response.status_code,
            body=response.text,
        ) from e

    if not isinstance(tokens, dict) or not tokens.get("refresh_token"):
        raise CredentialRenewalError(
            "Token endpoint returned no refresh_token",
            status=response.status_code,
            body=response.text,
        )
    return tokens


class CallbackHandler(BaseHTTPRequestHandler):
    """Captures the authorization callback into the server's ``result``."""

    def do_GET(self):
        parsed = urlparse(self.path)
        if parsed.path != "/callback":
            self.send_response(404)
            self.end_headers()
            self.wfile.write(b"Not Found")
            return

        params = {key: values[0] for key, values in parse_qs(parsed.query).items()}
        self.server.result = params

        ok = "code" in params and "error" not in params
        self.send_response(200 if ok else 400)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.end_headers()
        message = (
            "Authorization complete. You can close this tab and return to the terminal."
            if ok
            else f"Authorization failed: {params.get('error', 'no code received')}"
        )
        self.wfile.write(message.encode("utf-8"))

    def log_message(self, format, *args):
        logger.debug("callback: " + format % args)


def wait_for_callback(port: int, expected_state: str) -> str:
    """Block until the browser is redirected back, and return the code.

    Raises:
        CredentialRenewalError: If the user denied access or state mismatches.
    """
    server = HTTPServer(("127.0.0.1", port), CallbackHandler)
    server.result = None
    try:
        while server.result is None:
            server.handle_request()
    finally:
        server.server_close()

    result = server.result
    if "error" in result:
        raise CredentialRenewalError(f"Authorization failed: {result['error']}")
    if result.get("state") != expected_state:
        raise CredentialRenewalError("Authorization failed: state mismatch")
    if not result.get("code"):
        raise CredentialRenewalError("Authorization failed: no code received")
    return result["code"]


def format_env(settings: AuthSettings, refresh_token: str) -> str:
    """Environment variable lines for the MCP server configuration."""
    return "\n".join(
        [
            f"{ENV_PREFIX}CLIENT_ID={settings.client_id}",
            f"{ENV_PREFIX}CLIENT_SECRET={settings.client_secret}",
            f"{ENV_PREFIX}REFRESH_TOKEN={refresh_token}",
        ]
    )


async def _exchange(settings: AuthSettings, code: str, verifier: str) -> dict:
    async with httpx.AsyncClient(headers={"User-Agent": USER_AGENT}) as http_client:
        return await exchange_code(settings, code, verifier, http_client)


def main() -> int:
    """Run the interactive authorization flow."""
    setup_logging()

    try:
        settings = AuthSettings()
    except PydanticValidationError:
        logger.error(
            "SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET must be set to authorize"
        )
        return 1

    verifier, challenge = generate_pkce_pair()
    state = secrets.token_urlsafe(16)
    url = build_authorize_url(settings, challenge, state)

    print(f"Make sure {settings.redirect_uri} is a redirect URI of your Spotify app.")
    print(f"Opening the browser. If it does not open, visit:\n{url}\n")
    webbrowser.open(url)

    try:
        code = wait_for_callback(settings.redirect_port, state)
        tokens = asyncio.run(_exchange(settings, code, verifier))
    except CredentialRenewalError as e:
        logger.error(e.message)
        if e.body:
            logger.error(e.body)
        return 1

    print("Set these environment variables when running the MCP server:\n")
    print(format_env(settings, tokens["refresh_token"]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
