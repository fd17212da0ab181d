"""Configuration management."""

import logging

from pydantic import Field, computed_field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .consts import (
    AUTHORIZE_URL_PATH,
    DEFAULT_ACCOUNTS_BASE_URL,
    DEFAULT_API_BASE_URL,
    TOKEN_URL_PATH,
)
from .exceptions import ConfigError

ENV_PREFIX = "SPOTIFY_"
CREDENTIAL_FIELDS = ("client_id", "client_secret", "refresh_token")
_CONTAMINATION_CHARS = "\"' \t\r\n"

logger = logging.getLogger("spotify-mcp.config")


class Config(BaseSettings):
    """Process configuration with computed endpoints.

    Read once at startup and immutable afterwards.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    client_id: str = Field(
        ..., min_length=1, repr=False, description="Spotify application client ID"
    )
    client_secret: str = Field(
        ..., min_length=1, repr=False, description="Spotify application client secret"
    )
    refresh_token: str = Field(
        ..., min_length=1, repr=False, description="Long-lived OAuth refresh token"
    )
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL, description="Base URL for the Spotify Web API"
    )
    accounts_base_url: str = Field(
        default=DEFAULT_ACCOUNTS_BASE_URL,
        description="Base URL for the Spotify accounts service",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    @computed_field
    @property
    def token_url(self) -> str:
        """URL for exchanging refresh tokens and authorization codes."""
        return f"{self.accounts_base_url}{TOKEN_URL_PATH}"

    @computed_field
    @property
    def authorize_url(self) -> str:
        """URL of the user authorization page."""
        return f"{self.accounts_base_url}{AUTHORIZE_URL_PATH}"

    def contaminated_fields(self) -> list[str]:
        """Names of credential fields with leading/trailing quotes or whitespace."""
        contaminated = []
        for name in CREDENTIAL_FIELDS:
            value = getattr(self, name)
            if value and (
                value[0] in _CONTAMINATION_CHARS or value[-1] in _CONTAMINATION_CHARS
            ):
                contaminated.append(name)
        return contaminated


def load_config(**overrides) -> Config:
    """Build a Config from the environment, converting failures to ConfigError.

    Args:
        **overrides: Explicit field values taking precedence over the environment.

    Raises:
        ConfigError: If a credential is missing/empty or a setting is invalid.
    """
    try:
        return Config(**overrides)
    except PydanticValidationError as e:
        errors = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            errors.append(f"{ENV_PREFIX}{field.upper()}: {error['msg']}")
        raise ConfigError(
            "Invalid or missing configuration",
            errors=errors,
            suggestions=[
                "Set SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN",
                "Run spotify-mcp-auth to obtain a refresh token",
            ],
        ) from e


def warn_on_contamination(config: Config) -> list[str]:
    """Log a warning for each credential that looks quoted or padded.

    Only field names are logged, never values.

    Returns:
        The contaminated field names.
    """
    contaminated = config.contaminated_fields()
    for name in contaminated:
        logger.warning(
            f"{ENV_PREFIX}{name.upper()} contains quotes or extra whitespace "
            "which may cause authentication issues"
        )
    return contaminated


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application.

    Logs go to stderr; stdout carries the MCP stdio transport.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # Override any existing configuration
    )
    return logging.getLogger("spotify-mcp")
