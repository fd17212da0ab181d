"""Spotify MCP Server Package

A Model Context Protocol (MCP) server exposing Spotify search, recommendation
and playlist operations as tools, with automatic access token renewal.
"""

from .auth import CredentialStore
from .client import SpotifyClient
from .config import Config, load_config
from .consts import PACKAGE_VERSION
from .exceptions import (
    ConfigError,
    CredentialRenewalError,
    RemoteServiceError,
    SpotifyMCPError,
    UnknownToolError,
    ValidationError,
)
from .gateway import ToolGateway
from .models import ToolResponse
from .operations import PlaylistService
from .registry import TOOL_DEFINITIONS, list_tools

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "load_config",
    "list_tools",
    "Config",
    "CredentialStore",
    "SpotifyClient",
    "PlaylistService",
    "ToolGateway",
    "ToolResponse",
    "TOOL_DEFINITIONS",
    "SpotifyMCPError",
    "ConfigError",
    "ValidationError",
    "CredentialRenewalError",
    "RemoteServiceError",
    "UnknownToolError",
]
