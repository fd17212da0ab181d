"""Spotify MCP custom exceptions.

Exception Design Principles:
1. Use these custom exceptions only when additional useful context can be provided
2. Handle exceptions as late as possible (the dispatch gateway is the boundary)
3. Split on domain of actionable information:
   - Recoverable by user reconfiguration outside session (ConfigError)
   - Potentially recoverable by LLM action in-session (ValidationError,
     UnknownToolError)
   - Upstream failures reported verbatim (CredentialRenewalError,
     RemoteServiceError)
"""


class SpotifyMCPError(Exception):
    """Base exception for all Spotify MCP errors.

    Provides rich context and actionable suggestions beyond standard exceptions.
    All Spotify MCP custom exceptions inherit from this base class.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] | None = None,  # detailed list of errors (if available)
        suggestions: list[str] | None = None,  # remedial actions
        context: dict | None = None,  # additional detailed context
    ):
        """Initialize SpotifyMCPError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(SpotifyMCPError):
    """Application configuration errors - fatal at startup.

    Missing or empty client credentials, or malformed settings. The server
    must not start serving tool calls when this is raised.
    """

    pass


class ValidationError(SpotifyMCPError):
    """Malformed tool arguments - recoverable by LLM argument correction.

    Raised before any network call when arguments do not match the tool's
    declared shape, or break a cross-field rule such as the recommendation
    seed count.
    """

    pass


class CredentialRenewalError(SpotifyMCPError):
    """Exchanging the refresh token for an access token failed.

    Carries the upstream HTTP status (None for network failures) and the raw
    response body.
    """

    def __init__(self, message: str, *, status: int | None = None, body: str = ""):
        super().__init__(
            message,
            errors=[body] if body else [],
            suggestions=[
                "Check SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and SPOTIFY_REFRESH_TOKEN",
                "Generate a new refresh token with spotify-mcp-auth",
            ],
            context={"status": status},
        )
        self.status = status
        self.body = body


class RemoteServiceError(SpotifyMCPError):
    """Non-2xx response from a Spotify Web API resource endpoint."""

    def __init__(self, status: int, status_text: str, body: str):
        super().__init__(
            f"Spotify API error: {status} {status_text}\n{body}",
            errors=[body] if body else [],
            context={"status": status, "status_text": status_text},
        )
        self.status = status
        self.status_text = status_text
        self.body = body


class UnknownToolError(SpotifyMCPError):
    """Tool name not present in the registry."""

    def __init__(self, name: str, known: list[str] | None = None):
        super().__init__(
            f"Unknown tool: {name}",
            suggestions=[f"Available tools: {', '.join(known)}"] if known else [],
            context={"tool": name},
        )
        self.name = name
