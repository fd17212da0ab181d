"""High-value constants for the Spotify MCP package."""

# Package metadata
PACKAGE_VERSION = "0.1.0"
SERVER_NAME = "spotify-mcp"
USER_AGENT = f"{SERVER_NAME}/{PACKAGE_VERSION}"

# External API contract consts
DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
TOKEN_URL_PATH = "/api/token"
AUTHORIZE_URL_PATH = "/authorize"

# Business logic consts
TOKEN_LIFETIME_SAFETY_FACTOR = 0.9  # treat tokens as expired at 90% of lifetime
MAX_RECOMMENDATION_SEEDS = 5

SEARCH_LIMIT_RANGE = (1, 50)
RECOMMENDATION_LIMIT_RANGE = (1, 100)
PLAYLISTS_LIMIT_RANGE = (1, 50)
PLAYLIST_TRACKS_LIMIT_RANGE = (1, 100)

# Scopes requested by the refresh-token helper
AUTH_SCOPES = (
    "playlist-read-private",
    "playlist-modify-private",
    "playlist-modify-public",
    "user-read-private",
    "user-read-email",
)
DEFAULT_REDIRECT_PORT = 8888
