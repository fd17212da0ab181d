from typing import Literal

import httpx
import mcp.types as types
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import SpotifyMCPError, UnknownToolError

# =============================================================================
# UNIFIED RESPONSE MODEL
# =============================================================================
# Single envelope type returned for every tool dispatch, success or failure


class TextBlock(BaseModel):
    """A single text content block."""

    type: Literal["text"] = "text"
    text: str = Field(..., description="Text payload")


class ToolResponse(BaseModel):
    """Uniform response envelope for every dispatched tool call."""

    content: list[TextBlock] = Field(
        ..., description="Ordered content blocks returned to the agent"
    )
    is_error: bool = Field(False, description="Whether the call failed")

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)

    @classmethod
    def success(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)], is_error=False)

    @classmethod
    def failure(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)], is_error=True)

    @classmethod
    def from_error(cls, error: Exception) -> "ToolResponse":
        """Create an error envelope from any Exception.

        Unknown tools are reported bare; everything else is prefixed with
        "Error: ".

        Args:
            error: Any Exception instance

        Returns:
            ToolResponse with is_error set
        """
        if isinstance(error, UnknownToolError):
            return cls.failure(error.message)
        if isinstance(error, SpotifyMCPError):
            message = error.message
        elif isinstance(error, httpx.RequestError):
            message = f"Network error: {error}"
        else:
            message = str(error) or type(error).__name__
        return cls.failure(f"Error: {message}")

    def to_call_tool_result(self) -> types.CallToolResult:
        """Convert to the MCP wire type."""
        return types.CallToolResult(
            content=[
                types.TextContent(type="text", text=block.text)
                for block in self.content
            ],
            isError=self.is_error,
        )


# =============================================================================
# TOOL ARGUMENT MODELS
# =============================================================================
# One model per tool. The JSON schema of each model is the tool's advertised
# inputSchema, and the same model validates incoming arguments. Limits are
# clamped by the service rather than rejected here.


class ToolArguments(BaseModel):
    """Base class for tool argument models."""

    model_config = ConfigDict(extra="ignore")


class SearchTracksArgs(ToolArguments):
    query: str = Field(
        ...,
        min_length=1,
        description="Search query for tracks (e.g., 'Dance Monkey', 'Dua Lipa', 'Jazz')",
    )
    limit: int = Field(10, description="Number of results to return (1-50, default 10)")


class GetRecommendationsArgs(ToolArguments):
    seed_tracks: list[str] = Field(
        default_factory=list,
        description="Spotify track IDs to use as seeds (up to 5 total seeds)",
    )
    seed_artists: list[str] = Field(
        default_factory=list,
        description="Spotify artist IDs to use as seeds (up to 5 total seeds)",
    )
    seed_genres: list[str] = Field(
        default_factory=list,
        description="Genre names to use as seeds (up to 5 total seeds)",
    )
    limit: int = Field(
        20, description="Number of recommendations to return (1-100, default 20)"
    )
    target_energy: float | None = Field(
        None, ge=0.0, le=1.0, description="Target energy level (0.0 to 1.0)"
    )
    target_danceability: float | None = Field(
        None, ge=0.0, le=1.0, description="Target danceability (0.0 to 1.0)"
    )
    target_tempo: float | None = Field(
        None, ge=0.0, description="Target tempo in BPM"
    )

    @property
    def seed_count(self) -> int:
        return len(self.seed_tracks) + len(self.seed_artists) + len(self.seed_genres)


class CreatePlaylistArgs(ToolArguments):
    name: str = Field(..., min_length=1, description="Name of the playlist to create")
    description: str = Field("", description="Description of the playlist")
    public: bool = Field(
        False,
        description="Whether the playlist should be public (true) or private (false)",
    )


class AddTracksToPlaylistArgs(ToolArguments):
    playlist_id: str = Field(
        ..., min_length=1, description="Spotify ID of the playlist to add tracks to"
    )
    track_uris: list[str] = Field(
        ..., min_length=1, description="Array of Spotify track URIs to add"
    )
    position: int | None = Field(
        None,
        ge=0,
        description="Position to insert tracks (0-based, default is end of playlist)",
    )


class GetUserPlaylistsArgs(ToolArguments):
    limit: int = Field(
        20, description="Number of playlists to return (1-50, default 20)"
    )
    offset: int = Field(
        0, ge=0, description="Index of the first playlist to return (for pagination)"
    )


class GetPlaylistTracksArgs(ToolArguments):
    playlist_id: str = Field(
        ..., min_length=1, description="Spotify ID of the playlist to get tracks from"
    )
    limit: int = Field(
        50, description="Number of tracks to return (1-100, default 50)"
    )
    offset: int = Field(
        0, ge=0, description="Index of the first track to return (for pagination)"
    )
