"""Tool registry: descriptors and handlers built from one table."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import mcp.types as types

from .models import (
    AddTracksToPlaylistArgs,
    CreatePlaylistArgs,
    GetPlaylistTracksArgs,
    GetRecommendationsArgs,
    GetUserPlaylistsArgs,
    SearchTracksArgs,
    ToolArguments,
)
from .operations import PlaylistService

Handler = Callable[[PlaylistService, Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolDefinition:
    """A callable tool: what is advertised and what runs when it is called."""

    name: str
    description: str
    arguments: type[ToolArguments]
    handler: Handler

    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the accepted arguments."""
        return self.arguments.model_json_schema()

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema(),
        )


async def _search_tracks(service: PlaylistService, args: SearchTracksArgs) -> str:
    return await service.search_tracks(args.query, args.limit)


async def _get_recommendations(
    service: PlaylistService, args: GetRecommendationsArgs
) -> str:
    return await service.get_recommendations(
        seed_tracks=args.seed_tracks,
        seed_artists=args.seed_artists,
        seed_genres=args.seed_genres,
        limit=args.limit,
        target_energy=args.target_energy,
        target_danceability=args.target_danceability,
        target_tempo=args.target_tempo,
    )


async def _create_playlist(service: PlaylistService, args: CreatePlaylistArgs) -> str:
    return await service.create_playlist(args.name, args.description, args.public)


async def _add_tracks_to_playlist(
    service: PlaylistService, args: AddTracksToPlaylistArgs
) -> str:
    return await service.add_tracks_to_playlist(
        args.playlist_id, args.track_uris, args.position
    )


async def _get_user_playlists(
    service: PlaylistService, args: GetUserPlaylistsArgs
) -> str:
    return await service.get_user_playlists(args.limit, args.offset)


async def _get_playlist_tracks(
    service: PlaylistService, args: GetPlaylistTracksArgs
) -> str:
    return await service.get_playlist_tracks(args.playlist_id, args.limit, args.offset)


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="spotify_search_tracks",
        description=(
            "Searches for tracks on Spotify based on a query string. "
            "Use this to find music tracks by name, artist, album, or any combination. "
            "Results include track titles, artists, albums, and Spotify IDs. "
            "Useful for discovering music to add to playlists."
        ),
        arguments=SearchTracksArgs,
        handler=_search_tracks,
    ),
    ToolDefinition(
        name="spotify_get_recommendations",
        description=(
            "Gets track recommendations from Spotify based on seed tracks, artists, or genres. "
            "Use this to discover new music similar to tracks or artists the user likes. "
            "Between 1 and 5 seeds are required in total. "
            "You can specify audio features like tempo, energy, etc. to further refine recommendations."
        ),
        arguments=GetRecommendationsArgs,
        handler=_get_recommendations,
    ),
    ToolDefinition(
        name="spotify_create_playlist",
        description=(
            "Creates a new playlist in the user's Spotify account. "
            "Use this to create themed playlists or organize music collections. "
            "You can specify a name, description, and whether the playlist should be public."
        ),
        arguments=CreatePlaylistArgs,
        handler=_create_playlist,
    ),
    ToolDefinition(
        name="spotify_add_tracks_to_playlist",
        description=(
            "Adds tracks to an existing playlist. "
            "Use this after creating a playlist or to update an existing one. "
            "Requires the playlist ID and an array of track URIs."
        ),
        arguments=AddTracksToPlaylistArgs,
        handler=_add_tracks_to_playlist,
    ),
    ToolDefinition(
        name="spotify_get_user_playlists",
        description=(
            "Gets a list of the user's playlists. "
            "Use this to see what playlists the user already has. "
            "Results include playlist name, description, and ID."
        ),
        arguments=GetUserPlaylistsArgs,
        handler=_get_user_playlists,
    ),
    ToolDefinition(
        name="spotify_get_playlist_tracks",
        description=(
            "Gets the tracks in a specific playlist. "
            "Use this to see what tracks are in a playlist the user mentions. "
            "Results include track titles, artists, and other metadata."
        ),
        arguments=GetPlaylistTracksArgs,
        handler=_get_playlist_tracks,
    ),
)

TOOLS_BY_NAME: dict[str, ToolDefinition] = {
    definition.name: definition for definition in TOOL_DEFINITIONS
}

if len(TOOLS_BY_NAME) != len(TOOL_DEFINITIONS):
    raise RuntimeError("Duplicate tool names in TOOL_DEFINITIONS")


def list_tools() -> list[types.Tool]:
    """All tool descriptors, in registration order."""
    return [definition.to_tool() for definition in TOOL_DEFINITIONS]


def get_tool(name: str) -> ToolDefinition | None:
    return TOOLS_BY_NAME.get(name)
