"""Tests for the tool registry"""

import mcp.types as types
import pytest

from spotify_mcp.registry import TOOL_DEFINITIONS, TOOLS_BY_NAME, get_tool, list_tools

EXPECTED_TOOLS = [
    "spotify_search_tracks",
    "spotify_get_recommendations",
    "spotify_create_playlist",
    "spotify_add_tracks_to_playlist",
    "spotify_get_user_playlists",
    "spotify_get_playlist_tracks",
]


class TestRegistry:
    def test_tools_listed_in_order(self):
        assert [tool.name for tool in list_tools()] == EXPECTED_TOOLS

    def test_descriptors_are_mcp_tools(self):
        for tool in list_tools():
            assert isinstance(tool, types.Tool)
            assert tool.description
            assert tool.inputSchema["type"] == "object"

    def test_handler_table_matches_descriptors(self):
        """Test that every advertised tool is dispatchable and vice versa"""
        assert list(TOOLS_BY_NAME) == [tool.name for tool in list_tools()]
        assert all(callable(d.handler) for d in TOOL_DEFINITIONS)

    def test_list_tools_is_repeatable(self):
        assert list_tools() == list_tools()

    def test_get_tool(self):
        assert get_tool("spotify_search_tracks") is TOOL_DEFINITIONS[0]
        assert get_tool("missing") is None

    @pytest.mark.parametrize(
        "name,required",
        [
            ("spotify_search_tracks", ["query"]),
            ("spotify_get_recommendations", []),
            ("spotify_create_playlist", ["name"]),
            ("spotify_add_tracks_to_playlist", ["playlist_id", "track_uris"]),
            ("spotify_get_user_playlists", []),
            ("spotify_get_playlist_tracks", ["playlist_id"]),
        ],
    )
    def test_required_parameters(self, name, required):
        schema = get_tool(name).input_schema()
        assert sorted(schema.get("required", [])) == sorted(required)

    @pytest.mark.parametrize(
        "name,field,default",
        [
            ("spotify_search_tracks", "limit", 10),
            ("spotify_get_recommendations", "limit", 20),
            ("spotify_create_playlist", "description", ""),
            ("spotify_create_playlist", "public", False),
            ("spotify_get_user_playlists", "limit", 20),
            ("spotify_get_user_playlists", "offset", 0),
            ("spotify_get_playlist_tracks", "limit", 50),
            ("spotify_get_playlist_tracks", "offset", 0),
        ],
    )
    def test_defaults(self, name, field, default):
        schema = get_tool(name).input_schema()
        assert schema["properties"][field]["default"] == default

    def test_recommendation_schema_properties(self):
        properties = get_tool("spotify_get_recommendations").input_schema()["properties"]

        assert set(properties) == {
            "seed_tracks",
            "seed_artists",
            "seed_genres",
            "limit",
            "target_energy",
            "target_danceability",
            "target_tempo",
        }
        assert properties["seed_tracks"]["type"] == "array"
        assert properties["seed_tracks"]["items"] == {"type": "string"}
