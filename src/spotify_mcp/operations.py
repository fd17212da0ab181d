"""Playlist, search and recommendation operations against the Spotify Web API."""

import logging
from urllib.parse import quote

from .client import SpotifyClient
from .consts import (
    MAX_RECOMMENDATION_SEEDS,
    PLAYLIST_TRACKS_LIMIT_RANGE,
    PLAYLISTS_LIMIT_RANGE,
    RECOMMENDATION_LIMIT_RANGE,
    SEARCH_LIMIT_RANGE,
)
from .exceptions import SpotifyMCPError, ValidationError
from .formatting import (
    external_url,
    format_playlist,
    format_track,
    format_track_list,
    pagination_range,
)

logger = logging.getLogger("spotify-mcp.operations")


def clamp(value: int, bounds: tuple[int, int]) -> int:
    """Clamp value into the inclusive range bounds."""
    low, high = bounds
    return max(low, min(value, high))


def _require_text(value: str, field: str) -> None:
    if not value or not value.strip():
        raise ValidationError(
            f"{field} must be a non-empty string", errors=[f"{field}: empty"]
        )


def _require_offset(offset: int) -> None:
    if offset < 0:
        raise ValidationError(
            "offset must be zero or greater", errors=[f"offset: {offset}"]
        )


class PlaylistService:
    """Spotify operations exposed as tools.

    Each method obtains a token through the client before calling Spotify
    and returns caller-facing text.
    """

    def __init__(self, client: SpotifyClient):
        """Initialize PlaylistService.

        Args:
            client: Authenticated SpotifyClient.
        """
        self.client = client

    async def search_tracks(self, query: str, limit: int = 10) -> str:
        """Search the catalogue for tracks.

        Raises:
            ValidationError: If query is empty.
            RemoteServiceError: For HTTP 4xx/5xx responses.
        """
        _require_text(query, "query")
        limit = clamp(limit, SEARCH_LIMIT_RANGE)
        logger.info(f"Searching tracks (limit={limit})")

        data = await self.client.get_json(
            "/search", params={"q": query, "type": "track", "limit": limit}
        )

        items = (data.get("tracks") or {}).get("items") or []
        if not items:
            return "No tracks found matching your query."

        return f'Found {len(items)} tracks matching "{query}":\n\n' + format_track_list(
            items
        )

    async def get_recommendations(
        self,
        seed_tracks: list[str] | None = None,
        seed_artists: list[str] | None = None,
        seed_genres: list[str] | None = None,
        limit: int = 20,
        target_energy: float | None = None,
        target_danceability: float | None = None,
        target_tempo: float | None = None,
    ) -> str:
        """Recommend tracks from up to five combined seeds.

        Raises:
            ValidationError: If there are no seeds or more than five.
            RemoteServiceError: For HTTP 4xx/5xx responses.
        """
        seed_tracks = seed_tracks or []
        seed_artists = seed_artists or []
        seed_genres = seed_genres or []

        seed_count = len(seed_tracks) + len(seed_artists) + len(seed_genres)
        if seed_count == 0:
            raise ValidationError(
                "At least one seed track, artist, or genre is required",
                suggestions=["Use spotify_search_tracks to find track IDs to seed with"],
            )
        if seed_count > MAX_RECOMMENDATION_SEEDS:
            raise ValidationError(
                f"You can only use a total of {MAX_RECOMMENDATION_SEEDS} seeds "
                "(tracks, artists, and genres combined)",
                errors=[f"{seed_count} seeds given"],
            )

        params: dict[str, str | int | float] = {
            "limit": clamp(limit, RECOMMENDATION_LIMIT_RANGE)
        }
        if seed_tracks:
            params["seed_tracks"] = ",".join(seed_tracks)
        if seed_artists:
            params["seed_artists"] = ",".join(seed_artists)
        if seed_genres:
            params["seed_genres"] = ",".join(seed_genres)
        if target_energy is not None:
            params["target_energy"] = target_energy
        if target_danceability is not None:
            params["target_danceability"] = target_danceability
        if target_tempo is not None:
            params["target_tempo"] = target_tempo

        logger.info(f"Getting recommendations from {seed_count} seeds")
        data = await self.client.get_json("/recommendations", params=params)

        tracks = data.get("tracks") or []
        if not tracks:
            return "No recommendations found with your criteria."

        seed_info = ""
        if seed_tracks:
            seed_info += f"Track Seeds: {', '.join(seed_tracks)}\n"
        if seed_artists:
            seed_info += f"Artist Seeds: {', '.join(seed_artists)}\n"
        if seed_genres:
            seed_info += f"Genre Seeds: {', '.join(seed_genres)}\n"

        return f"Recommendations based on:\n{seed_info}\n" + format_track_list(tracks)

    async def create_playlist(
        self, name: str, description: str = "", public: bool = False
    ) -> str:
        """Create a playlist owned by the current user.

        Raises:
            ValidationError: If name is empty.
            RemoteServiceError: For HTTP 4xx/5xx responses.
            SpotifyMCPError: If the user profile carries no id.
        """
        _require_text(name, "name")

        user = await self.client.get_json("/me")
        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise SpotifyMCPError(
                "Spotify user profile has no user id; cannot create playlist",
                context={"path": "/me"},
            )
        logger.info("Creating playlist for current user")

        data = await self.client.post_json(
            f"/users/{quote(user_id, safe='')}/playlists",
            json={"name": name, "description": description, "public": public},
        )

        return (
            f'Successfully created playlist "{name}"!\n'
            f"Playlist ID: {data.get('id', '')}\n"
            f"Playlist URL: {external_url(data)}\n"
            "Now you can add tracks to this playlist using the "
            "spotify_add_tracks_to_playlist tool."
        )

    async def add_tracks_to_playlist(
        self, playlist_id: str, track_uris: list[str], position: int | None = None
    ) -> str:
        """Add tracks to a playlist, at the end unless position is given.

        Raises:
            ValidationError: If playlist_id or track_uris is empty.
            RemoteServiceError: For HTTP 4xx/5xx responses.
        """
        _require_text(playlist_id, "playlist_id")
        if not track_uris:
            raise ValidationError(
                "track_uris must contain at least one track URI",
                errors=["track_uris: empty"],
            )

        body: dict = {"uris": list(track_uris)}
        if position is not None:
            body["position"] = position

        logger.info(f"Adding {len(track_uris)} tracks to playlist {playlist_id}")
        data = await self.client.post_json(
            f"/playlists/{quote(playlist_id, safe='')}/tracks", json=body
        )

        return (
            f"Successfully added {len(track_uris)} track(s) to the playlist!\n"
            f"Snapshot ID: {data.get('snapshot_id', '')}"
        )

    async def get_user_playlists(self, limit: int = 20, offset: int = 0) -> str:
        """List the current user's playlists, one page at a time.

        Raises:
            ValidationError: If offset is negative.
            RemoteServiceError: For HTTP 4xx/5xx responses.
        """
        _require_offset(offset)
        limit = clamp(limit, PLAYLISTS_LIMIT_RANGE)

        data = await self.client.get_json(
            "/me/playlists", params={"limit": limit, "offset": offset}
        )

        items = data.get("items") or []
        if not items:
            return "You don't have any playlists yet."

        playlists = "\n\n".join(
            format_playlist(playlist, number)
            for number, playlist in enumerate(items, 1)
        )
        total = data.get("total", len(items))
        return (
            f"Found {len(items)} playlists "
            f"({pagination_range(offset, len(items), total)}):\n\n{playlists}"
        )

    async def get_playlist_tracks(
        self, playlist_id: str, limit: int = 50, offset: int = 0
    ) -> str:
        """List one page of a playlist's tracks, numbered from offset + 1.

        Raises:
            ValidationError: If playlist_id is empty or offset is negative.
            RemoteServiceError: For HTTP 4xx/5xx responses.
        """
        _require_text(playlist_id, "playlist_id")
        _require_offset(offset)
        limit = clamp(limit, PLAYLIST_TRACKS_LIMIT_RANGE)
        path = f"/playlists/{quote(playlist_id, safe='')}"

        playlist = await self.client.get_json(path)
        name = playlist.get("name", "")

        data = await self.client.get_json(
            f"{path}/tracks", params={"limit": limit, "offset": offset}
        )

        # removed and local items come back as null or with a null track
        items = [
            item for item in data.get("items") or [] if item and item.get("track")
        ]
        if not items:
            return f'Playlist "{name}" is empty.'

        tracks = "\n\n".join(
            format_track(
                item["track"],
                offset + number,
                added_at=item.get("added_at") or "",
                show_popularity=False,
            )
            for number, item in enumerate(items, 1)
        )
        total = data.get("total", (playlist.get("tracks") or {}).get("total", 0))
        return (
            f'Tracks in "{name}" '
            f"({pagination_range(offset, len(items), total)}):\n\n{tracks}"
        )
