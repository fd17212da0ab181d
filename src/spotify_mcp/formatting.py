"""Render Spotify API objects as human-readable text for tool results."""

from datetime import UTC, datetime
from typing import Any


def format_duration(ms: int | float) -> str:
    """Format milliseconds as m:ss, truncating partial seconds."""
    total_seconds = int(ms // 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_artists(track: dict[str, Any]) -> str:
    """Comma-separated artist names of a track."""
    return ", ".join(artist.get("name", "") for artist in track.get("artists") or [])


def format_timestamp(value: str | None) -> str:
    """Format an ISO 8601 timestamp as 'YYYY-MM-DD HH:MM:SS UTC'.

    Unparseable values are returned unchanged.
    """
    if not value:
        return "Unknown"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_track(
    track: dict[str, Any],
    number: int,
    *,
    added_at: str | None = None,
    show_popularity: bool = True,
) -> str:
    """Format one track as a numbered, multi-line entry."""
    lines = [
        f'{number}. "{track.get("name", "")}" by {format_artists(track)}',
        f"   Album: {(track.get('album') or {}).get('name', 'Unknown')}",
        f"   Duration: {format_duration(track.get('duration_ms') or 0)}",
    ]
    if added_at is not None:
        lines.append(f"   Added at: {format_timestamp(added_at)}")
    lines.append(f"   Spotify URI: {track.get('uri', '')}")
    lines.append(f"   Track ID: {track.get('id', '')}")
    if show_popularity:
        lines.append(f"   Popularity: {track.get('popularity', 0)}/100")
    return "\n".join(lines)


def format_track_list(tracks: list[dict[str, Any]], start: int = 1) -> str:
    """Format tracks as a numbered list starting at ``start``."""
    return "\n\n".join(
        format_track(track, number) for number, track in enumerate(tracks, start)
    )


def format_playlist(playlist: dict[str, Any], number: int) -> str:
    """Format one playlist as a numbered, multi-line entry."""
    return "\n".join(
        [
            f'{number}. "{playlist.get("name", "")}"',
            f"   Description: {playlist.get('description') or 'No description'}",
            f"   Tracks: {(playlist.get('tracks') or {}).get('total', 0)}",
            f"   Public: {'Yes' if playlist.get('public') else 'No'}",
            f"   Playlist ID: {playlist.get('id', '')}",
            f"   URL: {external_url(playlist)}",
        ]
    )


def external_url(item: dict[str, Any]) -> str:
    """Open-in-Spotify URL of an API object, or an empty string."""
    return (item.get("external_urls") or {}).get("spotify", "")


def pagination_range(offset: int, count: int, total: int) -> str:
    """'showing X-Y of N' fragment for a page of ``count`` items."""
    return f"showing {offset + 1}-{offset + count} of {total}"
