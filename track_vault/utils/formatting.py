"""
Helper functions for formatting data into human-readable strings.
"""

from datetime import datetime


def format_size(bytes_size: int) -> str:
    """Formats bytes into a human-readable size string (e.g., '145.3 MB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def format_duration(seconds: float) -> str:
    """
    Formats a duration in seconds into a human-readable string (e.g., '2h 34m 12s').
    """
    s = int(seconds)
    hours, remainder = divmod(s, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def join_artists(artists: list[str] | None) -> str:
    """Joins featured artists with ', '; an absent list yields an empty string."""
    if not artists:
        return ""
    return ", ".join(artists)


def format_track_label(primary_artist: str, track_title: str, mix_name: str) -> str:
    """Builds the 'Artist - Title (Mix)' label used in console output."""
    return f"{primary_artist} - {track_title} ({mix_name})"


def format_timestamp(moment: datetime) -> str:
    """Formats a timestamp as 'YYYY-MM-DD HH:MM:SS' in its own timezone."""
    return moment.strftime("%Y-%m-%d %H:%M:%S")
