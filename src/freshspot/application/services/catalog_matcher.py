"""Pick the best catalog candidate out of a free-text search result.

Hey future me - Spotify search is fuzzy and happily returns remasters, karaoke covers and
the full deluxe album when we asked for a single. These two functions are the ONLY place
that decides which candidate we trust. They never raise and never do I/O; "nothing
trustworthy" is just None.

Albums and tracks are deliberately asymmetric:
- albums: scan ALL candidates for an exact (case-insensitive) name match, else take #1
- tracks: only look at the top 2, beyond that relevance is junk
"""

from collections.abc import Sequence
from typing import Any

# Search relevance beyond rank 2 is too low to trust for tracks
TRACK_SCAN_WINDOW = 2

SINGLE_ALBUM_TYPE = "single"
TRACK_TYPE = "track"


def _present(candidates: Sequence[Any]) -> list[dict[str, Any]]:
    """Drop the nulls Spotify search sometimes puts into `items`."""
    return [candidate for candidate in candidates if isinstance(candidate, dict)]


def _is_single_release(candidate: dict[str, Any]) -> bool:
    album = candidate.get("album")
    return isinstance(album, dict) and album.get("album_type") == SINGLE_ALBUM_TYPE


def select_album(
    candidates: Sequence[dict[str, Any]],
    title_a: str | None,
    title_b: str | None,
) -> dict[str, Any] | None:
    """
    Choose an album from search candidates.

    Args:
        candidates: Album search results, best first
        title_a: First confirmation string (usually the parsed album title)
        title_b: Second confirmation string (usually the parsed artist)

    Returns:
        First candidate whose name equals either confirmation, else the first candidate,
        None only when there are no candidates
    """
    candidates = _present(candidates)
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    # Name matching needs both confirmations; a title without " - " trusts the top hit
    if title_a is None or title_b is None:
        return candidates[0]

    confirmations = {title_a.strip().upper(), title_b.strip().upper()}
    for candidate in candidates:
        name = candidate.get("name")
        if isinstance(name, str) and name.upper() in confirmations:
            return candidate

    return candidates[0]


# Listen up, future me - the singleton case returns the parent ALBUM, not the track! A lone
# hit on a "single" release gets resolved through the album rule (which then does the extra
# tracks lookup). Every other branch returns the track candidate itself.
def select_track(candidates: Sequence[dict[str, Any]]) -> dict[str, Any] | None:
    """
    Choose a track from search candidates.

    Returns:
        The chosen candidate (or a single's parent album), None if nothing qualifies
    """
    candidates = _present(candidates)
    if not candidates:
        return None

    first = candidates[0]
    if len(candidates) == 1 and _is_single_release(first):
        return first["album"]
    if first.get("type") == TRACK_TYPE:
        return first

    # The window includes the first candidate, so a "single" parent on #1 is caught here.
    for candidate in candidates[:TRACK_SCAN_WINDOW]:
        if _is_single_release(candidate) or candidate.get("type") == TRACK_TYPE:
            return candidate

    return None
