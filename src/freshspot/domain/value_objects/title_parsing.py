"""Forum title and catalog link parsing.

Hey future me - this module turns noisy r/hiphopheads-style post titles into something
we can search Spotify with. Titles look like:

    [FRESH ALBUM] Artist - Album (Deluxe) [2023]
    [FRESH] Artist ft. Someone - Track Name
    [FRESH] Artist & Other Artist - Track "Remix"

and some posts skip the guessing game entirely because they link straight to Spotify:

    https://open.spotify.com/album/4yP0hdKOZPNshxUOjY0cZj?si=abc123

Everything here is pure and deterministic - no I/O, no logging. The pipeline decides what
to do when parsing fails (MalformedReference drops just that one post).

Examples:
    >>> extract_artist("Artist - Album (Deluxe) [2023]")
    'Artist'
    >>> extract_album("Artist - Album (Deluxe) [2023]")
    'Album'
    >>> extract_catalog_ref("https://open.spotify.com/track/0VjIjW4GlUZAMYd2vXMi3b")
    DirectRef(catalog_id='0VjIjW4GlUZAMYd2vXMi3b', catalog_type='track')
"""

import html
import re

from freshspot.domain.entities import (
    Classification,
    DirectRef,
    FeedItem,
    RawPost,
    RedditInfo,
    RequestKind,
)
from freshspot.domain.exceptions import MalformedReference

# =============================================================================
# CATALOG LINK MARKERS
# Hey future me - link posts carry the bare URL (no trailing slash needed), text posts
# embed it somewhere in prose, so the selftext check needs the slash to avoid false hits.
# =============================================================================

CATALOG_DOMAIN_MARKER = ".spotify.com/"
DIRECT_LINK_URL_MARKER = "open.spotify.com"
DIRECT_LINK_BODY_MARKER = "open.spotify.com/"

# Spotify base62 ids are always 22 characters
CATALOG_ID_LENGTH = 22

TITLE_DELIMITER = " - "
FEATURE_MARKER = "ft."

REDDIT_PERMALINK_BASE = "https://www.reddit.com"

# =============================================================================
# TITLE CLEANUP PATTERNS
# [FRESH], [2023], (Deluxe), (prod. X) carry no search value and confuse Spotify.
# =============================================================================

_BRACKETED = re.compile(r"\[[^\]]*\]")
_PARENTHESIZED = re.compile(r"\([^()]*\)")
_AND_WORD = re.compile(r"\band\b")

ARTIST_SEPARATORS: tuple[str, ...] = ("/", "\\", "#", "&", '"', ":")
ALBUM_SEPARATORS: tuple[str, ...] = (FEATURE_MARKER, "/", "\\", "#", "&")


def _strip_decorations(title: str, separators: tuple[str, ...]) -> str:
    """Remove bracket/paren segments and replace separator tokens with spaces."""
    reduced = _BRACKETED.sub("", title)
    reduced = _PARENTHESIZED.sub("", reduced)
    reduced = _AND_WORD.sub(" ", reduced)
    for token in separators:
        reduced = reduced.replace(token, " ")
    return reduced


def _collapse_whitespace(value: str) -> str:
    return " ".join(value.split())


def extract_artist(title: str) -> str:
    """Extract the artist part of a post title.

    Args:
        title: Raw (HTML-decoded) post title

    Returns:
        Artist text before the first " - ", cut at "ft.", trimmed
    """
    reduced = _strip_decorations(title, ARTIST_SEPARATORS)
    reduced = reduced.split(TITLE_DELIMITER)[0]
    if FEATURE_MARKER in reduced:
        reduced = reduced.split(FEATURE_MARKER)[0]
    return _collapse_whitespace(reduced)


def extract_album(title: str) -> str | None:
    """Extract the album/track part of a post title.

    Returns the segment right after the first " - " (up to the next one), or None when
    the title has no delimiter at all.
    """
    reduced = _strip_decorations(title, ALBUM_SEPARATORS)
    parts = reduced.split(TITLE_DELIMITER)
    if len(parts) < 2:
        return None
    album = _collapse_whitespace(parts[1])
    return album or None


def extract_catalog_ref(text: str) -> DirectRef:
    """Parse the catalog type and id out of a Spotify link.

    Works on a bare URL as well as on free text that contains one.

    Raises:
        MalformedReference: If the text has no Spotify link or the id segment is missing
    """
    _, marker, rest = text.partition(CATALOG_DOMAIN_MARKER)
    if not marker:
        raise MalformedReference(text)

    catalog_type, slash, remainder = rest.partition("/")
    catalog_id = remainder[:CATALOG_ID_LENGTH]
    if not slash or not catalog_type or not catalog_id:
        raise MalformedReference(text)

    return DirectRef(catalog_id=catalog_id, catalog_type=catalog_type)


def extract_catalog_type(url: str) -> str:
    """Catalog type segment of a Spotify URL ("album", "track", ...)."""
    return extract_catalog_ref(url).catalog_type


def classify_post(post: RawPost) -> tuple[Classification, DirectRef | None]:
    """Decide how a post gets resolved.

    Link posts pointing at Spotify win, then text posts that embed a Spotify link,
    everything else needs a free-text search.

    Raises:
        MalformedReference: If a Spotify link is present but unparsable
    """
    if DIRECT_LINK_URL_MARKER in post.url:
        return Classification.DIRECT_LINK, extract_catalog_ref(post.url)
    if DIRECT_LINK_BODY_MARKER in post.selftext:
        return Classification.DIRECT_LINK, extract_catalog_ref(post.selftext)
    return Classification.FREE_TEXT, None


def normalize_post(
    post: RawPost,
    request_kind: RequestKind,
    permalink_base: str = REDDIT_PERMALINK_BASE,
) -> FeedItem:
    """Turn a raw forum post into a FeedItem.

    Raises:
        MalformedReference: See classify_post()
    """
    title = html.unescape(post.title)
    classification, direct_ref = classify_post(post)
    return FeedItem(
        id=post.id,
        request_kind=request_kind,
        reddit_info=RedditInfo(
            artist=extract_artist(title),
            album=extract_album(title),
            score=post.score,
            permalink_url=permalink_base + post.permalink,
        ),
        classification=classification,
        direct_ref=direct_ref,
    )
