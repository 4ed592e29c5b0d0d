"""Turn raw Spotify album/track records into CatalogInfo.

Hey future me - both the bulk lookup path (direct links) and the search path end up here,
so a post resolves to the same CatalogInfo no matter how we found it. Spotify records are
untyped dicts and sometimes come back with holes (no images, null artists, a null record
for a deleted id). Any hole becomes EnrichmentFailure; the pipeline drops that one item,
logs it and does NOT cache it.
"""

from typing import Any

from freshspot.domain.entities import CatalogInfo, CatalogLink, RequestKind
from freshspot.domain.exceptions import (
    CatalogLookupFailure,
    EnrichmentFailure,
    MalformedReference,
)
from freshspot.domain.ports import ICatalogClient
from freshspot.domain.value_objects import extract_catalog_type

# Track requests only accept albums this small, anything bigger is a real album
MAX_TRACKS_FOR_SINGLE = 2

ALBUM_TYPE = "album"
TRACK_TYPE = "track"
SINGLE_ALBUM_TYPE = "single"


def _required(record: Any, *keys: str | int) -> Any:
    """Walk into a record; missing keys, short lists and nulls all raise LookupError/TypeError."""
    value: Any = record
    for key in keys:
        value = value[key]
    if value is None:
        raise TypeError(f"{'.'.join(str(k) for k in keys)} is null")
    return value


def _link(entity: dict[str, Any]) -> CatalogLink:
    return CatalogLink(
        name=_required(entity, "name"),
        url=_required(entity, "external_urls", "spotify"),
    )


def _item_type(url: str) -> str:
    try:
        return extract_catalog_type(url)
    except MalformedReference as e:
        raise TypeError(f"not a catalog url: {url}") from e


def is_oversized_for_track(album: dict[str, Any], request_kind: RequestKind) -> bool:
    """True when a track request got a full album from the bulk lookup.

    Those are remembered as unresolved; a real album never passes as a track.
    """
    if request_kind is not RequestKind.TRACK:
        return False
    total_tracks = album.get("total_tracks")
    return isinstance(total_tracks, int) and total_tracks > MAX_TRACKS_FOR_SINGLE


def build_album_info(album: dict[str, Any], item_id: str) -> CatalogInfo:
    """
    Build CatalogInfo from an album record.

    The album links to itself as "album"; item_id may be a track id for singles.

    Raises:
        EnrichmentFailure: If required fields are missing or null
    """
    try:
        url = _required(album, "external_urls", "spotify")
        return CatalogInfo(
            name=_required(album, "name"),
            image_url=_required(album, "images", 0, "url"),
            release_date=album.get("release_date"),
            catalog_url=url,
            artist=_link(_required(album, "artists", 0)),
            album=_link(album),
            item_id=item_id,
            item_type=_item_type(url),
        )
    except (LookupError, TypeError) as e:
        raise EnrichmentFailure(str(album.get("id") or item_id), str(e)) from e


def build_track_info(track: dict[str, Any]) -> CatalogInfo:
    """
    Build CatalogInfo from a track record.

    Own id, name and url; cover, release date, artist and album link come from the
    album the track is embedded in (tracks carry no images or release date of their own).

    Raises:
        EnrichmentFailure: If required fields are missing or null
    """
    try:
        album = _required(track, "album")
        url = _required(track, "external_urls", "spotify")
        return CatalogInfo(
            name=_required(track, "name"),
            image_url=_required(album, "images", 0, "url"),
            release_date=album.get("release_date"),
            catalog_url=url,
            artist=_link(_required(album, "artists", 0)),
            album=_link(album),
            item_id=_required(track, "id"),
            item_type=_item_type(url),
        )
    except (LookupError, TypeError) as e:
        raise EnrichmentFailure(str(track.get("id") or "unknown"), str(e)) from e


# Yo future me, this is the "is it secretly a single?" dance for TRACK requests. A single gets
# ONE extra call for its track listing so the embed plays the song instead of the album.
# A one-track album already ships its tracks in the payload (bulk /albums does, search
# results don't, hence the single check first). Everything else keeps the album id.
async def resolve_album_item_id(
    album: dict[str, Any],
    request_kind: RequestKind,
    catalog_client: ICatalogClient,
    credential: str,
) -> str:
    """
    Decide which id a resolved album record should expose.

    Raises:
        EnrichmentFailure: If the album or its track listing lacks the needed ids
    """
    album_id = album.get("id")
    try:
        if request_kind is RequestKind.TRACK:
            if album.get("album_type") == SINGLE_ALBUM_TYPE:
                tracks = await catalog_client.get_album_tracks(
                    _required(album, "id"), credential
                )
                return str(_required(tracks, 0, "id"))
            if album.get("total_tracks") == 1:
                return str(_required(album, "tracks", "items", 0, "id"))
        return str(_required(album, "id"))
    except CatalogLookupFailure as e:
        raise EnrichmentFailure(str(album_id), f"track listing lookup failed: {e}") from e
    except (LookupError, TypeError) as e:
        raise EnrichmentFailure(str(album_id), str(e)) from e


async def enrich_album(
    album: dict[str, Any] | None,
    request_kind: RequestKind,
    catalog_client: ICatalogClient,
    credential: str,
    item_id: str,
) -> CatalogInfo:
    """
    Full album rule: pick the exposed id, then build the display info.

    Args:
        album: Album record (None when Spotify didn't know the id)
        request_kind: Kind the feed request asked for
        catalog_client: Client for the single's track listing lookup
        credential: Authorization header value
        item_id: Feed item id, used in failure reports

    Raises:
        EnrichmentFailure: On any missing field
    """
    if album is None:
        raise EnrichmentFailure(item_id, "album record is null")
    exposed_id = await resolve_album_item_id(
        album, request_kind, catalog_client, credential
    )
    return build_album_info(album, exposed_id)


async def enrich_record(
    record: dict[str, Any] | None,
    request_kind: RequestKind,
    catalog_client: ICatalogClient,
    credential: str,
    item_id: str,
) -> CatalogInfo:
    """Dispatch a record (album or track) to its enrichment rule by its `type` field.

    Raises:
        EnrichmentFailure: For null records, unknown types or missing fields
    """
    if record is None:
        raise EnrichmentFailure(item_id, "catalog record is null")

    record_type = record.get("type")
    if record_type == ALBUM_TYPE:
        return await enrich_album(
            record, request_kind, catalog_client, credential, item_id
        )
    if record_type == TRACK_TYPE:
        return build_track_info(record)
    raise EnrichmentFailure(item_id, f"unsupported record type {record_type!r}")
