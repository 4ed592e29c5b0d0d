"""Domain value objects and pure parsing helpers."""

from freshspot.domain.value_objects.title_parsing import (
    classify_post,
    extract_album,
    extract_artist,
    extract_catalog_ref,
    extract_catalog_type,
    normalize_post,
)

__all__ = [
    "classify_post",
    "extract_album",
    "extract_artist",
    "extract_catalog_ref",
    "extract_catalog_type",
    "normalize_post",
]
