"""Application services - catalog matching, enrichment and the resolution pipeline."""

from freshspot.application.services.catalog_matcher import select_album, select_track

# Hey future me - ResolutionPipeline is the only use case the API calls. Everything else in
# this package is a pure helper it composes.
from freshspot.application.services.resolution_pipeline import (
    ILLEGAL_TERMS,
    TRACK_ONLY_ILLEGAL_TERMS,
    ResolutionPipeline,
)

__all__ = [
    "ILLEGAL_TERMS",
    "TRACK_ONLY_ILLEGAL_TERMS",
    "ResolutionPipeline",
    "select_album",
    "select_track",
]
