"""Data models for the intercept engine."""

from .content import (
    Intent,
    Sentiment,
    MediaType,
    AssetType,
    NewsSource,
    StoryCandidate,
    NewsItem,
    GeoLocation,
    PersonDossier,
    GeneratedAsset,
)
from .session import ViewMode, SessionViewState, SessionSnapshot

__all__ = [
    # Content models
    "Intent",
    "Sentiment",
    "MediaType",
    "AssetType",
    "NewsSource",
    "StoryCandidate",
    "NewsItem",
    "GeoLocation",
    "PersonDossier",
    "GeneratedAsset",
    # Session models
    "ViewMode",
    "SessionViewState",
    "SessionSnapshot",
]
