"""
Content models for the intercept engine.
News stories, identity dossiers and generated media assets.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Intent(str, Enum):
    """Action category for a raw user request."""
    NEWS = "news"
    INTEL = "intel"
    IMAGE = "image"
    VIDEO = "video"


class Sentiment(str, Enum):
    """Tone of a news story."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    BREAKING = "breaking"


class MediaType(str, Enum):
    """Kind of media attached to a story."""
    IMAGE = "image"
    VIDEO = "video"
    NONE = "none"


class AssetType(str, Enum):
    """Kind of generated asset."""
    IMAGE = "image"
    VIDEO = "video"


class NewsSource(BaseModel):
    """A grounding citation returned alongside a sweep."""

    model_config = ConfigDict(frozen=True)

    title: str = "Source"
    uri: str


class StoryCandidate(BaseModel):
    """
    A raw story as returned by the sweep model.
    Becomes a NewsItem once it gets an id, timestamp and media.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account_handle: str = ""
    title: str
    summary: str = ""
    detailed_content: str = ""
    sentiment: Sentiment = Sentiment.NEUTRAL
    category: str = ""
    platform: str = ""
    media_type: MediaType = MediaType.NONE
    media_url: Optional[str] = None

    @field_validator("sentiment", mode="before")
    @classmethod
    def _coerce_sentiment(cls, value):
        if isinstance(value, str) and value.lower() in {s.value for s in Sentiment}:
            return value.lower()
        if isinstance(value, Sentiment):
            return value
        return Sentiment.NEUTRAL

    @field_validator("media_type", mode="before")
    @classmethod
    def _coerce_media_type(cls, value):
        if isinstance(value, str) and value.lower() in {m.value for m in MediaType}:
            return value.lower()
        if isinstance(value, MediaType):
            return value
        return MediaType.NONE


class NewsItem(BaseModel):
    """
    A story in the live collection.
    Never mutated after creation; only evicted by capacity.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Capture time in ms plus position in the sweep")
    title: str = Field(..., description="Dedup key within the live collection")
    summary: str = ""
    detailed_content: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    sentiment: Sentiment = Sentiment.NEUTRAL
    category: str = ""
    platform: str = ""

    # Media
    media_url: Optional[str] = None
    media_type: MediaType = MediaType.NONE

    # Author
    account_handle: Optional[str] = None
    avatar_url: Optional[str] = None

    sources: tuple[NewsSource, ...] = ()

    @property
    def is_video(self) -> bool:
        return self.media_type == MediaType.VIDEO


class GeoLocation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lat: float
    lng: float
    address: str = ""


class PersonDossier(BaseModel):
    """Structured intelligence record for one looked-up identity."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: str
    occupation: str = ""
    current_residence: str = ""
    family_links: list[str] = Field(default_factory=list)
    public_identifiers: list[str] = Field(default_factory=list)
    recent_activity: str = ""
    digital_footprint_score: float = Field(default=0.0, ge=0.0, le=100.0)
    location: Optional[GeoLocation] = None
    image: Optional[str] = None

    @field_validator("digital_footprint_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if value is None:
            return 0.0
        return max(0.0, min(100.0, float(value)))


class GeneratedAsset(BaseModel):
    """An image or video produced by a generation pipeline."""

    id: str
    type: AssetType
    url: str
    prompt: str
    timestamp: datetime = Field(default_factory=datetime.now)
