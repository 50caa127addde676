"""
Session models.
View mode, busy/progress/error state and the snapshot handed to the presentation layer.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .content import NewsItem, PersonDossier, GeneratedAsset


class ViewMode(str, Enum):
    """Display modes. Exactly one is active at a time."""
    NEWS = "news"
    INTEL = "intel"
    REEL = "reel"
    CREATIVE = "creative"


class SessionViewState(BaseModel):
    mode: ViewMode = ViewMode.NEWS
    active_index: int = 0
    is_busy: bool = False
    progress_message: str = ""
    error: Optional[str] = None


class SessionSnapshot(BaseModel):
    """Everything the presentation layer needs to render one frame."""

    view: SessionViewState
    topic: str
    is_live: bool
    news: list[NewsItem] = Field(default_factory=list)
    reel: list[NewsItem] = Field(default_factory=list)
    dossier: Optional[PersonDossier] = None
    assets: list[GeneratedAsset] = Field(default_factory=list)
    taken_at: datetime = Field(default_factory=datetime.now)
