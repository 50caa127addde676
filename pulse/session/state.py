"""
Session state for one interactive user.
Holds the view mode, busy/progress/error slots and the non-news collections.
"""

import math
from contextlib import contextmanager
from typing import Iterable, Optional
import logging

from ..errors import EngineBusyError
from ..models.content import GeneratedAsset, NewsItem, PersonDossier
from ..models.session import SessionViewState, ViewMode


logger = logging.getLogger(__name__)


# Modes in which the news stream is refreshed
STREAMING_MODES = frozenset({ViewMode.NEWS, ViewMode.REEL})


def reel_items(news: Iterable[NewsItem]) -> list[NewsItem]:
    """The reel is always the video subset of the news collection, recomputed on demand."""
    return [item for item in news if item.is_video]


def scroll_to_index(offset: float, viewport_height: float) -> int:
    """Index of the reel entry snapped into view (half rounds up)."""
    if not (math.isfinite(offset) and math.isfinite(viewport_height)):
        raise ValueError("scroll offset and viewport_height must be finite")
    if viewport_height <= 0:
        raise ValueError("viewport_height must be positive")
    return math.floor(offset / viewport_height + 0.5)


class SessionState:
    """
    Mutable session context owned by the dispatcher.

    All four collections live side by side; switching modes never discards
    any of them.
    """

    def __init__(self, mode: ViewMode = ViewMode.NEWS):
        self.view = SessionViewState(mode=mode)
        self.dossier: Optional[PersonDossier] = None
        self.assets: list[GeneratedAsset] = []

    @property
    def mode(self) -> ViewMode:
        return self.view.mode

    @property
    def is_streaming_mode(self) -> bool:
        return self.view.mode in STREAMING_MODES

    def set_mode(self, mode: ViewMode) -> bool:
        """Switch the active mode. Returns True when it actually changed."""
        mode = ViewMode(mode)
        if mode == self.view.mode:
            return False

        logger.info(f"View mode {self.view.mode.value} -> {mode.value}")
        self.view.mode = mode
        if mode == ViewMode.REEL:
            self.view.active_index = 0
        return True

    @property
    def is_busy(self) -> bool:
        return self.view.is_busy

    def set_progress(self, message: str):
        self.view.progress_message = message

    def record_error(self, message: str):
        self.view.error = message

    def clear_error(self, message: Optional[str] = None):
        """Clear the error slot, or only a specific message when given."""
        if message is None or self.view.error == message:
            self.view.error = None

    @contextmanager
    def busy(self, progress: str):
        """
        Foreground action region.
        Busy and progress are always reset on exit, whatever happens inside.
        """
        if self.view.is_busy:
            raise EngineBusyError("Another action is already running")

        self.view.is_busy = True
        self.view.progress_message = progress
        self.view.error = None
        try:
            yield self
        finally:
            self.view.is_busy = False
            self.view.progress_message = ""

    def add_asset(self, asset: GeneratedAsset):
        self.assets.insert(0, asset)

    def replace_dossier(self, dossier: PersonDossier):
        self.dossier = dossier

    def update_scroll(self, offset: float, viewport_height: float) -> int:
        self.view.active_index = scroll_to_index(offset, viewport_height)
        return self.view.active_index
