"""Session and view state."""

from .state import SessionState, STREAMING_MODES, reel_items, scroll_to_index

__all__ = [
    "SessionState",
    "STREAMING_MODES",
    "reel_items",
    "scroll_to_index",
]
