"""News sweeps and the live news stream."""

from .news_sweeper import NewsSweeper, SweepResult, build_news_items, placeholder_media
from .news_stream import NewsStream, merge_news

__all__ = [
    "NewsSweeper",
    "SweepResult",
    "build_news_items",
    "placeholder_media",
    "NewsStream",
    "merge_news",
]
