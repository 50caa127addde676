"""Shared builders for the intercept engine tests."""

from datetime import datetime
from types import SimpleNamespace

from pulse.aggregation.news_sweeper import SweepResult
from pulse.models.content import MediaType, NewsItem, StoryCandidate


FIXED_NOW = datetime(2025, 3, 14, 9, 26, 53)


def gemini_response(text=None, parts=None, chunks=None):
    """Build an object shaped like a google-genai GenerateContentResponse."""
    candidate = SimpleNamespace(
        content=SimpleNamespace(parts=parts or []),
        grounding_metadata=SimpleNamespace(grounding_chunks=chunks or []),
    )
    return SimpleNamespace(text=text, candidates=[candidate])


def web_chunk(title, uri):
    return SimpleNamespace(web=SimpleNamespace(title=title, uri=uri))


def make_candidate(title, media_type="none", handle="@wire", **kwargs):
    return StoryCandidate(
        account_handle=handle,
        title=title,
        summary=kwargs.pop("summary", f"Summary of {title}"),
        detailed_content=kwargs.pop("detailed_content", f"Details of {title}"),
        sentiment=kwargs.pop("sentiment", "neutral"),
        category=kwargs.pop("category", "world"),
        platform=kwargs.pop("platform", "X"),
        media_type=media_type,
        **kwargs,
    )


def make_item(title, index=0, media_type=MediaType.NONE, handle="@wire"):
    return NewsItem(
        id=f"1700000000000-{index}",
        title=title,
        summary=f"Summary of {title}",
        media_type=media_type,
        account_handle=handle,
        timestamp=FIXED_NOW,
    )


def sweep_of(topic, *titles, media_type="none"):
    return SweepResult(
        topic=topic,
        candidates=[make_candidate(title, media_type=media_type) for title in titles],
    )


class FakeSweeper:
    """Sweeper returning queued results; records every topic it was asked for."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.topics = []

    async def sweep(self, topic):
        self.topics.append(topic)
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return SweepResult(topic=topic)
