"""
OSINT news sweeps using Gemini with Google Search grounding.
One sweep returns story candidates plus the citations that grounded them.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote
import logging

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from ..errors import SweepError
from ..models.content import MediaType, NewsItem, NewsSource, StoryCandidate
from ..utils.gemini import GeminiService, extract_json, grounding_sources


logger = logging.getLogger(__name__)


VIDEO_SAMPLES = [
    "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/BigBuckBunny.mp4",
    "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/ElephantsDream.mp4",
    "https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/ForBiggerBlazes.mp4",
]

IMAGE_PLACEHOLDER = (
    "https://images.unsplash.com/photo-1611162617213-7d7a39e9b1d7"
    "?auto=format&fit=crop&q=80&w=800&q={title}"
)

AVATAR_PLACEHOLDER = (
    "https://images.unsplash.com/photo-1535713875002-d1d0cf377fde"
    "?auto=format&fit=crop&q=80&w=100&q={handle}"
)


class SweepResult(BaseModel):
    """Raw output of one sweep."""

    topic: str
    candidates: list[StoryCandidate] = Field(default_factory=list)
    sources: list[NewsSource] = Field(default_factory=list)


def placeholder_media(candidate: StoryCandidate, index: int) -> str:
    """Deterministic stand-in media for a story that arrived without any."""
    if candidate.media_type == MediaType.VIDEO:
        return VIDEO_SAMPLES[index % len(VIDEO_SAMPLES)]
    return IMAGE_PLACEHOLDER.format(title=quote(candidate.title))


def build_news_items(result: SweepResult, captured_at: Optional[datetime] = None) -> list[NewsItem]:
    """
    Turn sweep candidates into NewsItems.

    Every item gets an id derived from the capture time and its position,
    the capture timestamp and the citation list shared by the whole sweep.
    """
    captured_at = captured_at or datetime.now()
    stamp = int(captured_at.timestamp() * 1000)
    sources = tuple(result.sources)

    items = []
    for index, candidate in enumerate(result.candidates):
        items.append(NewsItem(
            id=f"{stamp}-{index}",
            title=candidate.title,
            summary=candidate.summary,
            detailed_content=candidate.detailed_content,
            timestamp=captured_at,
            sentiment=candidate.sentiment,
            category=candidate.category,
            platform=candidate.platform,
            media_url=candidate.media_url or placeholder_media(candidate, index),
            media_type=candidate.media_type,
            account_handle=candidate.account_handle or None,
            avatar_url=AVATAR_PLACEHOLDER.format(handle=quote(candidate.account_handle)),
            sources=sources,
        ))
    return items


class NewsSweeper(GeminiService):
    """Runs grounded sweeps for a topic."""

    SWEEP_PROMPT = """Act as an ultra-fast OSINT agent. Intercept visual and text news for "{topic}".
Use web search for the latest posts, reports and clips.

Return ONLY a JSON array. Each element:
{{
    "accountHandle": "@source",
    "title": "...",
    "summary": "1-2 sentences",
    "detailedContent": "full paragraph",
    "sentiment": "positive" | "negative" | "neutral" | "breaking",
    "category": "...",
    "platform": "X, Reddit, TikTok, News, ...",
    "mediaType": "image" | "video" | "none"
}}"""

    def __init__(
        self,
        model: str = "gemini-3-flash-preview",
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, api_key=api_key)
        self.model = model

    async def sweep(self, topic: str) -> SweepResult:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.SWEEP_PROMPT.format(topic=topic),
                config=types.GenerateContentConfig(
                    temperature=0.4,
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                ),
            )
        except Exception as e:
            raise SweepError(f"Sweep request failed: {e}") from e

        try:
            raw_items = extract_json(response.text)
            if isinstance(raw_items, dict):
                raw_items = [raw_items]
            candidates = [StoryCandidate.model_validate(raw) for raw in raw_items]
        except (ValueError, TypeError, ValidationError) as e:
            raise SweepError(f"Unusable sweep payload: {e}") from e

        sources = grounding_sources(response)
        logger.info(f"Sweep '{topic[:60]}': {len(candidates)} candidates, {len(sources)} sources")
        return SweepResult(topic=topic, candidates=candidates, sources=sources)
