"""Shared Gemini client handling and response helpers."""

import json
import os
from typing import Any, Optional
import logging

from google import genai

from ..errors import ConfigurationError
from ..models.content import NewsSource


logger = logging.getLogger(__name__)


class GeminiService:
    """
    Base for every component that talks to Gemini.
    The client is created lazily so that construction never needs credentials.
    """

    def __init__(self, client: Optional[genai.Client] = None, api_key: Optional[str] = None):
        self._client = client
        self._api_key = api_key

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")

    @property
    def client(self) -> genai.Client:
        """Lazy load the Gemini client."""
        if self._client is None:
            api_key = self.api_key
            if not api_key:
                raise ConfigurationError("GOOGLE_API_KEY or GEMINI_API_KEY not set")
            self._client = genai.Client(api_key=api_key)
        return self._client


def extract_json(text: Optional[str]) -> Any:
    """Parse a JSON payload, stripping markdown fences if the model added them."""
    if not text:
        raise ValueError("Empty response text")

    result_text = text
    if "```json" in result_text:
        result_text = result_text.split("```json")[1].split("```")[0]
    elif "```" in result_text:
        result_text = result_text.split("```")[1].split("```")[0]

    return json.loads(result_text.strip())


def grounding_sources(response: Any) -> list[NewsSource]:
    """Collect web citations from a grounded response."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        uri = getattr(web, "uri", None) or ""
        if not uri:
            continue
        sources.append(NewsSource(title=getattr(web, "title", None) or "Source", uri=uri))

    logger.debug(f"Collected {len(sources)} grounding sources")
    return sources
