"""Intent classification using Gemini."""

from typing import Optional
import logging

from google import genai

from ..errors import ClassificationError
from ..models.content import Intent
from ..utils.gemini import GeminiService


logger = logging.getLogger(__name__)


# Checked in order; the first keyword found in the label wins
INTENT_KEYWORDS: list[tuple[Intent, tuple[str, ...]]] = [
    (Intent.VIDEO, ("video",)),
    (Intent.IMAGE, ("image",)),
    (Intent.INTEL, ("intel", "person")),
]


def parse_intent(label: Optional[str]) -> Intent:
    """
    Map a free-text category label onto an Intent.

    Priority is video > image > intel > news, so a label mentioning
    several categories resolves to the highest one.
    """
    text = (label or "").lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return intent
    return Intent.NEWS


class IntentClassifier(GeminiService):
    """Routes a raw user command to one of the four workflows."""

    CLASSIFY_PROMPT = """Analyze the user prompt: "{prompt}".
Categorize it into one of: 'news' (tracking trends/events), 'intel' (searching for a person/handle/phone), 'image' (creating/generating/editing a picture), or 'video' (creating/generating a movie/clip).
Return ONLY the category name."""

    def __init__(
        self,
        model: str = "gemini-3-flash-preview",
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, api_key=api_key)
        self.model = model

    async def classify(self, text: str) -> Intent:
        """Classify a non-empty request. Remote failures raise ClassificationError."""
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.CLASSIFY_PROMPT.format(prompt=text),
            )
        except Exception as e:
            raise ClassificationError(f"Intent classification failed: {e}") from e

        label = (response.text or "").strip()
        if not label:
            raise ClassificationError("Intent classifier returned an empty label")

        intent = parse_intent(label)
        logger.info(f"Classified '{text[:60]}' as {intent.value}")
        return intent
