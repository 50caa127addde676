"""Image synthesis using the Gemini image model."""

import base64
from typing import Optional
import logging

from google import genai
from google.genai import types

from ..errors import ImageGenerationError
from ..utils.gemini import GeminiService


logger = logging.getLogger(__name__)


class ImageGenerator(GeminiService):
    """Single round-trip image generation. Returns a data URI."""

    def __init__(
        self,
        model: str = "gemini-2.5-flash-image",
        aspect_ratio: str = "1:1",
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, api_key=api_key)
        self.model = model
        self.aspect_ratio = aspect_ratio

    async def generate_image(self, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
            ),
        )

        for part in self._parts(response):
            inline = getattr(part, "inline_data", None)
            if inline and inline.data:
                data = inline.data
                if isinstance(data, bytes):
                    data = base64.b64encode(data).decode("ascii")
                mime_type = inline.mime_type or "image/png"
                logger.info(f"Generated image ({mime_type}) for prompt '{prompt[:60]}'")
                return f"data:{mime_type};base64,{data}"

        raise ImageGenerationError("No image data returned")

    @staticmethod
    def _parts(response) -> list:
        candidates = getattr(response, "candidates", None) or []
        if not candidates or candidates[0].content is None:
            return []
        return candidates[0].content.parts or []
