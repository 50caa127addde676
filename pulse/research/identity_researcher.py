"""Identity intelligence lookups using Google Search grounding."""

from typing import Optional
from urllib.parse import quote
import logging

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..errors import IdentityLookupError
from ..models.content import PersonDossier
from ..utils.gemini import GeminiService, extract_json


logger = logging.getLogger(__name__)


PORTRAIT_PLACEHOLDER = (
    "https://images.unsplash.com/photo-1511367461989-f85a21fda167"
    "?auto=format&fit=crop&q=80&w=400&q={name}"
)


class IdentityResearcher(GeminiService):
    """Builds a PersonDossier for a name, handle or other identifier."""

    DOSSIER_PROMPT = """CRITICAL OSINT: Detailed dossier for "{query}".
Use web search. Report only publicly available information.

Return ONLY a JSON object:
{{
    "fullName": "...",
    "occupation": "...",
    "currentResidence": "...",
    "familyLinks": ["..."],
    "publicIdentifiers": ["handles, emails, sites"],
    "recentActivity": "...",
    "digitalFootprintScore": 0-100,
    "location": {{"lat": 0.0, "lng": 0.0, "address": "..."}} or null
}}"""

    def __init__(
        self,
        model: str = "gemini-3-pro-preview",
        client: Optional[genai.Client] = None,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, api_key=api_key)
        self.model = model

    async def lookup_identity(self, query: str) -> PersonDossier:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.DOSSIER_PROMPT.format(query=query),
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                ),
            )
        except Exception as e:
            raise IdentityLookupError(f"Dossier request failed: {e}") from e

        try:
            data = extract_json(response.text)
            dossier = PersonDossier.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise IdentityLookupError(f"Unusable dossier payload: {e}") from e

        if not dossier.image:
            dossier.image = PORTRAIT_PLACEHOLDER.format(name=quote(dossier.full_name))

        logger.info(
            f"Dossier compiled for '{query[:60]}': {dossier.full_name} "
            f"(footprint {dossier.digital_footprint_score:.0f})"
        )
        return dossier
