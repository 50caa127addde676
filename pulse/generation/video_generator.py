"""Video synthesis using Veo, tracked to completion by polling."""

import asyncio
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional
import logging

import httpx
from google import genai
from google.genai import types

from ..errors import VideoGenerationError
from ..utils.gemini import GeminiService
from .key_gate import ApiKeyGate


logger = logging.getLogger(__name__)


ProgressCallback = Callable[[str], None]
Sleeper = Callable[[float], Awaitable[None]]

INITIALIZING_MESSAGE = "Initializing Veo Neural Engine..."
SYNTHESIZING_MESSAGE = "Synthesizing temporal frames (approx 30-60s)..."


class VideoGenerator(GeminiService):
    """
    Long-running video generation.

    Submits a Veo job, polls the operation at a fixed interval until it is
    done, then downloads the clip and stores it under ``output_dir/videos``.
    The returned value is the local file path.
    """

    def __init__(
        self,
        model: str = "veo-3.1-fast-generate-preview",
        output_dir: str = "./output",
        poll_interval: float = 10.0,
        max_wait_seconds: float = 0.0,
        download_timeout: float = 120.0,
        key_gate: Optional[ApiKeyGate] = None,
        client: Optional[genai.Client] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Sleeper = asyncio.sleep,
        api_key: Optional[str] = None,
    ):
        super().__init__(client=client, api_key=api_key)
        self.model = model
        self.output_dir = Path(output_dir)
        self.poll_interval = poll_interval
        self.max_wait_seconds = max_wait_seconds
        self.download_timeout = download_timeout
        self.key_gate = key_gate
        self._http_client = http_client
        self._sleep = sleep

    @property
    def api_key(self) -> Optional[str]:
        if self.key_gate and self.key_gate.selected_key:
            return self.key_gate.selected_key
        return super().api_key

    async def generate_video(self, prompt: str, on_progress: Optional[ProgressCallback] = None) -> str:
        report = on_progress or (lambda message: None)

        report(INITIALIZING_MESSAGE)
        operation = await self.client.aio.models.generate_videos(
            model=self.model,
            prompt=prompt,
            config=types.GenerateVideosConfig(
                number_of_videos=1,
                resolution="720p",
                aspect_ratio="16:9",
            ),
        )
        logger.info(f"Submitted video job {getattr(operation, 'name', '?')} for '{prompt[:60]}'")

        waited = 0.0
        while not operation.done:
            if self.max_wait_seconds and waited >= self.max_wait_seconds:
                raise VideoGenerationError(
                    f"Video generation exceeded {self.max_wait_seconds:.0f}s ceiling"
                )
            report(SYNTHESIZING_MESSAGE)
            await self._sleep(self.poll_interval)
            waited += self.poll_interval
            operation = await self.client.aio.operations.get(operation)
            logger.debug(f"Video job poll after {waited:.0f}s: done={operation.done}")

        if getattr(operation, "error", None):
            raise VideoGenerationError(f"Video generation failed: {operation.error}")

        download_uri = self._download_uri(operation)
        if not download_uri:
            raise VideoGenerationError("Video generation failed")

        data = await self._download(download_uri)
        return self._store(data)

    @staticmethod
    def _download_uri(operation) -> Optional[str]:
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if not videos or videos[0].video is None:
            return None
        return videos[0].video.uri

    async def _download(self, uri: str) -> bytes:
        # Key is appended to the existing query (alt=media)
        url = httpx.URL(uri)
        if self.api_key:
            url = url.copy_add_param("key", self.api_key)

        if self._http_client is not None:
            response = await self._http_client.get(url, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=self.download_timeout) as http:
                response = await http.get(url, follow_redirects=True)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise VideoGenerationError(f"Video download failed: {e.response.status_code}") from e

        return response.content

    def _store(self, data: bytes) -> str:
        video_dir = self.output_dir / "videos"
        video_dir.mkdir(parents=True, exist_ok=True)

        file_path = video_dir / f"{int(time.time() * 1000)}.mp4"
        file_path.write_bytes(data)

        logger.info(f"Saved generated video ({len(data)} bytes) to {file_path}")
        return str(file_path)
