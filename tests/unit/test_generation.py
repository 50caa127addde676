"""
Unit tests for the image and video generation pipelines.
"""

import asyncio
import base64
import pytest
from pathlib import Path
from types import SimpleNamespace

import httpx

from pulse.errors import ConfigurationError, ImageGenerationError, VideoGenerationError
from pulse.generation.image_generator import ImageGenerator
from pulse.generation.key_gate import ApiKeyGate, RequestKeySelector
from pulse.generation.video_generator import (
    INITIALIZING_MESSAGE,
    SYNTHESIZING_MESSAGE,
    VideoGenerator,
)
from tests.helpers import gemini_response


def pending_operation():
    return SimpleNamespace(name="operations/veo-1", done=False, error=None, response=None)


def finished_operation(uri="https://generativelanguage.example/v1/files/abc:download?alt=media"):
    video = SimpleNamespace(video=SimpleNamespace(uri=uri))
    return SimpleNamespace(
        name="operations/veo-1",
        done=True,
        error=None,
        response=SimpleNamespace(generated_videos=[video]),
    )


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def download_client(seen_requests, status_code=200, content=b"mp4-bytes"):
    def handler(request: httpx.Request) -> httpx.Response:
        seen_requests.append(request)
        return httpx.Response(status_code, content=content)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestImageGenerator:

    @pytest.mark.asyncio
    async def test_returns_data_uri_from_inline_part(self, mock_genai_client):
        parts = [
            SimpleNamespace(inline_data=None, text="Here is your fox"),
            SimpleNamespace(inline_data=SimpleNamespace(data=b"\x89PNG", mime_type="image/png")),
        ]
        mock_genai_client.aio.models.generate_content.return_value = gemini_response(parts=parts)
        generator = ImageGenerator(client=mock_genai_client)

        url = await generator.generate_image("Generate image of a red fox")

        expected = base64.b64encode(b"\x89PNG").decode("ascii")
        assert url == f"data:image/png;base64,{expected}"

    @pytest.mark.asyncio
    async def test_no_inline_part_fails(self, mock_genai_client):
        parts = [SimpleNamespace(inline_data=None, text="I can't draw that")]
        mock_genai_client.aio.models.generate_content.return_value = gemini_response(parts=parts)
        generator = ImageGenerator(client=mock_genai_client)

        with pytest.raises(ImageGenerationError, match="No image data returned"):
            await generator.generate_image("something disallowed")

    @pytest.mark.asyncio
    async def test_empty_candidates_fail(self, mock_genai_client):
        mock_genai_client.aio.models.generate_content.return_value = SimpleNamespace(candidates=[])
        generator = ImageGenerator(client=mock_genai_client)

        with pytest.raises(ImageGenerationError):
            await generator.generate_image("anything")


@pytest.mark.unit
class TestVideoGenerator:

    @pytest.mark.asyncio
    async def test_polls_until_done_and_saves_clip(self, mock_genai_client, tmp_path):
        mock_genai_client.aio.models.generate_videos.return_value = pending_operation()
        mock_genai_client.aio.operations.get.side_effect = [pending_operation(), finished_operation()]
        requests = []
        sleep = RecordingSleep()
        progress = []

        generator = VideoGenerator(
            output_dir=str(tmp_path),
            client=mock_genai_client,
            http_client=download_client(requests),
            sleep=sleep,
            api_key="standard-key",
        )

        path = await generator.generate_video("A comet over Mars", progress.append)

        assert progress.count(INITIALIZING_MESSAGE) == 1
        assert progress.count(SYNTHESIZING_MESSAGE) == 2
        assert progress[0] == INITIALIZING_MESSAGE
        assert sleep.delays == [10.0, 10.0]
        assert mock_genai_client.aio.operations.get.await_count == 2

        assert Path(path).read_bytes() == b"mp4-bytes"
        assert Path(path).parent == tmp_path / "videos"
        assert requests[0].url.params["key"] == "standard-key"
        assert requests[0].url.params["alt"] == "media"
        assert str(requests[0].url) == (
            "https://generativelanguage.example/v1/files/abc:download?alt=media&key=standard-key"
        )

    @pytest.mark.asyncio
    async def test_prefers_key_from_gate(self, mock_genai_client, tmp_path):
        mock_genai_client.aio.models.generate_videos.return_value = finished_operation()
        requests = []

        generator = VideoGenerator(
            output_dir=str(tmp_path),
            key_gate=ApiKeyGate(api_key="paid-key"),
            client=mock_genai_client,
            http_client=download_client(requests),
            sleep=RecordingSleep(),
            api_key="standard-key",
        )

        await generator.generate_video("A comet over Mars")

        assert requests[0].url.params["key"] == "paid-key"
        mock_genai_client.aio.operations.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_result_fails(self, mock_genai_client, tmp_path):
        empty = SimpleNamespace(done=True, error=None, response=SimpleNamespace(generated_videos=[]))
        mock_genai_client.aio.models.generate_videos.return_value = empty

        generator = VideoGenerator(output_dir=str(tmp_path), client=mock_genai_client, sleep=RecordingSleep())

        with pytest.raises(VideoGenerationError, match="Video generation failed"):
            await generator.generate_video("A comet over Mars")

    @pytest.mark.asyncio
    async def test_operation_error_fails(self, mock_genai_client, tmp_path):
        failed = SimpleNamespace(done=True, error={"message": "safety"}, response=None)
        mock_genai_client.aio.models.generate_videos.return_value = failed

        generator = VideoGenerator(output_dir=str(tmp_path), client=mock_genai_client, sleep=RecordingSleep())

        with pytest.raises(VideoGenerationError):
            await generator.generate_video("A comet over Mars")

    @pytest.mark.asyncio
    async def test_wait_ceiling(self, mock_genai_client, tmp_path):
        mock_genai_client.aio.models.generate_videos.return_value = pending_operation()
        mock_genai_client.aio.operations.get.return_value = pending_operation()
        sleep = RecordingSleep()

        generator = VideoGenerator(
            output_dir=str(tmp_path),
            poll_interval=10.0,
            max_wait_seconds=30.0,
            client=mock_genai_client,
            sleep=sleep,
        )

        with pytest.raises(VideoGenerationError, match="ceiling"):
            await generator.generate_video("A comet over Mars")
        assert sleep.delays == [10.0, 10.0, 10.0]

    @pytest.mark.asyncio
    async def test_download_error_fails(self, mock_genai_client, tmp_path):
        mock_genai_client.aio.models.generate_videos.return_value = finished_operation()

        generator = VideoGenerator(
            output_dir=str(tmp_path),
            client=mock_genai_client,
            http_client=download_client([], status_code=403),
            sleep=RecordingSleep(),
        )

        with pytest.raises(VideoGenerationError, match="403"):
            await generator.generate_video("A comet over Mars")


@pytest.mark.unit
class TestApiKeyGate:

    @pytest.mark.asyncio
    async def test_selector_sets_key(self):
        async def selector():
            return " picked-key "

        gate = ApiKeyGate(selector=selector)
        assert await gate.has_selected_api_key() is False

        await gate.open_key_selector()

        assert await gate.has_selected_api_key() is True
        assert gate.selected_key == "picked-key"

    @pytest.mark.asyncio
    async def test_no_selector_raises(self):
        gate = ApiKeyGate()

        with pytest.raises(ConfigurationError):
            await gate.open_key_selector()

    @pytest.mark.asyncio
    async def test_cancelled_selection_raises(self):
        async def selector():
            return None

        gate = ApiKeyGate(selector=selector)

        with pytest.raises(ConfigurationError):
            await gate.open_key_selector()
        assert gate.selected_key is None

    def test_direct_key_selection(self):
        gate = ApiKeyGate()

        gate.select_key("  direct-key ")

        assert gate.selected_key == "direct-key"
        with pytest.raises(ConfigurationError):
            gate.select_key("   ")


@pytest.mark.unit
class TestRequestKeySelector:

    @pytest.mark.asyncio
    async def test_submitted_key_completes_selection(self):
        selector = RequestKeySelector(timeout=5.0)
        gate = ApiKeyGate(selector=selector)

        pending = asyncio.create_task(gate.open_key_selector())
        await asyncio.sleep(0)

        assert selector.is_waiting
        assert selector.submit("submitted-key") is True
        await pending

        assert gate.selected_key == "submitted-key"
        assert not selector.is_waiting

    def test_submit_without_pending_selection(self):
        assert RequestKeySelector().submit("early-key") is False

    @pytest.mark.asyncio
    async def test_unanswered_selection_times_out(self):
        gate = ApiKeyGate(selector=RequestKeySelector(timeout=0.01))

        with pytest.raises(ConfigurationError):
            await gate.open_key_selector()
        assert gate.selected_key is None
