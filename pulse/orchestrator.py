"""
Action dispatcher.

Takes a raw command, asks the classifier which workflow it belongs to, runs
that workflow and moves the session to the view that shows its result.
Owns the foreground error boundary.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional
import logging

from config.settings import Settings, get_settings

from .aggregation.news_stream import NewsStream
from .aggregation.news_sweeper import NewsSweeper
from .errors import ENGINE_ERROR_MESSAGE
from .generation.image_generator import ImageGenerator
from .generation.key_gate import ApiKeyGate, KeySelector
from .generation.video_generator import VideoGenerator
from .intent.classifier import IntentClassifier
from .models.content import AssetType, GeneratedAsset, Intent, NewsItem
from .models.session import SessionSnapshot, ViewMode
from .research.identity_researcher import IdentityResearcher
from .session.state import SessionState, reel_items


logger = logging.getLogger(__name__)


ANALYZING_MESSAGE = "Analyzing Intent..."
DREAMING_MESSAGE = "Dreaming visual pixels..."
VIDEO_MESSAGE = "Synthesizing temporal neural frames..."
SCANNING_MESSAGE = "Scanning Digital Footprint..."
KEY_MESSAGE = "Awaiting paid API key selection..."


class ActionDispatcher:
    """
    Orchestrates one interactive session.

    Inputs: raw commands, mode selections, the live toggle, reel scrolling
    and author lookups from the reel. Output: ``snapshot()``.
    """

    def __init__(
        self,
        classifier: IntentClassifier,
        image_generator: ImageGenerator,
        video_generator: VideoGenerator,
        identity_researcher: IdentityResearcher,
        stream: NewsStream,
        session: SessionState,
        key_gate: ApiKeyGate,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.classifier = classifier
        self.image_generator = image_generator
        self.video_generator = video_generator
        self.identity_researcher = identity_researcher
        self.stream = stream
        self.session = session
        self.key_gate = key_gate
        self._clock = clock

        self._handlers: dict[Intent, Callable[[str], Awaitable[None]]] = {
            Intent.NEWS: self._run_news,
            Intent.INTEL: self._run_intel,
            Intent.IMAGE: self._run_image,
            Intent.VIDEO: self._run_video,
        }
        missing = set(Intent) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for intents: {sorted(i.value for i in missing)}")

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        key_selector: Optional[KeySelector] = None,
    ) -> "ActionDispatcher":
        """Wire up a dispatcher with real Gemini-backed components."""
        settings = settings or get_settings()
        api_key = settings.api_key

        session = SessionState()
        key_gate = ApiKeyGate(api_key=settings.pulse_video_api_key, selector=key_selector)
        sweeper = NewsSweeper(model=settings.sweep_model, api_key=api_key)
        stream = NewsStream(
            sweeper=sweeper,
            session=session,
            topic=settings.default_topic,
            live=settings.live_by_default,
            refresh_interval=settings.refresh_interval_seconds,
            max_items=settings.max_news_items,
        )

        return cls(
            classifier=IntentClassifier(model=settings.classifier_model, api_key=api_key),
            image_generator=ImageGenerator(model=settings.image_model, api_key=api_key),
            video_generator=VideoGenerator(
                model=settings.video_model,
                output_dir=settings.output_dir,
                poll_interval=settings.video_poll_interval_seconds,
                max_wait_seconds=settings.video_max_wait_seconds,
                download_timeout=settings.video_download_timeout_seconds,
                key_gate=key_gate,
                api_key=api_key,
            ),
            identity_researcher=IdentityResearcher(model=settings.identity_model, api_key=api_key),
            stream=stream,
            session=session,
            key_gate=key_gate,
        )

    async def start(self):
        """Begin streaming for the initial view."""
        logger.info(f"Starting intercept session on '{self.stream.topic}'")
        self.stream.reschedule()

    async def shutdown(self):
        await self.stream.stop()
        logger.info("Intercept session stopped")

    async def handle_request(self, raw_text: str) -> Optional[Intent]:
        """
        Classify and run one command.

        Returns the intent that ran, or None for blank input or a failed
        action. Failures never propagate; they land in the error slot.
        Raises EngineBusyError if another foreground action is running.
        """
        if not raw_text or not raw_text.strip():
            return None

        with self.session.busy(ANALYZING_MESSAGE):
            try:
                intent = await self.classifier.classify(raw_text)
                await self._handlers[intent](raw_text)
            except Exception as e:
                logger.error(f"Action for '{raw_text[:60]}' failed: {e}", exc_info=True)
                self.session.record_error(ENGINE_ERROR_MESSAGE)
                return None

        return intent

    async def lookup_identity(self, query: str) -> bool:
        """Stand-alone dossier lookup. Returns True when a dossier was loaded."""
        if not query or not query.strip():
            return False

        with self.session.busy(SCANNING_MESSAGE):
            try:
                await self._lookup(query)
            except Exception as e:
                logger.error(f"Identity lookup for '{query[:60]}' failed: {e}", exc_info=True)
                self.session.record_error(ENGINE_ERROR_MESSAGE)
                return False
        return True

    async def track_identity(self, account_handle: str) -> bool:
        """'Track identity' from a reel entry: look up the author's handle."""
        logger.info(f"Tracking identity {account_handle!r} from reel")
        return await self.lookup_identity(account_handle)

    def select_mode(self, mode: ViewMode):
        if self.session.set_mode(mode):
            self.stream.reschedule()

    def back_to_news(self):
        self.select_mode(ViewMode.NEWS)

    def set_live(self, live: bool):
        self.stream.set_live(live)

    def update_scroll(self, offset: float, viewport_height: float) -> int:
        return self.session.update_scroll(offset, viewport_height)

    @property
    def reel(self) -> list[NewsItem]:
        return reel_items(self.stream.items)

    @property
    def active_reel_item(self) -> Optional[NewsItem]:
        reel = self.reel
        index = self.session.view.active_index
        if 0 <= index < len(reel):
            return reel[index]
        return None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            view=self.session.view.model_copy(),
            topic=self.stream.topic,
            is_live=self.stream.live,
            news=list(self.stream.items),
            reel=self.reel,
            dossier=self.session.dossier,
            assets=list(self.session.assets),
        )

    async def _run_news(self, text: str):
        # Mode is set directly; retarget arms the timer after its own sweep
        self.session.set_mode(ViewMode.NEWS)
        await self.stream.retarget(text)

    async def _run_intel(self, text: str):
        await self._lookup(text)

    async def _run_image(self, text: str):
        self.session.set_progress(DREAMING_MESSAGE)
        url = await self.image_generator.generate_image(text)
        self.session.add_asset(self._asset(AssetType.IMAGE, url, text))
        self.select_mode(ViewMode.CREATIVE)

    async def _run_video(self, text: str):
        if not await self.key_gate.has_selected_api_key():
            self.session.set_progress(KEY_MESSAGE)
            await self.key_gate.open_key_selector()

        self.session.set_progress(VIDEO_MESSAGE)
        url = await self.video_generator.generate_video(text, self.session.set_progress)
        self.session.add_asset(self._asset(AssetType.VIDEO, url, text))
        self.select_mode(ViewMode.CREATIVE)

    async def _lookup(self, query: str):
        self.session.set_progress(SCANNING_MESSAGE)
        dossier = await self.identity_researcher.lookup_identity(query)
        self.session.replace_dossier(dossier)
        self.select_mode(ViewMode.INTEL)

    def _asset(self, asset_type: AssetType, url: str, prompt: str) -> GeneratedAsset:
        now = self._clock()
        return GeneratedAsset(
            id=str(int(now.timestamp() * 1000)),
            type=asset_type,
            url=url,
            prompt=prompt,
            timestamp=now,
        )
