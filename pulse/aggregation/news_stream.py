"""
Live news stream.

Keeps the bounded, deduplicated news collection and the single refresh task
that feeds it while the session is in a streaming mode.
"""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Iterable, Optional
import logging

from ..errors import SWEEP_ERROR_MESSAGE
from ..models.content import NewsItem
from ..session.state import SessionState
from .news_sweeper import NewsSweeper, build_news_items


logger = logging.getLogger(__name__)


Sleeper = Callable[[float], Awaitable[None]]


def merge_news(
    existing: Iterable[NewsItem],
    incoming: Iterable[NewsItem],
    max_items: int = 100,
) -> list[NewsItem]:
    """
    Prepend a sweep to the collection.

    Title is the dedup key: an incoming story replaces any existing story
    with the same title, and the newest copy sits at the front. Surviving
    existing entries keep their relative order. The result is capped at
    ``max_items``.
    """
    fresh: list[NewsItem] = []
    fresh_titles: set[str] = set()
    for item in incoming:
        if item.title in fresh_titles:
            continue
        fresh_titles.add(item.title)
        fresh.append(item)

    kept = [item for item in existing if item.title not in fresh_titles]
    return (fresh + kept)[:max_items]


class NewsStream:
    """
    Streaming aggregator for one session.

    At most one refresh task is outstanding. It is replaced whenever the
    topic, the live flag or the streaming state of the view changes.
    """

    def __init__(
        self,
        sweeper: NewsSweeper,
        session: SessionState,
        topic: str,
        live: bool = True,
        refresh_interval: float = 20.0,
        max_items: int = 100,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.sweeper = sweeper
        self.session = session
        self.topic = topic
        self.live = live
        self.refresh_interval = refresh_interval
        self.max_items = max_items
        self.items: list[NewsItem] = []
        self.sweep_count = 0
        self._sleep = sleep
        self._clock = clock
        self._timer: Optional[asyncio.Task] = None
        self._timer_topic: Optional[str] = None

    @property
    def timer_task(self) -> Optional[asyncio.Task]:
        """The outstanding refresh task, if any."""
        if self._timer is not None and self._timer.done():
            return None
        return self._timer

    @property
    def timer_topic(self) -> Optional[str]:
        return self._timer_topic if self.timer_task is not None else None

    def clear(self):
        self.items = []

    async def refresh(self, topic: Optional[str] = None) -> int:
        """
        Run one sweep and merge it. Returns the number of stories merged.

        A failed sweep leaves the collection untouched and records a
        transient error. A sweep whose topic was replaced while it was in
        flight is discarded.
        """
        topic = topic or self.topic
        current_topic = self.topic
        self.sweep_count += 1

        try:
            result = await self.sweeper.sweep(topic)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Sweep for '{topic[:60]}' failed: {e}")
            self.session.record_error(SWEEP_ERROR_MESSAGE)
            return 0

        if self.topic != current_topic:
            logger.info(f"Discarding stale sweep for '{topic[:60]}'")
            return 0

        incoming = build_news_items(result, captured_at=self._clock())
        before = len(self.items)
        self.items = merge_news(self.items, incoming, self.max_items)
        self.session.clear_error(SWEEP_ERROR_MESSAGE)

        logger.info(
            f"Merged {len(incoming)} stories for '{topic[:60]}' "
            f"({before} -> {len(self.items)} items)"
        )
        return len(incoming)

    def reschedule(self, immediate: bool = True):
        """
        Cancel the outstanding task and arm one for the current state.

        Nothing is armed outside the streaming modes. Must be called from
        inside the running event loop.
        """
        self.cancel()
        if not self.session.is_streaming_mode:
            return
        if not immediate and not self.live:
            return

        self._timer_topic = self.topic
        self._timer = asyncio.create_task(
            self._run(self.topic, self.live, immediate),
            name=f"news-stream:{self.topic[:40]}",
        )

    def cancel(self):
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
        self._timer_topic = None

    def set_live(self, live: bool):
        if live == self.live:
            return
        self.live = live
        logger.info(f"Live stream {'enabled' if live else 'paused'}")
        self.reschedule()

    async def retarget(self, topic: str):
        """
        Start over on a new topic: clear the collection, sweep once right
        away, then hand over to the live timer.
        """
        self.cancel()
        self.topic = topic
        self.clear()
        await self.refresh(topic)
        self.reschedule(immediate=False)

    async def stop(self):
        task = self._timer
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, topic: str, live: bool, immediate: bool):
        if immediate:
            await self.refresh(topic)
        while live:
            await self._sleep(self.refresh_interval)
            await self.refresh(topic)
