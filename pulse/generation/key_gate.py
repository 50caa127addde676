"""
Paid API key gate for video generation.
Veo jobs are billed against a key the user selects once per session.
"""

import asyncio
import getpass
from typing import Awaitable, Callable, Optional
import logging

from ..errors import ConfigurationError


logger = logging.getLogger(__name__)


KeySelector = Callable[[], Awaitable[Optional[str]]]


class ApiKeyGate:
    """
    Holds the paid key for the session.

    ``has_selected_api_key`` is checked before every video job; when it is
    false the dispatcher awaits ``open_key_selector`` before continuing.
    """

    def __init__(self, api_key: Optional[str] = None, selector: Optional[KeySelector] = None):
        self._api_key = api_key or None
        self._selector = selector

    @property
    def selected_key(self) -> Optional[str]:
        return self._api_key

    async def has_selected_api_key(self) -> bool:
        return bool(self._api_key)

    async def open_key_selector(self) -> None:
        if self._selector is None:
            raise ConfigurationError("No paid API key selected and no key selector available")

        key = await self._selector()
        if not key:
            raise ConfigurationError("Key selection was cancelled")

        self.select_key(key)

    def select_key(self, key: str) -> None:
        """Store a key supplied directly, e.g. ahead of the first video job."""
        if not key or not key.strip():
            raise ConfigurationError("API key is empty")
        self._api_key = key.strip()
        logger.info("Paid API key selected for video generation")


async def console_key_selector() -> Optional[str]:
    """Ask for the key on the terminal without blocking the event loop."""
    return await asyncio.to_thread(getpass.getpass, "Paid Gemini API key for video generation: ")


class RequestKeySelector:
    """
    Key selector completed from outside the waiting task.

    The video pipeline awaits the selector; a separate request (the HTTP
    ``POST /key`` route) hands over the key through ``submit``. An unanswered
    selection counts as cancelled after ``timeout`` seconds.
    """

    def __init__(self, timeout: float = 300.0):
        self.timeout = timeout
        self._pending: Optional[asyncio.Future] = None

    @property
    def is_waiting(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def __call__(self) -> Optional[str]:
        self._pending = asyncio.get_running_loop().create_future()
        logger.info("Waiting for a paid API key to be submitted")
        try:
            return await asyncio.wait_for(self._pending, self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"No paid API key submitted within {self.timeout:.0f}s")
            return None
        finally:
            self._pending = None

    def submit(self, key: str) -> bool:
        """Complete a pending selection. Returns False when nothing is waiting."""
        if not self.is_waiting:
            return False
        self._pending.set_result(key)
        return True
