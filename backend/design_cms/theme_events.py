import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class ThemeChangeBroker:
    """In-process fan-out of "themes table changed" notifications.

    Each subscriber owns one queue for the lifetime of its stream; the queue is
    removed when the stream closes. Notifications carry no payload, subscribers
    re-read the active theme themselves. `publish` may be called from worker
    threads (sync route handlers), so delivery hops onto the subscriber's loop.
    """

    def __init__(self, max_pending: int = 16):
        self._subscribers: dict[asyncio.Queue[str], asyncio.AbstractEventLoop] = {}
        self._max_pending = max_pending

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @staticmethod
    def _offer(queue: asyncio.Queue[str], reason: str) -> None:
        try:
            queue.put_nowait(reason)
        except asyncio.QueueFull:
            # A slow subscriber only needs to know that something changed.
            logger.debug("Dropping theme change notification for a full subscriber queue")

    def publish(self, reason: str) -> None:
        for queue, loop in list(self._subscribers.items()):
            try:
                loop.call_soon_threadsafe(self._offer, queue, reason)
            except RuntimeError:
                logger.warning("Discarding theme change subscriber bound to a closed event loop")
                self._subscribers.pop(queue, None)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue[str]]:
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self._max_pending)
        self._subscribers[queue] = asyncio.get_running_loop()
        logger.debug("Theme change subscriber added (%s active)", len(self._subscribers))
        try:
            yield queue
        finally:
            self._subscribers.pop(queue, None)
            logger.debug("Theme change subscriber removed (%s active)", len(self._subscribers))


theme_changes = ThemeChangeBroker()
