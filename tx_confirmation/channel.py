"""Inbound event channel feeding the coordinator."""
import asyncio
import logging
from typing import Any, Optional

from .coordinator import ConfirmationCoordinator
from .exceptions import ChannelClosedError
from .schemas import InboundEvent, parse_event

logger = logging.getLogger(__name__)

_STOP = object()


class EventChannel:
    """
    Serializes inbound events onto the coordinator.

    Collaborators post events from callbacks; ``run`` reduces them one at a
    time so no two events ever mutate the session state concurrently.
    """

    def __init__(self, coordinator: ConfirmationCoordinator, maxsize: Optional[int] = None):
        if maxsize is None:
            maxsize = coordinator.settings.event_queue_maxsize
        self.coordinator = coordinator
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._running = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def running(self) -> bool:
        return self._running

    def post(self, event: InboundEvent) -> None:
        """Enqueue a validated event without waiting.

        Raises:
            ChannelClosedError: If the channel was stopped.
            asyncio.QueueFull: If a bounded channel is full.
        """
        if self._closed:
            raise ChannelClosedError("Event channel is closed", details=event.kind)
        self._queue.put_nowait(event)

    def post_raw(self, payload: Any) -> InboundEvent:
        """Validate a raw payload and enqueue it.

        Raises:
            InvalidEventError: If the payload is not a known event.
        """
        event = parse_event(payload)
        self.post(event)
        return event

    async def put(self, event: InboundEvent) -> None:
        """Enqueue an event, waiting for room on a bounded channel."""
        if self._closed:
            raise ChannelClosedError("Event channel is closed", details=event.kind)
        await self._queue.put(event)

    async def run(self) -> None:
        """Consume events until stopped."""
        self._running = True
        logger.info("Event channel started")

        try:
            while True:
                event = await self._queue.get()
                try:
                    if event is _STOP:
                        break
                    self.coordinator.dispatch(event)
                except Exception as e:
                    logger.error(f"Event {getattr(event, 'kind', event)!r} failed: {e}", exc_info=True)
                finally:
                    self._queue.task_done()
        finally:
            self._running = False
            logger.info("Event channel stopped")

    async def join(self) -> None:
        """Wait until every posted event has been reduced."""
        await self._queue.join()

    async def stop(self) -> None:
        """Refuse new events and stop ``run`` after the ones already queued."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_STOP)
