"""Adapter turning an async signing backend into fire-and-forget requests."""
import asyncio
import logging
from typing import Coroutine, Optional, Set

from .channel import EventChannel
from .exceptions import ChannelClosedError, UnlockRejected
from .interfaces import SigningBackend
from .schemas import FailureCode, InboundEvent, UnlockCompleted, UnlockFailed

logger = logging.getLogger(__name__)


class ChannelSigningService:
    """
    Signing service capability backed by an async client.

    ``request_unlock`` and ``request_discard`` return immediately; the
    backend's result is put on the event channel as an
    ``unlock_completed`` or ``unlock_failed`` event, waiting for room when
    the channel is bounded. Must be used from
    within a running event loop.
    """

    def __init__(self, backend: SigningBackend, channel: Optional[EventChannel] = None):
        self.backend = backend
        self.channel = channel
        self._tasks: Set[asyncio.Task] = set()

    def bind(self, channel: EventChannel) -> None:
        """Attach the channel results are posted to."""
        self.channel = channel

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def request_unlock(self, transaction_id: str, password: str) -> None:
        self._spawn(self._unlock(transaction_id, password))

    def request_discard(self, transaction_id: str) -> None:
        self._spawn(self._discard(transaction_id))

    async def wait_idle(self) -> None:
        """Wait for every outstanding backend call to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _unlock(self, transaction_id: str, password: str) -> None:
        try:
            response = await self.backend.complete_transaction(transaction_id, password)
        except UnlockRejected as e:
            logger.info(f"Unlock of {transaction_id} rejected with code {e.code}")
            await self._post(
                UnlockFailed(id=transaction_id, message_id=e.message_id, error_code=e.code)
            )
            return
        except Exception as e:
            logger.error(f"Signing backend failed for {transaction_id}: {e}", exc_info=True)
            await self._post(UnlockFailed(id=transaction_id, error_code=FailureCode.DEFAULT))
            return

        await self._post(UnlockCompleted(id=transaction_id, response=response))

    async def _discard(self, transaction_id: str) -> None:
        try:
            await self.backend.discard_transaction(transaction_id)
        except Exception as e:
            logger.warning(f"Discard of {transaction_id} failed: {e}")

    async def _post(self, event: InboundEvent) -> None:
        if self.channel is None:
            logger.error(f"Dropping {event.kind} for {event.id}: no event channel bound")
            return
        try:
            await self.channel.put(event)
        except ChannelClosedError:
            logger.warning(f"Dropping {event.kind} for {event.id}: event channel closed")
