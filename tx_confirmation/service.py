"""Wiring of coordinator, event channel and signing adapter."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from .channel import EventChannel
from .config import ConfirmationSettings, get_settings
from .coordinator import ConfirmationCoordinator
from .interfaces import MessagingSubsystem, PresentationLayer, SigningBackend
from .signing import ChannelSigningService

logger = logging.getLogger(__name__)


@dataclass
class ConfirmationService:
    """Running confirmation core: collaborators post events, the channel reduces them."""

    coordinator: ConfirmationCoordinator
    channel: EventChannel
    signing: ChannelSigningService
    _task: Optional[asyncio.Task] = field(default=None, repr=False)

    @classmethod
    def create(
        cls,
        backend: SigningBackend,
        messaging: MessagingSubsystem,
        presentation: PresentationLayer,
        settings: Optional[ConfirmationSettings] = None,
    ) -> "ConfirmationService":
        settings = settings or get_settings()
        signing = ChannelSigningService(backend)
        coordinator = ConfirmationCoordinator(signing, messaging, presentation, settings=settings)
        channel = EventChannel(coordinator)
        signing.bind(channel)
        return cls(coordinator=coordinator, channel=channel, signing=signing)

    async def start(self) -> None:
        """Start consuming events in a background task."""
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self.channel.run())
        logger.info("Confirmation service started")

    async def settle(self) -> None:
        """Wait until no backend call or posted event is outstanding."""
        while True:
            await self.channel.join()
            if not self.signing.pending:
                return
            # backend results are posted as new events
            await self.signing.wait_idle()

    async def stop(self) -> None:
        await self.signing.wait_idle()
        await self.channel.stop()
        if self._task is not None:
            await self._task
            self._task = None
        logger.info("Confirmation service stopped")
