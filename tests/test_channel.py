"""Tests for the event channel, signing adapter and service wiring."""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from tx_confirmation.channel import EventChannel
from tx_confirmation.exceptions import ChannelClosedError, InvalidEventError, UnlockRejected
from tx_confirmation.schemas import (
    AcceptTransactions,
    FailureCode,
    SubscriptionRegistered,
    UnlockCompleted,
    UnlockFailed,
)
from tx_confirmation.service import ConfirmationService
from tx_confirmation.signing import ChannelSigningService

from .conftest import queued_event


class FakeSigningBackend:
    """In-memory signing backend accepting a single password."""

    def __init__(self, password: str = "pw"):
        self.password = password
        self.discarded: list[str] = []

    async def complete_transaction(self, transaction_id: str, password: str) -> str:
        await asyncio.sleep(0)
        if password != self.password:
            raise UnlockRejected("2")
        return json.dumps({"hash": f"0xhash-{transaction_id}", "error": ""})

    async def discard_transaction(self, transaction_id: str) -> None:
        self.discarded.append(transaction_id)


def _channel_mock() -> MagicMock:
    """Channel double whose put is awaitable."""
    channel = MagicMock()
    channel.put = AsyncMock()
    return channel


class TestEventChannel:
    """Test sequential event reduction."""

    @pytest.mark.asyncio
    async def test_events_dispatched_in_order(self) -> None:
        coordinator = MagicMock()
        coordinator.settings.event_queue_maxsize = 0
        channel = EventChannel(coordinator)
        task = asyncio.create_task(channel.run())

        first = queued_event("tx1")
        second = AcceptTransactions(password="pw")
        channel.post(first)
        channel.post(second)
        await channel.join()

        assert [c.args[0] for c in coordinator.dispatch.call_args_list] == [first, second]

        await channel.stop()
        await task
        assert channel.running is False

    @pytest.mark.asyncio
    async def test_failing_dispatch_does_not_stop_loop(self) -> None:
        coordinator = MagicMock()
        coordinator.dispatch.side_effect = [RuntimeError("boom"), None]
        channel = EventChannel(coordinator, maxsize=0)
        task = asyncio.create_task(channel.run())

        channel.post(queued_event("tx1"))
        channel.post(queued_event("tx2"))
        await channel.join()

        assert coordinator.dispatch.call_count == 2
        await channel.stop()
        await task

    @pytest.mark.asyncio
    async def test_post_raw_validates(self) -> None:
        channel = EventChannel(MagicMock(), maxsize=0)

        event = channel.post_raw({"kind": "deny_transaction", "id": "tx1"})
        assert event.id == "tx1"

        with pytest.raises(InvalidEventError):
            channel.post_raw({"kind": "deny_transaction"})

    @pytest.mark.asyncio
    async def test_post_after_stop_raises(self) -> None:
        channel = EventChannel(MagicMock(), maxsize=0)
        await channel.stop()

        assert channel.closed is True
        with pytest.raises(ChannelClosedError, match="closed"):
            channel.post(queued_event("tx1"))
        with pytest.raises(ChannelClosedError):
            await channel.put(queued_event("tx1"))

    @pytest.mark.asyncio
    async def test_bounded_channel_full(self) -> None:
        channel = EventChannel(MagicMock(), maxsize=1)
        channel.post(queued_event("tx1"))

        with pytest.raises(asyncio.QueueFull):
            channel.post(queued_event("tx2"))


class TestChannelSigningService:
    """Test backend results are posted as events."""

    @pytest.mark.asyncio
    async def test_unlock_success_posts_completed(self) -> None:
        channel = _channel_mock()
        signing = ChannelSigningService(FakeSigningBackend(), channel)

        signing.request_unlock("tx1", "pw")
        await signing.wait_idle()

        event = channel.put.call_args.args[0]
        assert isinstance(event, UnlockCompleted)
        assert event.id == "tx1"
        assert json.loads(event.response)["hash"] == "0xhash-tx1"
        assert signing.pending == 0

    @pytest.mark.asyncio
    async def test_rejection_posts_failed(self) -> None:
        channel = _channel_mock()
        signing = ChannelSigningService(FakeSigningBackend(), channel)

        signing.request_unlock("tx1", "wrong")
        await signing.wait_idle()

        event = channel.put.call_args.args[0]
        assert isinstance(event, UnlockFailed)
        assert event.error_code is FailureCode.WRONG_PASSWORD

    @pytest.mark.asyncio
    async def test_backend_crash_posts_default_failure(self) -> None:
        backend = MagicMock()
        backend.complete_transaction = AsyncMock(side_effect=ConnectionError("down"))
        channel = _channel_mock()
        signing = ChannelSigningService(backend, channel)

        signing.request_unlock("tx1", "pw")
        await signing.wait_idle()

        event = channel.put.call_args.args[0]
        assert event.error_code is FailureCode.DEFAULT

    @pytest.mark.asyncio
    async def test_discard_errors_are_swallowed(self) -> None:
        backend = MagicMock()
        backend.discard_transaction = AsyncMock(side_effect=ConnectionError("down"))
        channel = _channel_mock()
        signing = ChannelSigningService(backend, channel)

        signing.request_discard("tx1")
        await signing.wait_idle()

        backend.discard_transaction.assert_awaited_once_with("tx1")
        channel.put.assert_not_called()

    @pytest.mark.asyncio
    async def test_bounded_channel_waits_for_room(self) -> None:
        """Test results wait for room on a full channel instead of being dropped."""
        coordinator = MagicMock()
        channel = EventChannel(coordinator, maxsize=1)
        signing = ChannelSigningService(FakeSigningBackend(), channel)

        signing.request_unlock("tx1", "pw")
        signing.request_unlock("tx2", "pw")
        # nothing consumes yet, so the second result blocks on the full queue
        await asyncio.sleep(0.01)
        task = asyncio.create_task(channel.run())
        await signing.wait_idle()
        await channel.join()

        dispatched = [c.args[0] for c in coordinator.dispatch.call_args_list]
        assert all(isinstance(e, UnlockCompleted) for e in dispatched)
        assert sorted(e.id for e in dispatched) == ["tx1", "tx2"]

        await channel.stop()
        await task

    @pytest.mark.asyncio
    async def test_closed_channel_drops_result(self) -> None:
        channel = _channel_mock()
        channel.put.side_effect = ChannelClosedError("Event channel is closed")
        signing = ChannelSigningService(FakeSigningBackend(), channel)

        signing.request_unlock("tx1", "pw")
        await signing.wait_idle()

        channel.put.assert_awaited_once()


class TestConfirmationService:
    """End-to-end through the channel with an async backend."""

    @pytest.mark.asyncio
    async def test_full_flow(self, messaging, presentation, settings) -> None:
        backend = FakeSigningBackend(password="pw")
        service = ConfirmationService.create(backend, messaging, presentation, settings=settings)
        await service.start()

        service.channel.post(queued_event("tx1", message_id="m1"))
        service.channel.post(queued_event("tx2", to="bad address"))
        service.channel.post(AcceptTransactions(password="wrong"))
        await service.settle()

        assert service.coordinator.snapshot().retry_count == 1
        presentation.show_wrong_password_feedback.assert_called_once()

        service.channel.post(AcceptTransactions(password="pw"))
        await service.settle()
        service.channel.post(SubscriptionRegistered(message_id="m1", chat_id="chatA"))
        await service.settle()

        messaging.deliver_hash.assert_called_once_with(
            "chatA", {"transaction_hash": "0xhash-tx1"}
        )
        assert backend.discarded == ["tx2"]
        snapshot = service.coordinator.snapshot()
        assert snapshot.queued_ids == ()
        assert snapshot.confirmed_ids == ()
        assert snapshot.retry_count == 0

        await service.stop()
        assert service.channel.closed is True
