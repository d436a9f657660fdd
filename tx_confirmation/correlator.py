"""Correlation of transaction hashes with the messages that requested them."""

from __future__ import annotations

import logging
from typing import Any

from .interfaces import MessagingSubsystem
from .registry import TransactionRegistry
from .schemas import PendingSubscription
from .state import SessionState

logger = logging.getLogger(__name__)


class MessageCorrelator:
    """
    Joins message ID -> transaction ID -> hash -> subscription.

    ``try_deliver`` is idempotent and is called after either side of the
    join changes: when a hash becomes known and when a subscription is
    registered. A hash reaches at most one subscriber, once.
    """

    def __init__(
        self,
        state: SessionState,
        registry: TransactionRegistry,
        messaging: MessagingSubsystem,
        history_limit: int = 1024,
    ):
        if history_limit < 1:
            raise ValueError("Delivered history limit must be at least 1")
        self._state = state
        self._registry = registry
        self._messaging = messaging
        self.history_limit = history_limit

    def has_subscription(self, message_id: str) -> bool:
        return message_id in self._state.subscriptions

    def register_subscription(
        self,
        message_id: str,
        chat_id: str,
        handler_data: dict[str, Any] | None = None,
    ) -> bool:
        """Record a subscription and deliver at once if the hash is already known.

        Returns True if the hash was delivered.
        """
        if message_id in self._state.delivered:
            logger.warning(f"Hash for message {message_id} was already delivered, ignoring subscription")
            return False

        self._state.subscriptions[message_id] = PendingSubscription(
            message_id=message_id,
            chat_id=chat_id,
            handler_data=handler_data or {},
        )
        return self.try_deliver(message_id)

    def try_deliver(self, message_id: str) -> bool:
        """Deliver the hash for message_id if transaction, hash and subscription are all present."""
        transaction_id = self._state.message_index.get(message_id)
        confirmed = self._registry.get(transaction_id) if transaction_id else None
        tx_hash = confirmed.hash if confirmed else None
        subscription = self._state.subscriptions.get(message_id)

        if not (transaction_id and tx_hash and subscription):
            return False

        del self._state.subscriptions[message_id]
        self._remember_delivered(message_id)
        self._registry.remove(transaction_id)

        logger.info(f"Delivering hash of {transaction_id} to chat {subscription.chat_id}")
        self._messaging.deliver_hash(
            subscription.chat_id, subscription.handler_data_with_hash(tx_hash)
        )
        return True

    def _remember_delivered(self, message_id: str) -> None:
        delivered = self._state.delivered
        delivered[message_id] = None
        while len(delivered) > self.history_limit:
            del delivered[next(iter(delivered))]

    def remove_subscription(self, message_id: str | None) -> bool:
        """Drop a subscription that will never be fulfilled.

        No-op unless the messaging subsystem still knows the message.
        """
        if not message_id or not self._messaging.knows_message(message_id):
            return False
        removed = self._state.subscriptions.pop(message_id, None) is not None
        if removed:
            logger.debug(f"Removed pending subscription for message {message_id}")
        return removed
