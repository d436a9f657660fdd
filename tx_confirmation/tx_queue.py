"""Queue of transactions awaiting the user's decision."""

from __future__ import annotations

import logging

from .interfaces import AddressValidator, SigningService
from .registry import TransactionRegistry
from .schemas import QueuedTransaction, TransactionQueued
from .state import SessionState
from .validation import is_valid_hex, normalize_value

logger = logging.getLogger(__name__)


class TransactionQueue:
    """Holds queued transactions and issues unlock/discard requests for them."""

    def __init__(
        self,
        state: SessionState,
        registry: TransactionRegistry,
        signing: SigningService,
        address_validator: AddressValidator = is_valid_hex,
    ):
        self._state = state
        self._registry = registry
        self._signing = signing
        self._is_valid_address = address_validator

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._state.queue

    def __len__(self) -> int:
        return len(self._state.queue)

    def get(self, transaction_id: str) -> QueuedTransaction | None:
        return self._state.queue.get(transaction_id)

    def ids(self) -> list[str]:
        return list(self._state.queue)

    def enqueue(self, event: TransactionQueued) -> QueuedTransaction | None:
        """
        Queue a transaction, or discard it upstream when its arguments are invalid.

        Returns the queued transaction, or None if it was rejected.
        """
        if self._state.is_tracked(event.id):
            logger.warning(f"Transaction {event.id} is already tracked, ignoring duplicate")
            return None

        to_address = event.args.to
        if not to_address or not self._is_valid_address(to_address):
            logger.warning(f"Discarding transaction {event.id}: invalid destination {to_address!r}")
            self._signing.request_discard(event.id)
            return None

        try:
            value = normalize_value(event.args.value)
        except ValueError as e:
            logger.warning(f"Discarding transaction {event.id}: {e}")
            self._signing.request_discard(event.id)
            return None

        transaction = QueuedTransaction(
            id=event.id,
            from_address=event.args.from_address,
            to_address=to_address,
            value=value,
            message_id=event.message_id,
        )
        self._state.queue[transaction.id] = transaction
        logger.info(f"Queued transaction {transaction.id} to {to_address}")
        return transaction

    def accept_all(self, password: str) -> list[str]:
        """Request an unlock for every queued transaction."""
        ids = self.ids()
        for transaction_id in ids:
            self._registry.admit(self._state.queue[transaction_id])
            self._signing.request_unlock(transaction_id, password)
        logger.info(f"Requested unlock of {len(ids)} transaction(s)")
        return ids

    def deny(self, transaction_id: str) -> QueuedTransaction | None:
        """Drop a queued or accepted transaction and discard it upstream."""
        transaction = self._state.queue.get(transaction_id)
        if transaction is None:
            confirmed = self._registry.get(transaction_id)
            if confirmed is not None:
                transaction = confirmed.transaction

        if transaction is None:
            logger.debug(f"Deny of unknown transaction {transaction_id}")
            return None

        self._registry.remove(transaction_id)
        self._signing.request_discard(transaction_id)
        logger.info(f"Denied transaction {transaction_id}")
        return transaction

    def deny_all(self) -> list[QueuedTransaction]:
        pending = self.ids() + [
            confirmed.id
            for confirmed in self._state.registry.values()
            if confirmed.hash is None
        ]
        denied = []
        for transaction_id in pending:
            transaction = self.deny(transaction_id)
            if transaction is not None:
                denied.append(transaction)
        return denied
