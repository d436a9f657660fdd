"""Registry of transactions submitted to the signing service."""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from .exceptions import ResponseDecodeError
from .schemas import ConfirmedTransaction, QueuedTransaction, UnlockResponse, UnlockStatus
from .state import SessionState

logger = logging.getLogger(__name__)


class UnlockOutcome(NamedTuple):
    status: UnlockStatus
    transaction: ConfirmedTransaction | None = None


class TransactionRegistry:
    """
    Transactions handed to the signing service, keyed by transaction ID.

    Accepting a queued transaction moves it here; the hash is attached once
    the signing service reports success.
    """

    def __init__(self, state: SessionState):
        self._state = state

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._state.registry

    def __len__(self) -> int:
        return len(self._state.registry)

    def get(self, transaction_id: str) -> ConfirmedTransaction | None:
        return self._state.registry.get(transaction_id)

    def ids(self) -> list[str]:
        return list(self._state.registry)

    def admit(self, transaction: QueuedTransaction) -> ConfirmedTransaction:
        """Move a queued transaction into the registry."""
        self._state.queue.pop(transaction.id, None)
        confirmed = self._state.registry.get(transaction.id)
        if confirmed is None:
            confirmed = ConfirmedTransaction(transaction=transaction)
            self._state.registry[transaction.id] = confirmed
        return confirmed

    def release(self, transaction_id: str) -> QueuedTransaction | None:
        """Move an in-flight transaction back to the queue for another attempt."""
        confirmed = self._state.registry.get(transaction_id)
        if confirmed is None or confirmed.hash is not None:
            return None
        del self._state.registry[transaction_id]
        self._state.queue[transaction_id] = confirmed.transaction
        return confirmed.transaction

    def record_hash(self, transaction_id: str, tx_hash: str | None) -> ConfirmedTransaction | None:
        """Attach the hash and index the transaction by its message ID."""
        confirmed = self._state.registry.get(transaction_id)
        if confirmed is None:
            return None
        confirmed.hash = tx_hash
        if confirmed.message_id:
            self._state.message_index[confirmed.message_id] = transaction_id
        return confirmed

    def remove(self, transaction_id: str) -> bool:
        """Delete a transaction from the registry and the queue. Idempotent."""
        in_registry = self._state.registry.pop(transaction_id, None) is not None
        in_queue = self._state.queue.pop(transaction_id, None) is not None

        stale = [
            message_id
            for message_id, indexed_id in self._state.message_index.items()
            if indexed_id == transaction_id
        ]
        for message_id in stale:
            del self._state.message_index[message_id]

        return in_registry or in_queue

    def on_unlock_result(self, transaction_id: str, raw_response: Any) -> UnlockOutcome:
        """Apply a signing service completion payload."""
        try:
            response = UnlockResponse.decode(raw_response)
        except ResponseDecodeError as e:
            logger.warning(f"Ignoring unlock result for {transaction_id}: {e}")
            return UnlockOutcome(UnlockStatus.FAILED)

        if response.failed:
            logger.info(f"Unlock of {transaction_id} returned error: {response.error}")
            return UnlockOutcome(UnlockStatus.FAILED)

        confirmed = self._state.registry.get(transaction_id)
        if confirmed is None:
            queued = self._state.queue.get(transaction_id)
            if queued is None:
                logger.debug(f"Unlock result for unknown transaction {transaction_id}")
                return UnlockOutcome(UnlockStatus.UNKNOWN)
            confirmed = self.admit(queued)

        if not confirmed.message_id:
            # nothing to correlate
            self.remove(transaction_id)
            return UnlockOutcome(UnlockStatus.REMOVED, confirmed)

        if not response.hash:
            logger.warning(f"Unlock of {transaction_id} succeeded without a hash")

        confirmed = self.record_hash(transaction_id, response.hash)
        return UnlockOutcome(UnlockStatus.HASH_RECORDED, confirmed)
