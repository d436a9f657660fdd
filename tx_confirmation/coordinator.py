"""Confirmation Coordinator - reduces inbound events into session state.

Flow:
    transaction_queued -> (open confirmation surface)
    accept_transactions -> unlock requests to the signing service
    unlock_completed -> hash recorded -> correlation -> deliver_hash
    unlock_failed -> wrong password retry / external discard / hard failure
    deny_transaction(s) -> cleanup + discard requests
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .config import ConfirmationSettings, get_settings
from .correlator import MessageCorrelator
from .interfaces import AddressValidator, MessagingSubsystem, PresentationLayer, SigningService
from .registry import TransactionRegistry
from .retry import PasswordRetryGuard
from .schemas import (
    AcceptTransactions,
    ConfirmationDismissed,
    ConfirmationOpened,
    DenyTransaction,
    DenyTransactions,
    FailureCode,
    FailureKind,
    InboundEvent,
    SubscriptionRegistered,
    TransactionQueued,
    UnlockCompleted,
    UnlockFailed,
    UnlockStatus,
)
from .state import SessionSnapshot, SessionState
from .tx_queue import TransactionQueue
from .validation import is_valid_hex

logger = logging.getLogger(__name__)


class ConfirmationCoordinator:
    """
    Orchestrates the confirmation lifecycle of queued transactions.

    Every inbound event is reduced to completion before the next one; the
    coordinator never raises for unknown IDs or duplicate events, it logs
    them and leaves the state untouched.
    """

    def __init__(
        self,
        signing: SigningService,
        messaging: MessagingSubsystem,
        presentation: PresentationLayer,
        settings: Optional[ConfirmationSettings] = None,
        state: Optional[SessionState] = None,
        address_validator: AddressValidator = is_valid_hex,
    ):
        self.settings = settings or get_settings()
        self.state = state if state is not None else SessionState()
        self.signing = signing
        self.messaging = messaging
        self.presentation = presentation

        self.retry_guard = PasswordRetryGuard(
            self.state.retry, ceiling=self.settings.wrong_password_attempts_limit
        )
        self.registry = TransactionRegistry(self.state)
        self.queue = TransactionQueue(self.state, self.registry, signing, address_validator)
        self.correlator = MessageCorrelator(
            self.state,
            self.registry,
            messaging,
            history_limit=self.settings.delivered_history_limit,
        )

        self._handlers: Dict[type, Callable[[Any], None]] = {
            TransactionQueued: self.on_transaction_queued,
            UnlockCompleted: lambda e: self.on_unlock_result(e.id, e.response),
            UnlockFailed: lambda e: self.on_unlock_failed(e.id, e.message_id, e.error_code),
            SubscriptionRegistered: lambda e: self.register_subscription(
                e.message_id, e.chat_id, e.handler_data
            ),
            AcceptTransactions: lambda e: self.accept_transactions(e.password.get_secret_value()),
            DenyTransactions: lambda e: self.deny_transactions(),
            DenyTransaction: lambda e: self.deny_transaction(e.id),
            ConfirmationOpened: lambda e: self.open_confirmation(),
            ConfirmationDismissed: lambda e: self.on_confirmation_dismissed(),
        }

    def dispatch(self, event: InboundEvent) -> None:
        """Reduce a single inbound event."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
        logger.debug(f"Dispatching {event.kind}")
        handler(event)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot.of(self.state)

    # Queue and user decisions

    def on_transaction_queued(self, event: TransactionQueued) -> None:
        transaction = self.queue.enqueue(event)
        if transaction is not None and self.settings.open_surface_on_queue:
            self._open_surface()

    def open_confirmation(self) -> None:
        """Start a confirmation session on a surface the presentation layer opened."""
        self._start_session()

    def on_confirmation_dismissed(self) -> None:
        self.state.confirmation_open = False

    def accept_transactions(self, password: str) -> None:
        self.retry_guard.clear_flag()
        self.presentation.hide_wrong_password_feedback()
        if not self.queue.accept_all(password):
            logger.debug("Accept with an empty queue")

    def deny_transactions(self) -> None:
        for transaction in self.queue.deny_all():
            self.correlator.remove_subscription(transaction.message_id)
        self._close_surface()

    def deny_transaction(self, transaction_id: str) -> None:
        transaction = self.queue.deny(transaction_id)
        if transaction is None:
            return
        self.correlator.remove_subscription(transaction.message_id)
        self._after_removal()

    # Signing service callbacks

    def on_unlock_result(self, transaction_id: str, response: Any) -> None:
        outcome = self.registry.on_unlock_result(transaction_id, response)

        if outcome.status in (UnlockStatus.FAILED, UnlockStatus.UNKNOWN):
            return

        self.retry_guard.reset()

        if outcome.status == UnlockStatus.REMOVED:
            logger.info(f"Transaction {transaction_id} completed without a message to notify")
            self._after_removal()
            return

        message_id = outcome.transaction.message_id
        if self.correlator.try_deliver(message_id):
            self._after_removal()
        else:
            logger.debug(f"Hash of {transaction_id} recorded, waiting for subscriber of {message_id}")

    def on_unlock_failed(
        self,
        transaction_id: str,
        message_id: Optional[str],
        error_code: Any,
    ) -> None:
        code = FailureCode.parse(error_code)

        if code.kind == FailureKind.AUTHENTICATION:
            self._on_wrong_password(transaction_id)
            return

        if code.kind == FailureKind.EXTERNAL_DISCARD:
            logger.info(f"Transaction {transaction_id} was discarded by the signing service")
            return

        logger.warning(f"Unlock of {transaction_id} failed with code {code.value}")
        self.correlator.remove_subscription(message_id or self._message_id_of(transaction_id))
        self.registry.remove(transaction_id)
        self._close_surface()

    # Messaging subsystem

    def register_subscription(
        self,
        message_id: str,
        chat_id: str,
        handler_data: Optional[dict] = None,
    ) -> None:
        if self.correlator.register_subscription(message_id, chat_id, handler_data):
            self._after_removal()

    # Internals

    def _on_wrong_password(self, transaction_id: str) -> None:
        self.registry.release(transaction_id)
        if self.retry_guard.record_wrong_password():
            self.presentation.hide_wrong_password_feedback()
            self.presentation.clear_password_field()
        else:
            self.presentation.show_wrong_password_feedback()

    def _message_id_of(self, transaction_id: str) -> Optional[str]:
        confirmed = self.registry.get(transaction_id)
        if confirmed is not None:
            return confirmed.message_id
        queued = self.queue.get(transaction_id)
        return queued.message_id if queued is not None else None

    def _open_surface(self) -> None:
        if self.state.confirmation_open:
            return
        self.presentation.open_confirmation_surface()
        self._start_session()

    def _start_session(self) -> None:
        self.state.confirmation_open = True
        self.retry_guard.reset()
        self.presentation.hide_wrong_password_feedback()
        self.presentation.clear_password_field()

    def _after_removal(self) -> None:
        if self.settings.close_surface_on_remove:
            self._close_surface()

    def _close_surface(self) -> None:
        if not self.state.confirmation_open:
            return
        self.state.confirmation_open = False
        self.presentation.close_confirmation_surface()
