"""Confirmation core schemas."""

from .enums import FailureCode, FailureKind, UnlockStatus
from .events import (
    AcceptTransactions,
    ConfirmationDismissed,
    ConfirmationOpened,
    DenyTransaction,
    DenyTransactions,
    InboundEvent,
    SubscriptionRegistered,
    TransactionArgs,
    TransactionQueued,
    UnlockCompleted,
    UnlockFailed,
    parse_event,
)
from .subscriptions import TRANSACTION_HASH_KEY, PendingSubscription
from .transactions import ConfirmedTransaction, QueuedTransaction, UnlockResponse

__all__ = [
    # Enums
    "FailureCode",
    "FailureKind",
    "UnlockStatus",
    # Transactions
    "QueuedTransaction",
    "ConfirmedTransaction",
    "UnlockResponse",
    # Subscriptions
    "PendingSubscription",
    "TRANSACTION_HASH_KEY",
    # Events
    "InboundEvent",
    "TransactionArgs",
    "TransactionQueued",
    "UnlockCompleted",
    "UnlockFailed",
    "SubscriptionRegistered",
    "AcceptTransactions",
    "DenyTransactions",
    "DenyTransaction",
    "ConfirmationOpened",
    "ConfirmationDismissed",
    "parse_event",
]
