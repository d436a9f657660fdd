"""Transaction confirmation core - queue, unlock and hash correlation."""

from .channel import EventChannel
from .config import ConfirmationSettings, configure_logging, get_settings
from .coordinator import ConfirmationCoordinator
from .correlator import MessageCorrelator
from .exceptions import (
    ChannelClosedError,
    ConfirmationError,
    InvalidEventError,
    ResponseDecodeError,
    UnlockRejected,
)
from .registry import TransactionRegistry, UnlockOutcome
from .retry import PasswordRetryGuard
from .schemas import (
    AcceptTransactions,
    ConfirmationDismissed,
    ConfirmationOpened,
    ConfirmedTransaction,
    DenyTransaction,
    DenyTransactions,
    FailureCode,
    FailureKind,
    InboundEvent,
    PendingSubscription,
    QueuedTransaction,
    SubscriptionRegistered,
    TransactionArgs,
    TransactionQueued,
    UnlockCompleted,
    UnlockFailed,
    UnlockResponse,
    UnlockStatus,
    parse_event,
)
from .service import ConfirmationService
from .signing import ChannelSigningService
from .state import RetryState, SessionSnapshot, SessionState
from .tx_queue import TransactionQueue
from .validation import is_valid_hex, normalize_value

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "ConfirmationCoordinator",
    "ConfirmationService",
    "ConfirmationSettings",
    "EventChannel",
    "ChannelSigningService",
    # Components
    "TransactionQueue",
    "TransactionRegistry",
    "MessageCorrelator",
    "PasswordRetryGuard",
    "UnlockOutcome",
    # State
    "SessionState",
    "SessionSnapshot",
    "RetryState",
    # Config
    "get_settings",
    "configure_logging",
    # Exceptions
    "ConfirmationError",
    "InvalidEventError",
    "ResponseDecodeError",
    "ChannelClosedError",
    "UnlockRejected",
    # Validation
    "is_valid_hex",
    "normalize_value",
    # Enums
    "FailureCode",
    "FailureKind",
    "UnlockStatus",
    # Schemas
    "QueuedTransaction",
    "ConfirmedTransaction",
    "UnlockResponse",
    "PendingSubscription",
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
