"""Session state shared by the confirmation components."""

from __future__ import annotations

from dataclasses import dataclass, field

from .schemas import ConfirmedTransaction, PendingSubscription, QueuedTransaction


@dataclass
class RetryState:
    """Consecutive wrong-password attempts and the feedback flag."""

    count: int = 0
    wrong_password: bool = False


@dataclass
class SessionState:
    """
    Single owned aggregate of all bookkeeping.

    Components hold a reference to the same instance; it is only mutated
    while one inbound event is being reduced.
    """

    queue: dict[str, QueuedTransaction] = field(default_factory=dict)
    registry: dict[str, ConfirmedTransaction] = field(default_factory=dict)
    subscriptions: dict[str, PendingSubscription] = field(default_factory=dict)
    # message_id -> transaction_id, filled once a hash is known
    message_index: dict[str, str] = field(default_factory=dict)
    # message IDs whose hash was delivered, oldest first, capped by the correlator
    delivered: dict[str, None] = field(default_factory=dict)
    retry: RetryState = field(default_factory=RetryState)
    confirmation_open: bool = False

    def is_tracked(self, transaction_id: str) -> bool:
        return transaction_id in self.queue or transaction_id in self.registry


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only summary of the session state."""

    queued_ids: tuple[str, ...]
    confirmed_ids: tuple[str, ...]
    pending_message_ids: tuple[str, ...]
    retry_count: int
    wrong_password: bool
    confirmation_open: bool

    @classmethod
    def of(cls, state: SessionState) -> "SessionSnapshot":
        return cls(
            queued_ids=tuple(state.queue),
            confirmed_ids=tuple(state.registry),
            pending_message_ids=tuple(state.subscriptions),
            retry_count=state.retry.count,
            wrong_password=state.retry.wrong_password,
            confirmation_open=state.confirmation_open,
        )
