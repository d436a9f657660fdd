"""Inbound event schemas.

Every event the coordinator reduces is one of these models. Raw payloads
coming from collaborators are validated against the discriminated union
with :func:`parse_event` before they reach the coordinator.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from ..exceptions import InvalidEventError
from .enums import FailureCode


class TransactionArgs(BaseModel):
    """Raw transaction arguments as sent by the signing service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    from_address: str | None = Field(default=None, alias="from")
    to: str | None = None
    value: Any = None


class TransactionQueued(BaseModel):
    """A new transaction awaits approval."""

    kind: Literal["transaction_queued"] = "transaction_queued"
    id: str = Field(..., min_length=1)
    message_id: str | None = None
    args: TransactionArgs = Field(default_factory=TransactionArgs)


class UnlockCompleted(BaseModel):
    """Signing service finished an unlock attempt."""

    kind: Literal["unlock_completed"] = "unlock_completed"
    id: str = Field(..., min_length=1)
    response: Any = Field(..., description="Serialized {hash, error} payload")


class UnlockFailed(BaseModel):
    """Signing service reported an unlock failure."""

    kind: Literal["unlock_failed"] = "unlock_failed"
    id: str = Field(..., min_length=1)
    message_id: str | None = None
    error_code: FailureCode = FailureCode.DEFAULT

    @field_validator("error_code", mode="before")
    @classmethod
    def parse_error_code(cls, v: Any) -> FailureCode:
        return FailureCode.parse(v)


class SubscriptionRegistered(BaseModel):
    """Messaging subsystem waits for the hash of a message's transaction."""

    kind: Literal["subscription_registered"] = "subscription_registered"
    message_id: str = Field(..., min_length=1)
    chat_id: str
    handler_data: dict[str, Any] = Field(default_factory=dict)


class AcceptTransactions(BaseModel):
    """User accepted every queued transaction with a password."""

    kind: Literal["accept_transactions"] = "accept_transactions"
    password: SecretStr


class DenyTransactions(BaseModel):
    """User denied every queued transaction."""

    kind: Literal["deny_transactions"] = "deny_transactions"


class DenyTransaction(BaseModel):
    """User denied a single transaction."""

    kind: Literal["deny_transaction"] = "deny_transaction"
    id: str = Field(..., min_length=1)


class ConfirmationOpened(BaseModel):
    """Presentation layer opened the confirmation surface on its own."""

    kind: Literal["confirmation_opened"] = "confirmation_opened"


class ConfirmationDismissed(BaseModel):
    """Presentation layer closed the confirmation surface."""

    kind: Literal["confirmation_dismissed"] = "confirmation_dismissed"


InboundEvent = Annotated[
    Union[
        TransactionQueued,
        UnlockCompleted,
        UnlockFailed,
        SubscriptionRegistered,
        AcceptTransactions,
        DenyTransactions,
        DenyTransaction,
        ConfirmationOpened,
        ConfirmationDismissed,
    ],
    Field(discriminator="kind"),
]

_event_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_event(payload: Any) -> InboundEvent:
    """Validate a raw payload into an inbound event.

    Raises:
        InvalidEventError: If the payload matches no known event.
    """
    try:
        return _event_adapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidEventError(
            "Invalid inbound event", details=e.errors(include_url=False)
        ) from e
