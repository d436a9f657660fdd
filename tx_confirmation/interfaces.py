"""Collaborator interfaces consumed by the confirmation core."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol


class SigningService(Protocol):
    """Fire-and-forget capability for the external signing service.

    Results of an unlock request come back later as ``unlock_completed`` or
    ``unlock_failed`` inbound events.
    """

    def request_unlock(self, transaction_id: str, password: str) -> None: ...

    def request_discard(self, transaction_id: str) -> None: ...


class SigningBackend(Protocol):
    """Async client of the signing service used by ChannelSigningService."""

    async def complete_transaction(
        self, transaction_id: str, password: str
    ) -> str | bytes | Mapping[str, Any]: ...

    async def discard_transaction(self, transaction_id: str) -> None: ...


class MessagingSubsystem(Protocol):
    """Chat side that issued commands waiting for a transaction hash."""

    def deliver_hash(self, chat_id: str, handler_data: dict[str, Any]) -> None: ...

    def knows_message(self, message_id: str) -> bool: ...


class PresentationLayer(Protocol):
    """Confirmation surface and password feedback."""

    def open_confirmation_surface(self) -> None: ...

    def close_confirmation_surface(self) -> None: ...

    def show_wrong_password_feedback(self) -> None: ...

    def hide_wrong_password_feedback(self) -> None: ...

    def clear_password_field(self) -> None: ...


AddressValidator = Callable[[str], bool]
