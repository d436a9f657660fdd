"""Custom exceptions for the transaction confirmation core."""

from __future__ import annotations

from typing import Any


class ConfirmationError(Exception):
    """Base exception for confirmation core errors."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidEventError(ConfirmationError):
    """Inbound event payload failed boundary validation."""


class ResponseDecodeError(ConfirmationError):
    """Signing service response could not be deserialized."""


class ChannelClosedError(ConfirmationError):
    """Event posted to a channel that has been stopped."""


class UnlockRejected(ConfirmationError):
    """Raised by a signing backend when an unlock attempt fails.

    Carries the signing service's raw error code so it can be reported back
    as an ``unlock_failed`` event.
    """

    def __init__(
        self,
        code: str,
        message: str = "Unlock rejected",
        message_id: str | None = None,
    ):
        super().__init__(message, details=f"code={code}")
        self.code = code
        self.message_id = message_id
