"""Pytest configuration and fixtures."""
from unittest.mock import MagicMock

import pytest

from tx_confirmation.config import ConfirmationSettings
from tx_confirmation.coordinator import ConfirmationCoordinator
from tx_confirmation.schemas import TransactionArgs, TransactionQueued

VALID_TO = "0x" + "ab" * 20
VALID_FROM = "0x" + "12" * 20


def queued_event(
    transaction_id: str,
    to: str | None = VALID_TO,
    message_id: str | None = None,
    value: object = "0x0de0b6b3a7640000",
) -> TransactionQueued:
    """Build a transaction_queued event."""
    return TransactionQueued(
        id=transaction_id,
        message_id=message_id,
        args=TransactionArgs(from_address=VALID_FROM, to=to, value=value),
    )


@pytest.fixture
def settings() -> ConfirmationSettings:
    """Create test settings."""
    return ConfirmationSettings(
        wrong_password_attempts_limit=3,
        open_surface_on_queue=True,
        close_surface_on_remove=True,
    )


@pytest.fixture
def signing() -> MagicMock:
    return MagicMock(name="signing")


@pytest.fixture
def messaging() -> MagicMock:
    messaging = MagicMock(name="messaging")
    messaging.knows_message.return_value = True
    return messaging


@pytest.fixture
def presentation() -> MagicMock:
    return MagicMock(name="presentation")


@pytest.fixture
def coordinator(signing, messaging, presentation, settings) -> ConfirmationCoordinator:
    """Coordinator wired to mock collaborators."""
    return ConfirmationCoordinator(signing, messaging, presentation, settings=settings)
