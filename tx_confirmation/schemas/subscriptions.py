"""Subscription schemas for message correlation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

TRANSACTION_HASH_KEY = "transaction_hash"


class PendingSubscription(BaseModel):
    """Messaging command waiting for a transaction hash."""

    message_id: str = Field(..., min_length=1, description="Originating message ID")
    chat_id: str = Field(..., description="Chat the command belongs to")
    handler_data: dict[str, Any] = Field(
        default_factory=dict, description="Command handler payload"
    )

    def handler_data_with_hash(self, tx_hash: str) -> dict[str, Any]:
        """Copy of the handler data enriched with the transaction hash."""
        return {**self.handler_data, TRANSACTION_HASH_KEY: tx_hash}
