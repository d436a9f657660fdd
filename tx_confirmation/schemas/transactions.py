"""Transaction schemas for the confirmation core."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ResponseDecodeError


class QueuedTransaction(BaseModel):
    """Transaction awaiting the user's accept/deny decision."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Signing service transaction ID")
    from_address: str | None = Field(default=None, description="Sender address")
    to_address: str = Field(..., description="Destination address (hex)")
    value: int = Field(default=0, ge=0, description="Amount in wei")
    message_id: str | None = Field(
        default=None, description="Chat message that requested the transaction"
    )

    @field_validator("message_id", mode="before")
    @classmethod
    def blank_message_id_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ConfirmedTransaction(BaseModel):
    """Transaction submitted to the signing service."""

    transaction: QueuedTransaction
    hash: str | None = Field(default=None, description="Transaction hash once signed")

    @property
    def id(self) -> str:
        return self.transaction.id

    @property
    def message_id(self) -> str | None:
        return self.transaction.message_id


class UnlockResponse(BaseModel):
    """Deserialized signing service completion payload."""

    model_config = ConfigDict(extra="ignore")

    hash: str | None = None
    error: Any = None

    @property
    def failed(self) -> bool:
        """True when the response carries a non-blank error string."""
        return isinstance(self.error, str) and bool(self.error.strip())

    @classmethod
    def decode(cls, raw: str | bytes | Mapping[str, Any]) -> "UnlockResponse":
        """Decode a raw response (JSON text or an already-parsed mapping).

        Raises:
            ResponseDecodeError: If the payload is not a JSON object.
        """
        try:
            if isinstance(raw, Mapping):
                return cls.model_validate(dict(raw))
            if isinstance(raw, (str, bytes, bytearray)):
                parsed = json.loads(raw)
                if not isinstance(parsed, dict):
                    raise ResponseDecodeError(
                        "Unlock response is not an object", details=type(parsed).__name__
                    )
                return cls.model_validate(parsed)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            raise ResponseDecodeError("Malformed unlock response", details=str(e)) from e
        raise ResponseDecodeError(
            "Unsupported unlock response type", details=type(raw).__name__
        )
