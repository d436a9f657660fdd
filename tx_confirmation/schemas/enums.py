"""Enumerations for signing service failures."""

from enum import Enum


class FailureKind(str, Enum):
    """How the coordinator reacts to an unlock failure."""

    AUTHENTICATION = "authentication"
    EXTERNAL_DISCARD = "external_discard"
    UNRECOVERABLE = "unrecoverable"


class FailureCode(str, Enum):
    """Error codes reported by the signing service on a failed unlock."""

    DEFAULT = "1"
    WRONG_PASSWORD = "2"
    TIMEOUT = "3"
    DISCARDED = "4"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: object) -> "FailureCode":
        """Map a raw code to a member; unrecognized codes become UNKNOWN."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip())
        except ValueError:
            return cls.UNKNOWN

    @property
    def kind(self) -> FailureKind:
        if self is FailureCode.WRONG_PASSWORD:
            return FailureKind.AUTHENTICATION
        if self is FailureCode.DISCARDED:
            return FailureKind.EXTERNAL_DISCARD
        return FailureKind.UNRECOVERABLE


class UnlockStatus(str, Enum):
    """Result of applying an unlock response to the registry."""

    FAILED = "failed"
    UNKNOWN = "unknown"
    REMOVED = "removed"
    HASH_RECORDED = "hash_recorded"
