"""
Record and Verification Event Models

A Record is an ingested financial data file plus its signature.
A VerificationEvent is one line of the verification log: the outcome of
an ingest, a verification, or a quick project check.

DESIGN DECISION: Both models are frozen. Records are never edited after
ingestion and events are never edited after they are appended, so the
verification history cannot be rewritten in place.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    """Generate a unique, prefixed identifier (e.g. 'up_3f2a...')."""
    return f"{prefix}_{uuid4().hex}"


class EventKind(str, Enum):
    """
    What produced a verification event.

    The value doubles as the id prefix of the event, so a log line can be
    traced back to the action that created it.
    """
    INGESTED = "up"
    INGEST_FAILED = "err"
    VERIFIED = "v"
    VERIFY_FAILED = "verr"
    QUICK_VERIFIED = "pver"


class Record(BaseModel):
    """
    An ingested financial record.

    `payload` is either a parsed JSON value or a list of row mappings
    (header -> cell) from delimited text.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        default_factory=lambda: new_id("up"),
        description="Unique record identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Source filename"
    )
    payload: Any = Field(
        ...,
        description="Parsed content of the file"
    )
    signature: str = Field(
        ...,
        pattern="^[0-9a-f]{64}$",
        description="Hex digest of the canonical payload plus the signing tag"
    )


class VerificationEvent(BaseModel):
    """
    A single entry of the verification log.

    `expected` is only present when a digest was recomputed and compared.
    `error` is only present when the operation itself failed.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Unique event identifier"
    )
    kind: EventKind = Field(
        ...,
        description="Operation that produced this event"
    )
    ok: bool
    signature: Optional[str] = None
    expected: Optional[str] = None
    file: str = Field(
        ...,
        description="Filename or project id this event is about"
    )
    error: Optional[str] = None
    time: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": self.id,
            "kind": self.kind.name.lower(),
            "ok": self.ok,
            "signature": self.signature,
            "expected": self.expected,
            "file": self.file,
            "error": self.error,
            "time": self.time.isoformat(),
        }


class VerificationEventBuilder:
    """
    Helper class to build verification events with common patterns.

    Usage:
        event = VerificationEventBuilder.ingested(record)
        event = VerificationEventBuilder.verified(record, expected)
    """

    @staticmethod
    def ingested(record: Record) -> VerificationEvent:
        # Shares the record id so the first log line points at the record.
        return VerificationEvent(
            id=record.id,
            kind=EventKind.INGESTED,
            ok=True,
            signature=record.signature,
            file=record.name,
        )

    @staticmethod
    def ingest_failed(filename: str, error: str) -> VerificationEvent:
        return VerificationEvent(
            id=new_id(EventKind.INGEST_FAILED.value),
            kind=EventKind.INGEST_FAILED,
            ok=False,
            file=filename,
            error=error,
        )

    @staticmethod
    def verified(record: Record, expected: str) -> VerificationEvent:
        return VerificationEvent(
            id=new_id(EventKind.VERIFIED.value),
            kind=EventKind.VERIFIED,
            ok=expected == record.signature,
            signature=record.signature,
            expected=expected,
            file=record.name,
        )

    @staticmethod
    def verify_failed(
        file: str,
        error: str,
        signature: Optional[str] = None,
    ) -> VerificationEvent:
        return VerificationEvent(
            id=new_id(EventKind.VERIFY_FAILED.value),
            kind=EventKind.VERIFY_FAILED,
            ok=False,
            signature=signature,
            file=file,
            error=error,
        )

    @staticmethod
    def quick_verified(project_id: str, signature: str) -> VerificationEvent:
        return VerificationEvent(
            id=new_id(EventKind.QUICK_VERIFIED.value),
            kind=EventKind.QUICK_VERIFIED,
            ok=True,
            signature=signature,
            file=project_id,
        )
