"""
Verification Engine

Recomputes a Record's signature and compares it with the stored one.

GUARANTEES:
- The Record is never modified; verifying twice gives the same answer
- A mismatch is reported as `ok=False`, never raised
- A payload that cannot be signed is reported with an `error`
- Every outcome is appended to the audit log
"""

from typing import Any, Sequence

import structlog

from fintrust.audit import AuditLog
from fintrust.integrity.hasher import (
    SerializationError,
    canonical_payload,
    digest,
    sign_async,
)
from fintrust.models.record import Record, VerificationEvent, VerificationEventBuilder


logger = structlog.get_logger(__name__)


class VerificationEngine:
    """Checks stored records against their signatures."""

    def __init__(self, audit_log: AuditLog):
        self._audit_log = audit_log

    async def verify(self, record: Record) -> VerificationEvent:
        """
        Verify a Record.

        `ok` is True only when the recomputed digest equals
        `record.signature`. The event always carries the stored signature
        and, when signing succeeded, the recomputed `expected` digest.
        """
        try:
            expected = await sign_async(record.payload)
        except SerializationError as e:
            event = VerificationEventBuilder.verify_failed(
                file=record.name,
                error=str(e),
                signature=record.signature,
            )
        else:
            event = VerificationEventBuilder.verified(record, expected)

        self._audit_log.append(event)
        logger.info(
            "record_verified",
            record_id=record.id,
            file=record.name,
            ok=event.ok,
        )
        return event

    async def quick_verify(
        self,
        project_id: str,
        txs: Sequence[Any],
    ) -> VerificationEvent:
        """
        Fingerprint a project's transactions.

        NOTE: This is a demonstration shortcut, NOT a verification. It
        hashes the transactions together with the project id and always
        reports `ok=True`; nothing is compared against a stored signature.
        Use `verify` on an ingested Record for a real check.
        """
        try:
            signature = digest(canonical_payload(list(txs)) + "|" + project_id)
        except SerializationError as e:
            event = VerificationEventBuilder.verify_failed(file=project_id, error=str(e))
        else:
            event = VerificationEventBuilder.quick_verified(project_id, signature)

        self._audit_log.append(event)
        return event
