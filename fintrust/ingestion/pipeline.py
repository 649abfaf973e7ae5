"""
Ingestion Pipeline

Flow:
1. Parse → pick a parser by extension, build the payload
2. Sign → canonical digest of the payload
3. Record → frozen Record with the signature attached
4. Audit → append an event to the verification log

CRITICAL: The pipeline never raises past its boundary. A file that cannot
be parsed or signed produces no Record, only an `ok=False` event, so the
log keeps a full history of failed uploads as well as good ones.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from fintrust.audit import AuditLog
from fintrust.config import get_settings
from fintrust.ingestion.parsers import ParseError, parse_content
from fintrust.integrity.hasher import SerializationError, sign_async
from fintrust.ledger import RecordLedger
from fintrust.models.record import Record, VerificationEvent, VerificationEventBuilder


logger = structlog.get_logger(__name__)


class IngestionPipeline:
    """
    Parses uploaded files into signed Records.

    The audit log is required; the ledger is optional and, when given,
    receives every successfully ingested Record.
    """

    def __init__(
        self,
        audit_log: AuditLog,
        ledger: Optional[RecordLedger] = None,
        max_upload_size_bytes: Optional[int] = None,
    ):
        self._audit_log = audit_log
        self._ledger = ledger
        if max_upload_size_bytes is None:
            max_upload_size_bytes = get_settings().app.max_upload_size_bytes
        self._max_upload_size_bytes = max_upload_size_bytes

    async def ingest(
        self,
        filename: str,
        raw_content: bytes,
    ) -> tuple[Optional[Record], VerificationEvent]:
        """
        Ingest one uploaded file.

        Returns:
            (record, event). `record` is None when ingestion failed; the
            event then carries `ok=False` and the error message.
        """
        try:
            record = await self._build_record(filename, raw_content)
        except (ParseError, SerializationError) as e:
            return None, self._fail(filename, str(e))
        except ValidationError as e:
            return None, self._fail(filename, f"Invalid record: {e.error_count()} validation error(s)")
        except Exception as e:
            logger.exception("ingest_unexpected_error", file=filename)
            return None, self._fail(filename, f"Unexpected error: {e}")

        if self._ledger is not None:
            self._ledger.add(record)

        event = VerificationEventBuilder.ingested(record)
        self._audit_log.append(event)
        logger.info(
            "record_ingested",
            record_id=record.id,
            file=filename,
            signature=record.signature,
        )
        return record, event

    async def _build_record(self, filename: str, raw_content: bytes) -> Record:
        if len(raw_content) > self._max_upload_size_bytes:
            raise ParseError(
                f"File is too large ({len(raw_content)} bytes, "
                f"limit {self._max_upload_size_bytes} bytes)"
            )

        payload = parse_content(filename, raw_content)
        signature = await sign_async(payload)
        return Record(name=filename, payload=payload, signature=signature)

    def _fail(self, filename: str, error: str) -> VerificationEvent:
        event = VerificationEventBuilder.ingest_failed(filename=filename, error=error)
        self._audit_log.append(event)
        logger.warning("ingest_failed", file=filename, error=error)
        return event
