"""
Audit Log

DESIGN DECISION: Every ingest and verification outcome, success or
failure, ends up here. This provides:
1. A complete, user-visible history of integrity checks
2. Debugging capability through structured local logs
3. One choke point for ordering and atomicity

The audit log:
- Is append-only (no update, no delete, no reordering)
- Keeps newest entries first, in the order they were appended
- Serializes concurrent appends with a lock
- Is injected into the pipeline and the verifier, never global
"""

import threading
from typing import Optional

import structlog

from fintrust.models.record import VerificationEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLog:
    """
    Ordered, append-only store of verification events.

    Entries are held newest-first. Order reflects the order in which
    appends happened, never any field of the events.
    """

    def __init__(self):
        self._events: list[VerificationEvent] = []
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    def append(self, event: VerificationEvent) -> None:
        """
        Append an event.

        Always logs locally as well. Failed events are logged as warnings.
        """
        with self._lock:
            self._events.insert(0, event)

        log_dict = event.to_log_dict()
        if event.ok:
            self._logger.info("audit_event", **log_dict)
        else:
            self._logger.warning("audit_event", **log_dict)

    def all(self) -> tuple[VerificationEvent, ...]:
        """All events, most recent first. The returned tuple is a snapshot."""
        with self._lock:
            return tuple(self._events)

    def recent(self, limit: int) -> tuple[VerificationEvent, ...]:
        """The `limit` most recent events."""
        if limit < 0:
            raise ValueError("limit must be non-negative")
        with self._lock:
            return tuple(self._events[:limit])

    def latest(self) -> Optional[VerificationEvent]:
        with self._lock:
            return self._events[0] if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self):
        return iter(self.all())
