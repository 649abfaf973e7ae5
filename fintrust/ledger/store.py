"""
Record Ledger

In-memory list of ingested records, the "uploaded records" the user can
pick from to re-verify.

The ledger is intentionally simple - records live for the lifetime of
the process and there is no delete or update. Records themselves are
frozen, so the ledger only has to protect its own list.
"""

import threading

from fintrust.models.record import Record


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class RecordNotFoundError(LedgerError):
    """No record with the requested id."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"No record with id {record_id!r}")


class DuplicateRecordError(LedgerError):
    """A record with the same id is already in the ledger."""
    pass


class RecordLedger:
    """
    Append-only store of ingested records, newest first.
    """

    def __init__(self):
        self._records: list[Record] = []
        self._by_id: dict[str, Record] = {}
        self._lock = threading.Lock()

    def add(self, record: Record) -> None:
        """
        Add a record to the ledger.

        Raises:
            DuplicateRecordError: If the id is already present
        """
        with self._lock:
            if record.id in self._by_id:
                raise DuplicateRecordError(f"Record {record.id!r} already stored")
            self._records.insert(0, record)
            self._by_id[record.id] = record

    def get(self, record_id: str) -> Record:
        """
        Retrieve a record by its id.

        Raises:
            RecordNotFoundError: If no such record exists
        """
        with self._lock:
            try:
                return self._by_id[record_id]
            except KeyError:
                raise RecordNotFoundError(record_id) from None

    def all(self) -> tuple[Record, ...]:
        """All records, most recently ingested first."""
        with self._lock:
            return tuple(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._by_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
