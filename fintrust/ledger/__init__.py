"""
Record Ledger Package

Holds ingested records for later verification. In-memory only.
"""

from fintrust.ledger.store import (
    DuplicateRecordError,
    LedgerError,
    RecordLedger,
    RecordNotFoundError,
)

__all__ = [
    "DuplicateRecordError",
    "LedgerError",
    "RecordLedger",
    "RecordNotFoundError",
]
