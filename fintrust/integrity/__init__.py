"""
Integrity Package

Canonical hashing, simulated signing and record verification.
"""

from fintrust.integrity.hasher import (
    SIGNING_TAG,
    SerializationError,
    canonical_payload,
    digest,
    is_digest,
    sign,
    sign_async,
)
from fintrust.integrity.verifier import VerificationEngine

__all__ = [
    "SIGNING_TAG",
    "SerializationError",
    "VerificationEngine",
    "canonical_payload",
    "digest",
    "is_digest",
    "sign",
    "sign_async",
]
