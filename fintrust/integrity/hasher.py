"""
Content Hasher

Deterministic digests over structured payloads.

DESIGN DECISION: Payloads are canonicalized before hashing. Mapping keys
are sorted and separators are fixed, so two payloads that are equal as
values always produce the same digest no matter how they were built.
Without this a re-parsed or re-ordered record would look tampered.

IMPORTANT: `sign` is a SIMULATED signature. The tag appended before
hashing is a fixed, public string, not a secret key. Anyone can
recompute a valid signature for any payload. It detects accidental or
naive edits, it does not prove who produced the record.
"""

import asyncio
import hashlib
import json
from typing import Any

from pydantic import BaseModel


SIGNING_TAG = "|signed-by-fintrust-demo"

DIGEST_HEX_LENGTH = 64


class SerializationError(Exception):
    """Payload cannot be turned into canonical text (cycles, NaN, unknown types)."""
    pass


def digest(content: str) -> str:
    """SHA-256 of the UTF-8 encoded content, as 64 lowercase hex characters."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _jsonable(value: Any) -> Any:
    # json.dumps fallback for objects it does not know natively
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_payload(payload: Any) -> str:
    """
    Serialize a structured value into byte-stable text.

    Raises:
        SerializationError: If the value is cyclic, holds NaN/Infinity,
            has non-string mapping keys that cannot be coerced, or
            contains objects JSON cannot represent.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    try:
        return json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=_jsonable,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise SerializationError(f"Payload cannot be canonicalized: {e}") from e


def sign(payload: Any) -> str:
    """Simulated signature: digest of the canonical payload plus SIGNING_TAG."""
    return digest(canonical_payload(payload) + SIGNING_TAG)


async def sign_async(payload: Any) -> str:
    """
    Same as `sign`, but hashes in a worker thread.

    The caller is suspended until the digest is ready.
    """
    return await asyncio.to_thread(sign, payload)


def is_digest(value: Any) -> bool:
    """True if value looks like a digest produced by this module."""
    if not isinstance(value, str) or len(value) != DIGEST_HEX_LENGTH:
        return False
    return all(ch in "0123456789abcdef" for ch in value)
