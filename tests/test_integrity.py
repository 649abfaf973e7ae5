"""Tests for canonical hashing, signing and verification."""

import asyncio
import hashlib
from decimal import Decimal

import pytest

from fintrust.integrity import (
    SIGNING_TAG,
    SerializationError,
    VerificationEngine,
    canonical_payload,
    digest,
    is_digest,
    sign,
    sign_async,
)
from fintrust.models.budget import Transaction
from fintrust.models.record import EventKind, Record


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class TestDigest:
    """Tests for the digest primitive."""

    def test_digest_is_sha256_hex(self):
        """Test that digest is plain SHA-256 over UTF-8."""
        assert digest("abc") == _sha256("abc")

    def test_digest_length(self):
        """Test fixed output length."""
        for content in ["", "x", "₹" * 1000]:
            assert len(digest(content)) == 64
            assert is_digest(digest(content))

    def test_is_digest_rejects_other_strings(self):
        assert not is_digest("ABC")
        assert not is_digest("g" * 64)
        assert not is_digest(None)


class TestCanonicalPayload:
    """Tests for canonical serialization."""

    def test_keys_are_sorted(self):
        """Test that mapping key order never matters."""
        assert canonical_payload({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_nested_keys_are_sorted(self):
        payload = {"z": [{"y": 1, "x": 2}], "a": {"d": None, "c": True}}
        assert canonical_payload(payload) == '{"a":{"c":true,"d":null},"z":[{"x":2,"y":1}]}'

    def test_list_order_is_kept(self):
        """Test that sequence order is significant."""
        assert canonical_payload([2, 1]) != canonical_payload([1, 2])

    def test_non_ascii_kept_verbatim(self):
        assert canonical_payload({"city": "Bengaluru ₹"}) == '{"city":"Bengaluru ₹"}'

    def test_pydantic_models_are_dumped(self):
        """Test that models canonicalize like their JSON dump."""
        tx = Transaction(id="tx1", amount=Decimal("50000"), date="2025-09-01", notes="Advance payment")
        assert canonical_payload([tx]) == canonical_payload([tx.model_dump(mode="json")])
        assert canonical_payload(tx) == canonical_payload(tx.model_dump(mode="json"))

    def test_cyclic_payload_fails(self):
        """Test that cycles raise SerializationError."""
        payload = {}
        payload["self"] = payload
        with pytest.raises(SerializationError):
            canonical_payload(payload)

    def test_nan_fails(self):
        with pytest.raises(SerializationError):
            canonical_payload({"amount": float("nan")})

    def test_unknown_object_fails(self):
        with pytest.raises(SerializationError):
            canonical_payload({"when": object()})


class TestSign:
    """Tests for the simulated signature."""

    def test_sign_matches_definition(self):
        """Test sign == digest(canonical + tag)."""
        assert sign({"a": 1, "b": 2}) == _sha256('{"a":1,"b":2}' + SIGNING_TAG)

    def test_sign_is_deterministic(self):
        payload = {"rows": [{"id": "1", "amount": "50"}]}
        assert sign(payload) == sign(payload)

    def test_sign_ignores_construction_order(self):
        first = {}
        first["a"] = 1
        first["b"] = 2
        second = {}
        second["b"] = 2
        second["a"] = 1
        assert sign(first) == sign(second)

    def test_sign_detects_value_change(self):
        assert sign({"a": 1}) != sign({"a": 2})

    async def test_sign_async_matches_sign(self):
        payload = [{"id": "1"}, {"id": "2"}]
        assert await sign_async(payload) == sign(payload)


class TestVerificationEngine:
    """Tests for verify and quick_verify."""

    def _record(self, payload) -> Record:
        return Record(name="data.json", payload=payload, signature=sign(payload))

    async def test_verify_untouched_record(self, audit_log):
        """Test that a freshly signed record verifies."""
        engine = VerificationEngine(audit_log)
        record = self._record({"a": 1, "b": 2})

        event = await engine.verify(record)

        assert event.ok is True
        assert event.kind == EventKind.VERIFIED
        assert event.expected == record.signature
        assert event.file == "data.json"
        assert audit_log.all() == (event,)

    async def test_verify_is_idempotent(self, audit_log):
        engine = VerificationEngine(audit_log)
        record = self._record({"a": 1})

        first = await engine.verify(record)
        second = await engine.verify(record)

        assert first.ok == second.ok is True
        assert first.id != second.id
        assert record.signature == sign({"a": 1})

    async def test_tampered_payload_detected(self, audit_log):
        """Test that changing the payload breaks verification."""
        engine = VerificationEngine(audit_log)
        record = self._record({"a": 1, "b": 2})
        tampered = record.model_copy(update={"payload": {"a": 1, "b": 3}})

        event = await engine.verify(tampered)

        assert event.ok is False
        assert event.signature == record.signature
        assert event.expected != record.signature

    async def test_tampered_signature_detected(self, audit_log):
        """Test that a manually altered signature is reported with expected."""
        engine = VerificationEngine(audit_log)
        record = self._record({"a": 1, "b": 2})
        altered = record.model_copy(update={"signature": "0" * 64})

        event = await engine.verify(altered)

        assert event.ok is False
        assert event.expected == record.signature
        assert event.expected != event.signature
        assert event.error is None

    async def test_unserializable_payload_reports_error(self, audit_log):
        """Test that signing failure becomes an error event, not an exception."""
        engine = VerificationEngine(audit_log)
        payload = {}
        payload["self"] = payload
        record = Record(name="loop.json", payload=payload, signature="0" * 64)

        event = await engine.verify(record)

        assert event.ok is False
        assert event.kind == EventKind.VERIFY_FAILED
        assert event.expected is None
        assert event.error
        assert len(audit_log) == 1

    async def test_quick_verify_always_ok(self, audit_log):
        """Test the fast path: fingerprint only, no comparison."""
        engine = VerificationEngine(audit_log)
        txs = [{"id": "tx7", "amount": 200000, "date": "2025-09-04", "notes": "Contract amount"}]

        event = await engine.quick_verify("Road Repair", txs)

        assert event.ok is True
        assert event.kind == EventKind.QUICK_VERIFIED
        assert event.file == "Road Repair"
        assert event.signature == digest(canonical_payload(txs) + "|Road Repair")
        assert event.expected is None

    async def test_quick_verify_accepts_models(self, audit_log):
        engine = VerificationEngine(audit_log)
        txs = [Transaction(id="tx1", amount=Decimal("5"), date="2025-09-01")]

        event = await engine.quick_verify("School Renovation", txs)

        expected = digest(canonical_payload([tx.model_dump(mode="json") for tx in txs]) + "|School Renovation")
        assert event.signature == expected

    async def test_quick_verify_empty_transactions(self, audit_log):
        engine = VerificationEngine(audit_log)
        event = await engine.quick_verify("Empty", [])
        assert event.ok is True
        assert event.signature == digest("[]|Empty")

    async def test_concurrent_verifications_all_logged(self, audit_log):
        engine = VerificationEngine(audit_log)
        records = [self._record({"n": i}) for i in range(20)]

        events = await asyncio.gather(*(engine.verify(r) for r in records))

        assert all(event.ok for event in events)
        assert len(audit_log) == 20
        assert {e.id for e in audit_log.all()} == {e.id for e in events}
