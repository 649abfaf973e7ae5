"""Tests for the orchestrator flows and configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fintrust.config import AppSettings, get_settings, validate_all_settings
from fintrust.graph import GraphConsistencyError
from fintrust.models.record import EventKind
from fintrust.orchestrator import create_app_components, load_budget_file

SAMPLE_BUDGET_PATH = Path(__file__).resolve().parent.parent / "app" / "sample_budget.json"


@pytest.fixture
def components(sample_budget):
    return create_app_components(budget=sample_budget)


class TestRecordFlow:
    """Tests for upload and verification through RecordFlow."""

    async def test_upload_then_verify_by_id(self, components):
        record_flow, _, audit_log = components

        record, _ = await record_flow.upload("data.json", b'{"b": 2, "a": 1}')
        event = await record_flow.verify_by_id(record.id)

        assert event.ok is True
        assert record_flow.records() == (record,)
        assert [e.kind for e in audit_log.all()] == [EventKind.VERIFIED, EventKind.INGESTED]

    async def test_failed_upload_not_listed(self, components):
        record_flow, _, _ = components

        record, event = await record_flow.upload("bad.json", b"{")

        assert record is None
        assert record_flow.records() == ()
        assert record_flow.verification_log() == (event,)

    async def test_verify_unknown_id_is_logged(self, components):
        record_flow, _, audit_log = components

        event = await record_flow.verify_by_id("up_missing")

        assert event.ok is False
        assert event.kind == EventKind.VERIFY_FAILED
        assert "up_missing" in event.error
        assert len(audit_log) == 1

    async def test_verification_log_limit(self, components):
        record_flow, _, _ = components
        for i in range(3):
            await record_flow.upload(f"f{i}.csv", b"a\n1")

        assert len(record_flow.verification_log(limit=2)) == 2
        assert record_flow.verification_log(limit=1)[0].file == "f2.csv"


class TestBudgetFlow:
    """Tests for the budget explorer flow."""

    def test_flow_graph(self, components):
        _, budget_flow, _ = components
        graph = budget_flow.flow_graph()
        assert graph.node_names[0] == "Budget"
        assert len(graph.links) == 8

    def test_replace_budget(self, components, small_budget):
        _, budget_flow, _ = components

        budget_flow.replace_budget(small_budget)

        assert budget_flow.flow_graph().node_names == ["Budget", "Education", "Scholarships"]

    def test_inconsistent_budget_raises(self, components, small_budget):
        _, budget_flow, _ = components
        small_budget["projects"][0]["dept"] = "Nowhere"
        budget_flow.replace_budget(small_budget)

        with pytest.raises(GraphConsistencyError):
            budget_flow.flow_graph()

    def test_projects_and_lookup(self, components):
        _, budget_flow, _ = components
        assert [p.id for p in budget_flow.projects("Health")] == ["Clinic Setup"]
        assert budget_flow.project("Scholarships").dept == "Education"
        assert budget_flow.summary().unallocated == 0

    async def test_quick_verify_project(self, components):
        _, budget_flow, audit_log = components

        event = await budget_flow.quick_verify_project("Road Repair")

        assert event.ok is True
        assert event.kind == EventKind.QUICK_VERIFIED
        assert audit_log.latest() is event

    async def test_quick_verify_unknown_project(self, components):
        _, budget_flow, _ = components

        event = await budget_flow.quick_verify_project("Moon Base")

        assert event.ok is False
        assert "Moon Base" in event.error

    async def test_flows_share_one_log(self, components):
        record_flow, budget_flow, audit_log = components

        await record_flow.upload("a.csv", b"x\n1")
        await budget_flow.quick_verify_project("Scholarships")

        assert len(audit_log) == 2
        assert record_flow.verification_log()[0].file == "Scholarships"

    def test_default_budget_is_empty(self):
        _, budget_flow, _ = create_app_components()
        assert budget_flow.flow_graph().node_names == ["Budget"]

    def test_load_budget_file(self):
        tree = load_budget_file(SAMPLE_BUDGET_PATH)
        assert tree.projects[-1].id == "Road Repair"


class TestSettings:
    """Tests for AppSettings."""

    def test_defaults(self, monkeypatch):
        for name in ("MAX_UPLOAD_SIZE_MB", "SUPPORTED_EXTENSIONS", "LOG_LEVEL"):
            monkeypatch.delenv(f"FINTRUST_{name}", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.max_upload_size_bytes == 10 * 1024 * 1024
        assert settings.supported_extensions_list == ["csv", "json"]
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FINTRUST_MAX_UPLOAD_SIZE_MB", "2")
        monkeypatch.setenv("FINTRUST_LOG_LEVEL", "debug")
        settings = AppSettings(_env_file=None)
        assert settings.max_upload_size_bytes == 2 * 1024 * 1024
        assert settings.log_level == "DEBUG"

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        monkeypatch.delenv("FINTRUST_DEBUG_MODE", raising=False)
        assert AppSettings(_env_file=None, log_level="warning").effective_log_level == "WARNING"

        monkeypatch.setenv("FINTRUST_DEBUG_MODE", "true")
        settings = AppSettings(_env_file=None, log_level="warning")
        assert settings.debug_mode is True
        assert settings.effective_log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, log_level="LOUD")

    def test_upload_limit_bounds(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, max_upload_size_mb=0)

    def test_validate_all_settings(self):
        get_settings.cache_clear()
        assert validate_all_settings()["app"] is True
