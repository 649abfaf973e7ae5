"""Shared fixtures for FinTrust tests."""

import json
from pathlib import Path

import pytest

from fintrust.audit import AuditLog
from fintrust.ledger import RecordLedger
from fintrust.models.budget import BudgetTree


SAMPLE_BUDGET_PATH = Path(__file__).resolve().parent.parent / "app" / "sample_budget.json"


@pytest.fixture
def sample_budget_dict() -> dict:
    with open(SAMPLE_BUDGET_PATH, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def sample_budget(sample_budget_dict) -> BudgetTree:
    return BudgetTree.model_validate(sample_budget_dict)


@pytest.fixture
def small_budget() -> dict:
    """One category funding one project."""
    return {
        "total": 400000,
        "breakdown": [{"id": "Education", "amount": 400000}],
        "projects": [
            {
                "id": "Scholarships",
                "dept": "Education",
                "amount": 200000,
                "vendor": "State Edu Fund",
                "txs": [],
            },
        ],
    }


@pytest.fixture
def audit_log() -> AuditLog:
    return AuditLog()


@pytest.fixture
def ledger() -> RecordLedger:
    return RecordLedger()
