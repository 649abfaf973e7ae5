"""
Main Orchestrator for FinTrust

This module ties together all the components and defines the
end-to-end flows for:
1. Records (upload → parse → sign → store → verify)
2. Budget (tree → flow graph, drill-down, quick project check)

DESIGN DECISION: Both flows share ONE audit log, created here and
injected everywhere. The log is the single place where ordering of
ingest and verification events is decided.
"""

import json
from pathlib import Path
from typing import Mapping, Optional, Union

from fintrust.audit import AuditLog
from fintrust.config import get_settings
from fintrust.graph import (
    AllocationSummary,
    allocation_summary,
    build_flow_graph,
    find_project,
    projects_for_department,
)
from fintrust.ingestion import IngestionPipeline
from fintrust.integrity import VerificationEngine
from fintrust.ledger import RecordLedger, RecordNotFoundError
from fintrust.models.budget import BudgetTree, FlowGraph, Project
from fintrust.models.record import Record, VerificationEvent, VerificationEventBuilder


class RecordFlow:
    """
    Orchestrates uploaded records.

    Flow:
    1. Upload → IngestionPipeline parses and signs, ledger stores the Record
    2. Verify → VerificationEngine recomputes and compares the signature

    Failures at any step surface as log events, never as exceptions.
    """

    def __init__(
        self,
        audit_log: AuditLog,
        ledger: Optional[RecordLedger] = None,
        pipeline: Optional[IngestionPipeline] = None,
        verifier: Optional[VerificationEngine] = None,
    ):
        self._audit_log = audit_log
        self._ledger = ledger if ledger is not None else RecordLedger()
        self._pipeline = pipeline or IngestionPipeline(audit_log, self._ledger)
        self._verifier = verifier or VerificationEngine(audit_log)

    async def upload(
        self,
        filename: str,
        raw_content: bytes,
    ) -> tuple[Optional[Record], VerificationEvent]:
        """Ingest an uploaded file. Returns (record or None, event)."""
        return await self._pipeline.ingest(filename, raw_content)

    async def verify(self, record: Record) -> VerificationEvent:
        return await self._verifier.verify(record)

    async def verify_by_id(self, record_id: str) -> VerificationEvent:
        """
        Verify a stored record.

        An unknown id is logged as a failed verification.
        """
        try:
            record = self._ledger.get(record_id)
        except RecordNotFoundError as e:
            event = VerificationEventBuilder.verify_failed(file=record_id, error=str(e))
            self._audit_log.append(event)
            return event
        return await self._verifier.verify(record)

    def records(self) -> tuple[Record, ...]:
        """Uploaded records, newest first."""
        return self._ledger.all()

    def verification_log(self, limit: Optional[int] = None) -> tuple[VerificationEvent, ...]:
        """Verification log, newest first, optionally truncated."""
        if limit is None:
            return self._audit_log.all()
        return self._audit_log.recent(limit)


class BudgetFlow:
    """
    Orchestrates the budget explorer.

    Holds the current BudgetTree. The flow graph is rebuilt from the tree
    on every request; there is no cached graph to invalidate.
    """

    def __init__(
        self,
        budget: Union[BudgetTree, Mapping],
        verifier: VerificationEngine,
        audit_log: AuditLog,
    ):
        self._budget = self._coerce(budget)
        self._verifier = verifier
        self._audit_log = audit_log

    @staticmethod
    def _coerce(budget: Union[BudgetTree, Mapping]) -> BudgetTree:
        if isinstance(budget, BudgetTree):
            return budget
        return BudgetTree.model_validate(budget)

    @property
    def budget(self) -> BudgetTree:
        return self._budget

    def replace_budget(self, budget: Union[BudgetTree, Mapping]) -> None:
        self._budget = self._coerce(budget)

    def flow_graph(self) -> FlowGraph:
        """
        Build the flow graph for the current budget.

        Raises:
            GraphConsistencyError: If the budget is inconsistent
        """
        return build_flow_graph(self._budget)

    def projects(self, dept: Optional[str] = None) -> list[Project]:
        return projects_for_department(self._budget, dept)

    def project(self, project_id: str) -> Optional[Project]:
        return find_project(self._budget, project_id)

    def summary(self) -> AllocationSummary:
        return allocation_summary(self._budget)

    async def quick_verify_project(self, project_id: str) -> VerificationEvent:
        """
        Fingerprint a project's transactions (demonstration only, always ok).

        An unknown project id is logged as a failed verification.
        """
        project = find_project(self._budget, project_id)
        if project is None:
            event = VerificationEventBuilder.verify_failed(
                file=project_id,
                error=f"No project with id {project_id!r}",
            )
            self._audit_log.append(event)
            return event
        return await self._verifier.quick_verify(project.id, project.txs)


def load_budget_file(path: Union[str, Path]) -> BudgetTree:
    """
    Load a BudgetTree from a JSON file.

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If the content is not a valid budget
    """
    with open(path, encoding="utf-8") as f:
        return BudgetTree.model_validate(json.load(f))


def create_app_components(
    budget: Union[BudgetTree, Mapping, None] = None,
) -> tuple[RecordFlow, BudgetFlow, AuditLog]:
    """
    Factory function to create all application components.

    Args:
        budget: Budget to explore. Defaults to an empty budget.

    Returns:
        (record_flow, budget_flow, audit_log)
    """
    settings = get_settings().app

    audit_log = AuditLog()
    ledger = RecordLedger()
    verifier = VerificationEngine(audit_log)
    pipeline = IngestionPipeline(
        audit_log,
        ledger,
        max_upload_size_bytes=settings.max_upload_size_bytes,
    )

    record_flow = RecordFlow(
        audit_log=audit_log,
        ledger=ledger,
        pipeline=pipeline,
        verifier=verifier,
    )
    budget_flow = BudgetFlow(
        budget=budget if budget is not None else BudgetTree(total=0),
        verifier=verifier,
        audit_log=audit_log,
    )

    return record_flow, budget_flow, audit_log
