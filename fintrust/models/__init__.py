"""
Data Models Package

This package contains all Pydantic models used in FinTrust.
All data flowing through the system must conform to these schemas.
"""

from fintrust.models.record import (
    EventKind,
    Record,
    VerificationEvent,
    VerificationEventBuilder,
)
from fintrust.models.budget import (
    BudgetCategory,
    BudgetTree,
    FlowGraph,
    FlowLink,
    FlowNode,
    Project,
    Transaction,
)

__all__ = [
    # Record models
    "EventKind",
    "Record",
    "VerificationEvent",
    "VerificationEventBuilder",
    # Budget models
    "BudgetCategory",
    "BudgetTree",
    "FlowGraph",
    "FlowLink",
    "FlowNode",
    "Project",
    "Transaction",
]
