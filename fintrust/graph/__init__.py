"""Budget flow graph package."""

from fintrust.graph.builder import (
    ROOT_NODE_NAME,
    GraphConsistencyError,
    build_flow_graph,
)
from fintrust.graph.explorer import (
    AllocationSummary,
    CategoryAllocation,
    allocation_summary,
    find_project,
    projects_for_department,
    transactions_for,
)

__all__ = [
    "ROOT_NODE_NAME",
    "AllocationSummary",
    "CategoryAllocation",
    "GraphConsistencyError",
    "allocation_summary",
    "build_flow_graph",
    "find_project",
    "projects_for_department",
    "transactions_for",
]
