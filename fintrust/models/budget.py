"""
Budget and Flow Graph Models

A BudgetTree describes how a total budget is split into categories
(departments) and how each category funds projects. A FlowGraph is the
node/link form of the same tree, ready for a flow (Sankey) chart.

DESIGN DECISION: The budget models only check shape. Names are kept
exactly as given (no trimming), amounts are plain numbers (refunds and
corrections can be negative) and transaction dates are free-form text as
exported by the source system. Cross references between categories and
projects are checked by the graph builder, which is the one place that
needs them to be right.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# BUDGET TREE
# =============================================================================

class Transaction(BaseModel):
    """A single payment made against a project."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    amount: Decimal
    date: str = Field(..., description="Payment date as exported, e.g. 2025-09-01")
    notes: str = ""


class BudgetCategory(BaseModel):
    """A top-level allocation (department) of the budget."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Category name, unique within the tree"
    )
    amount: Decimal


class Project(BaseModel):
    """
    A project funded by one category.

    `dept` must name one of the tree's categories, character for character.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Project name, unique across all projects"
    )
    dept: str = Field(
        ...,
        min_length=1,
        description="Category (department) that funds this project"
    )
    amount: Decimal
    vendor: str = ""
    txs: list[Transaction] = Field(default_factory=list)

    @property
    def transactions_total(self) -> Decimal:
        """Sum of all recorded transaction amounts."""
        return sum((tx.amount for tx in self.txs), Decimal("0"))


class BudgetTree(BaseModel):
    """Root of the budget hierarchy: total -> categories -> projects."""
    model_config = ConfigDict(frozen=True)

    total: Decimal
    breakdown: list[BudgetCategory] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)


# =============================================================================
# FLOW GRAPH
# =============================================================================

class FlowNode(BaseModel):
    """A named node of the flow graph."""
    model_config = ConfigDict(frozen=True)

    name: str


class FlowLink(BaseModel):
    """
    A weighted edge of the flow graph.

    `source` and `target` are 0-based indices into FlowGraph.nodes.
    """
    model_config = ConfigDict(frozen=True)

    source: int = Field(..., ge=0)
    target: int = Field(..., ge=0)
    value: Decimal


class FlowGraph(BaseModel):
    """Node/link representation of a BudgetTree."""
    model_config = ConfigDict(frozen=True)

    nodes: list[FlowNode] = Field(default_factory=list)
    links: list[FlowLink] = Field(default_factory=list)

    @property
    def node_names(self) -> list[str]:
        return [node.name for node in self.nodes]

    def to_dict(self) -> dict:
        """
        Convert to the plain {nodes, links} shape chart libraries expect.

        Whole amounts are rendered as ints, everything else as floats.
        """
        return {
            "nodes": [{"name": node.name} for node in self.nodes],
            "links": [
                {
                    "source": link.source,
                    "target": link.target,
                    "value": _as_number(link.value),
                }
                for link in self.links
            ],
        }


def _as_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)
