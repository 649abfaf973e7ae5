"""
Budget Explorer

Read-only lookups over a BudgetTree for drill-down views: which projects
a department funds, a project's transactions, and how much of each
allocation is actually assigned to projects.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fintrust.models.budget import BudgetTree, Project, Transaction


class CategoryAllocation(BaseModel):
    """How one category's allocation is used."""

    category: str
    allocated: Decimal
    assigned_to_projects: Decimal
    project_count: int = Field(ge=0)

    @property
    def unassigned(self) -> Decimal:
        return self.allocated - self.assigned_to_projects


class AllocationSummary(BaseModel):
    """Budget-wide view of allocations."""

    total: Decimal
    allocated: Decimal
    categories: list[CategoryAllocation] = Field(default_factory=list)

    @property
    def unallocated(self) -> Decimal:
        return self.total - self.allocated


def projects_for_department(
    tree: BudgetTree,
    dept: Optional[str] = None,
) -> list[Project]:
    """Projects funded by `dept`, in tree order. All projects when dept is None."""
    if dept is None:
        return list(tree.projects)
    return [project for project in tree.projects if project.dept == dept]


def find_project(tree: BudgetTree, project_id: str) -> Optional[Project]:
    for project in tree.projects:
        if project.id == project_id:
            return project
    return None


def transactions_for(tree: BudgetTree, project_id: str) -> list[Transaction]:
    """Transactions of a project, or an empty list if there is no such project."""
    project = find_project(tree, project_id)
    return list(project.txs) if project else []


def allocation_summary(tree: BudgetTree) -> AllocationSummary:
    """
    Summarize allocations per category.

    Categories appear in tree order. Projects pointing at unknown
    departments are ignored here; the graph builder is where those are
    reported.
    """
    categories = []
    for category in tree.breakdown:
        funded = projects_for_department(tree, category.id)
        categories.append(CategoryAllocation(
            category=category.id,
            allocated=category.amount,
            assigned_to_projects=sum((p.amount for p in funded), Decimal("0")),
            project_count=len(funded),
        ))

    return AllocationSummary(
        total=tree.total,
        allocated=sum((c.amount for c in tree.breakdown), Decimal("0")),
        categories=categories,
    )
