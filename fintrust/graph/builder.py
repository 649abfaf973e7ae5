"""
Flow Graph Builder

Turns a BudgetTree into a node/link graph:

    Budget ──► category ──► project

DESIGN DECISION: The builder refuses inconsistent input instead of
guessing. A project whose department does not exist, or two entities
sharing a name, raise GraphConsistencyError. A malformed budget is a data
bug; drawing a silently wrong chart would hide it.

The builder is pure: the same tree always gives the same nodes and links,
in the same order.
"""

from typing import Mapping, Union

import structlog

from fintrust.models.budget import BudgetTree, FlowGraph, FlowLink, FlowNode


ROOT_NODE_NAME = "Budget"

logger = structlog.get_logger(__name__)


class GraphConsistencyError(Exception):
    """Budget tree cannot be drawn: duplicate names or dangling department references."""
    pass


def _index_names(names: list[str]) -> dict[str, int]:
    index: dict[str, int] = {}
    for position, name in enumerate(names):
        if name in index:
            raise GraphConsistencyError(
                f"Duplicate node name {name!r} (positions {index[name]} and {position})"
            )
        index[name] = position
    return index


def build_flow_graph(tree: Union[BudgetTree, Mapping]) -> FlowGraph:
    """
    Build the flow graph of a budget.

    Nodes are the root, then every category, then every project, each in
    input order. Links are root → category for every category, then
    category → project for every project.

    Raises:
        GraphConsistencyError: On duplicate names or unknown departments
        pydantic.ValidationError: If a mapping does not match BudgetTree
    """
    if not isinstance(tree, BudgetTree):
        tree = BudgetTree.model_validate(tree)

    names = (
        [ROOT_NODE_NAME]
        + [category.id for category in tree.breakdown]
        + [project.id for project in tree.projects]
    )
    try:
        index = _index_names(names)
    except GraphConsistencyError as e:
        logger.error("graph_inconsistent", error=str(e))
        raise

    category_names = {category.id for category in tree.breakdown}
    root = index[ROOT_NODE_NAME]

    links = [
        FlowLink(source=root, target=index[category.id], value=category.amount)
        for category in tree.breakdown
    ]
    for project in tree.projects:
        if project.dept not in category_names:
            logger.error("graph_inconsistent", project=project.id, dept=project.dept)
            raise GraphConsistencyError(
                f"Project {project.id!r} references unknown department {project.dept!r}"
            )
        links.append(
            FlowLink(
                source=index[project.dept],
                target=index[project.id],
                value=project.amount,
            )
        )

    graph = FlowGraph(nodes=[FlowNode(name=name) for name in names], links=links)
    logger.debug("graph_built", nodes=len(graph.nodes), links=len(graph.links))
    return graph
