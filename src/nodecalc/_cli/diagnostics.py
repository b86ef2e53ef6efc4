"""Static consistency checks over a stored graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING

from nodecalc._graph import WiringGraph
from nodecalc._kinds import Slot
from nodecalc._ops import is_valid_operator, operators_for

if TYPE_CHECKING:
    from nodecalc._nodes import Node, NodeId
    from nodecalc._store import GraphStore


class Severity(StrEnum):
    ERROR = auto()  # The graph is inconsistent; evaluation results are unreliable
    WARNING = auto()  # Evaluates, but with bounded or unsupported behavior


@dataclass(frozen=True, slots=True)
class GraphIssue:
    severity: Severity
    node_id: NodeId | None
    message: str


@dataclass(frozen=True, slots=True)
class Diagnosis:
    """Result of checking a graph.

    Attributes:
        issues: Problems found, in discovery order.
        longest_chain: Operation nodes on the longest acyclic path.
        has_cycle: Whether the wiring contains a feedback loop.

    """

    issues: list[GraphIssue]
    longest_chain: int
    has_cycle: bool

    @property
    def errors(self) -> list[GraphIssue]:
        return [issue for issue in self.issues if issue.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[GraphIssue]:
        return [issue for issue in self.issues if issue.severity is Severity.WARNING]

    @property
    def is_consistent(self) -> bool:
        return not self.errors


_DATA_SLOTS = frozenset({Slot.IN})
_OPERATION_SLOTS = frozenset({Slot.IN1, Slot.IN2})


def _node_issues(node: Node) -> list[GraphIssue]:
    issues: list[GraphIssue] = []
    if node.is_data:
        if node.operator is not None or node.domain is not None:
            issues.append(GraphIssue(Severity.ERROR, node.id, f"{node.kind} node carries an operator"))
        allowed = _DATA_SLOTS
    else:
        if node.domain is None:
            issues.append(GraphIssue(Severity.ERROR, node.id, "operation node has no domain"))
        elif not is_valid_operator(node.domain, node.operator):
            valid = ", ".join(operators_for(node.domain))
            issues.append(
                GraphIssue(
                    Severity.ERROR,
                    node.id,
                    f"operator {node.operator!r} is not valid for the {node.domain} domain (expected one of: {valid})",
                ),
            )
        allowed = _OPERATION_SLOTS
    issues.extend(
        GraphIssue(Severity.ERROR, node.id, f"input slot '{slot}' is not used by {node.kind} nodes")
        for slot in node.inputs
        if slot not in allowed
    )
    return issues


def _wiring_symmetry_issues(store: GraphStore) -> list[GraphIssue]:
    """Connections recorded on only one side."""
    issues: list[GraphIssue] = []
    for node in store:
        for upstream_id in node.inputs.values():
            upstream = store.get(upstream_id)
            if upstream is not None and upstream.output != node.id:
                issues.append(
                    GraphIssue(
                        Severity.WARNING,
                        upstream_id,
                        f"feeds {node.id} but its output points to {upstream.output or 'nothing'}",
                    ),
                )
    return issues


def diagnose(store: GraphStore, *, max_iterations: int) -> Diagnosis:
    """Check a graph for inconsistent nodes and wiring the evaluator handles poorly.

    Errors:
        - operators outside their domain's set, or operation nodes without a domain
        - input slots that the node kind does not use
        - references to nodes that do not exist

    Warnings:
        - feedback loops (evaluation stops at the iteration bound)
        - nodes feeding more than one consumer
        - connections recorded on only one side
        - dependency chains longer than the iteration bound allows to settle

    """
    graph = WiringGraph.from_store(store)
    issues: list[GraphIssue] = []

    for node in store:
        issues.extend(_node_issues(node))

    issues.extend(
        GraphIssue(Severity.ERROR, node_id, f"references missing node '{missing}'")
        for node_id, missing in graph.dangling
    )

    cyclic = graph.cyclic_nodes()
    if cyclic:
        issues.append(
            GraphIssue(
                Severity.WARNING,
                None,
                f"feedback loop through {', '.join(sorted(cyclic))}; evaluation stops after {max_iterations} passes",
            ),
        )

    issues.extend(
        GraphIssue(Severity.WARNING, node_id, f"feeds {len(graph.consumers(node_id))} consumers")
        for node_id in sorted(graph.multi_consumers())
    )
    issues.extend(_wiring_symmetry_issues(store))

    longest = graph.longest_chain()
    # A chain of n operations settles within n + 1 passes.
    if longest + 1 > max_iterations:
        issues.append(
            GraphIssue(
                Severity.WARNING,
                None,
                f"longest chain has {longest} operations and may not settle within {max_iterations} passes",
            ),
        )

    return Diagnosis(issues=issues, longest_chain=longest, has_cycle=graph.has_cycle())
