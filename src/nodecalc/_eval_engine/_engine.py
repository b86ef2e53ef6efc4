"""Fixpoint evaluation engine for node graphs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nodecalc._graph import WiringGraph
from nodecalc._ops import apply_operator
from nodecalc._values import UNSET, ErrorValue, Value, coerce, same_value

from ._resolution import effective_value, is_propagable, propagated_value, resolve_operands

if TYPE_CHECKING:
    from collections.abc import Callable

    from nodecalc._nodes import Node, NodeId
    from nodecalc._store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 10

# Runtime faults that a single operation node may raise without aborting the pass.
_NODE_FAULTS = (TypeError, ValueError, ArithmeticError, AttributeError, KeyError, RuntimeError)


@dataclass(frozen=True, slots=True)
class EvaluationReport:
    """Outcome of one full evaluation pass.

    Attributes:
        values: Effective value of every data node after the pass.
        errors: (node_id, message) for data nodes settled on an ErrorValue.
        faults: (node_id, message) for operation nodes whose evaluation raised
            unexpectedly and was converted to an ErrorValue.
        iterations: Number of fixpoint passes performed.
        converged: Whether the last pass produced no changes.
        changed: Nodes whose settled value differs from before the pass.
        multi_consumers: Nodes observed feeding more than one consumer.

    """

    values: dict[NodeId, Value] = field(default_factory=dict)
    errors: list[tuple[NodeId, str]] = field(default_factory=list)
    faults: list[tuple[NodeId, str]] = field(default_factory=list)
    iterations: int = 0
    converged: bool = True
    changed: frozenset[NodeId] = field(default_factory=frozenset)
    multi_consumers: frozenset[NodeId] = field(default_factory=frozenset)

    @property
    def success(self) -> bool:
        """Check if every data node settled without an error."""
        return len(self.errors) == 0 and len(self.faults) == 0

    @property
    def bound_exceeded(self) -> bool:
        return not self.converged

    def get_value(self, node_id: NodeId) -> Value:
        """Get the settled effective value of a data node.

        Raises:
            KeyError: If no data node with this id was evaluated.

        """
        return self.values[node_id]


class Evaluator:
    """Brings a graph store to a consistent fixpoint after a mutation.

    Each call to :meth:`evaluate` runs synchronously to completion:

    1. Derived result nodes are reset to Unset.
    2. Every operation node is recomputed from its current inputs and its
       result pushed into its downstream data node; passes repeat while any
       settled value changes, up to ``max_iterations``.
    3. Every data node is reported to ``on_node_settled``.

    Graph-data problems never raise; they settle as ErrorValues.
    """

    def __init__(
        self,
        store: GraphStore,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        on_node_settled: Callable[[NodeId, Value], None] | None = None,
        value_lookup: Callable[[NodeId], object] | None = None,
    ) -> None:
        if max_iterations < 1:
            msg = f"max_iterations must be at least 1, got {max_iterations}"
            raise ValueError(msg)
        self.store = store
        self.max_iterations = max_iterations
        self.on_node_settled = on_node_settled
        self._value_lookup = value_lookup

    def _lookup(self, node_id: NodeId) -> Value:
        if self._value_lookup is not None:
            # External lookups may hand back plain numbers or lists.
            return coerce(self._value_lookup(node_id))
        return effective_value(self.store, node_id)

    def evaluate(self) -> EvaluationReport:
        """Run one full evaluation pass over the store."""
        logger.debug("Evaluating graph with %d nodes", len(self.store))
        before = {node.id: node.settled_value for node in self.store}
        faults: dict[NodeId, str] = {}
        mismatches: set[tuple[NodeId, NodeId]] = set()

        self._reset()

        multi_consumers = WiringGraph.from_store(self.store).multi_consumers()
        for node_id in sorted(multi_consumers):
            logger.warning("Node %s feeds more than one consumer; only single-output wiring is supported", node_id)

        changed = True
        iterations = 0
        while changed and iterations < self.max_iterations:
            changed = False
            iterations += 1
            for node_id in self.store.all_ids():
                node = self.store.get(node_id)
                if node is None:
                    continue
                if node.is_data:
                    outgoing = node.effective_value()
                else:
                    outgoing = self._compute(node, faults)
                    if not same_value(node.settled_value, outgoing):
                        node.settled_value = outgoing
                        changed = True
                if self._propagate(node, outgoing, mismatches):
                    changed = True
            logger.debug("Pass %d complete (changed=%s)", iterations, changed)

        converged = not changed
        if not converged:
            cyclic = WiringGraph.from_store(self.store).cyclic_nodes()
            logger.warning(
                "Max evaluation iterations (%d) reached without a fixpoint%s",
                self.max_iterations,
                f"; feedback loop through {', '.join(sorted(cyclic))}" if cyclic else "",
            )

        values = self._sync_display()
        errors = [(node_id, value.message) for node_id, value in values.items() if isinstance(value, ErrorValue)]
        changed_ids = frozenset(
            node.id for node in self.store if not same_value(before.get(node.id, UNSET), node.settled_value)
        )

        logger.debug("Evaluation complete after %d passes", iterations)
        return EvaluationReport(
            values=values,
            errors=errors,
            faults=list(faults.items()),
            iterations=iterations,
            converged=converged,
            changed=changed_ids,
            multi_consumers=multi_consumers,
        )

    def _reset(self) -> None:
        for node in self.store.data_nodes():
            if node.is_derived:
                node.settled_value = UNSET

    def _compute(self, node: Node, faults: dict[NodeId, str]) -> Value:
        """Compute an operation node's result, containing any fault to this node."""
        try:
            first, second = resolve_operands(node, self._lookup)
            result = apply_operator(node.domain, node.operator, first, second)
        except _NODE_FAULTS as e:
            logger.exception("Operation %r failed on node %s", node.operator, node.id)
            faults[node.id] = str(e)
            return ErrorValue(f"Calculation failed: {e}")
        logger.debug("Node %s (%s %s) -> %r", node.id, node.domain, node.operator, result)
        return result

    def _sync_display(self) -> dict[NodeId, Value]:
        """Report every data node's effective value to the display callback."""
        values: dict[NodeId, Value] = {}
        for node in self.store.data_nodes():
            value = node.effective_value()
            values[node.id] = value
            if self.on_node_settled is not None:
                self.on_node_settled(node.id, value)
        return values

    def _propagate(self, source: Node, value: Value, mismatches: set[tuple[NodeId, NodeId]]) -> bool:
        """Push a value into the source's downstream data node.

        A type mismatch is logged once per (source, target) edge and evaluation.

        Returns:
            True if the downstream settled value changed.

        """
        if source.output is None:
            return False
        target = self.store.get(source.output)
        # Operation nodes pull their operands; nothing to push.
        if target is None or not target.is_data:
            return False

        new_value = propagated_value(value, target.kind)
        if not is_propagable(value, target.kind) and (source.id, target.id) not in mismatches:
            mismatches.add((source.id, target.id))
            logger.warning(
                "Type mismatch: cannot propagate %r from %s node %s to %s node %s",
                value,
                source.kind,
                source.id,
                target.kind,
                target.id,
            )

        if same_value(target.settled_value, new_value):
            return False
        target.settled_value = new_value
        return True


def evaluate_graph(
    store: GraphStore,
    *,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    on_node_settled: Callable[[NodeId, Value], None] | None = None,
) -> EvaluationReport:
    """Evaluate a graph store once.

    Example:
        >>> report = evaluate_graph(store)
        >>> if report.success:
        ...     print(report.values)

    """
    return Evaluator(store, max_iterations=max_iterations, on_node_settled=on_node_settled).evaluate()
