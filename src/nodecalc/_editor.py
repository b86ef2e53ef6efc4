"""Headless editor session: node factories, wiring and edits.

The editor is the layer a UI talks to. It mutates the graph store it owns and
re-evaluates after every mutation, so the settled values always reflect the
current graph. Mutations grouped in :meth:`Editor.batch` are evaluated once.
"""

from __future__ import annotations

import logging
import reprlib
from contextlib import contextmanager
from typing import TYPE_CHECKING

from ._eval_engine import DEFAULT_MAX_ITERATIONS, Evaluator
from ._kinds import NodeKind, OperatorDomain, Slot
from ._nodes import Node
from ._ops import lookup, operators_for
from ._store import GraphStore
from ._values import UNSET, classify, parse_literal, same_value, value_kind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ._eval_engine import EvaluationReport
    from ._nodes import NodeId
    from ._values import Value

logger = logging.getLogger(__name__)

DEFAULT_SCALAR = 0
DEFAULT_VECTOR = (0, 0)
DEFAULT_MATRIX = ((1, 0), (0, 1))

_DEFAULT_LITERALS = {
    NodeKind.SCALAR: DEFAULT_SCALAR,
    NodeKind.VECTOR: DEFAULT_VECTOR,
    NodeKind.MATRIX: DEFAULT_MATRIX,
}

_DATA_SLOTS = (Slot.IN,)
_BINARY_SLOTS = (Slot.IN1, Slot.IN2)
_UNARY_SLOTS = (Slot.IN1,)


class EditorError(Exception):
    """An edit the graph model does not allow."""


class WiringError(EditorError):
    """A connection request the graph model does not allow."""


class Editor:
    """One editing session over a graph store.

    Args:
        store: Store to edit. A new, empty store is created if omitted.
        max_iterations: Iteration bound handed to the evaluator.
        on_node_settled: Display callback invoked per data node after each
            evaluation.

    """

    def __init__(
        self,
        store: GraphStore | None = None,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        on_node_settled: Callable[[NodeId, Value], None] | None = None,
    ) -> None:
        self.store = store if store is not None else GraphStore()
        self.evaluator = Evaluator(self.store, max_iterations=max_iterations, on_node_settled=on_node_settled)
        self.last_report: EvaluationReport | None = None
        self._batch_depth = 0

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self) -> EvaluationReport:
        self.last_report = self.evaluator.evaluate()
        return self.last_report

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group several mutations into a single evaluation on exit."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.evaluate()

    def _changed(self) -> None:
        if self._batch_depth == 0:
            self.evaluate()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def node(self, node_id: NodeId) -> Node:
        """Get a node by id.

        Raises:
            EditorError: If no such node exists.

        """
        node = self.store.get(node_id)
        if node is None:
            msg = f"Unknown node '{node_id}'"
            raise EditorError(msg)
        return node

    def value_of(self, node_id: NodeId) -> Value:
        """Effective value of a node as of the last evaluation."""
        return self.node(node_id).effective_value()

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def _add_data_node(self, kind: NodeKind, raw: object, *, derived: bool) -> NodeId:
        value = classify(raw)
        if value is None or value_kind(value) != kind:
            msg = f"Invalid initial {kind} value: {raw!r}"
            raise EditorError(msg)
        node_id = self.store.next_id()
        self.store.set(node_id, Node(id=node_id, kind=kind, operand_value=value, is_derived=derived))
        logger.debug("Added %s node %s", kind, node_id)
        self._changed()
        return node_id

    def add_scalar_node(self, value: object = DEFAULT_SCALAR, *, derived: bool = False) -> NodeId:
        return self._add_data_node(NodeKind.SCALAR, value, derived=derived)

    def add_vector_node(self, value: object = DEFAULT_VECTOR, *, derived: bool = False) -> NodeId:
        return self._add_data_node(NodeKind.VECTOR, value, derived=derived)

    def add_matrix_node(self, value: object = DEFAULT_MATRIX, *, derived: bool = False) -> NodeId:
        return self._add_data_node(NodeKind.MATRIX, value, derived=derived)

    def add_operation_node(
        self,
        domain: OperatorDomain | str,
        operator: str,
        *,
        with_result: bool = True,
    ) -> NodeId:
        """Add an operation node, optionally with its derived result node.

        The result node has the kind of the operator's output and is wired to
        the operation's output. ``cross`` always gets a vector result node, so
        the cross product of two 2D vectors (a scalar) settles on "Type
        Mismatch" there; wire it into a scalar node instead.

        Raises:
            EditorError: If the operator is not part of the domain's set.

        """
        spec = self._operator_spec(domain, operator)
        with self.batch():
            node_id = self.store.next_id()
            self.store.set(
                node_id,
                Node(id=node_id, kind=NodeKind.OPERATION, operator=spec.operator, domain=spec.domain),
            )
            logger.debug("Added operation node %s (%s %s)", node_id, spec.domain, spec.operator)
            if with_result:
                result_id = self._add_data_node(
                    spec.result_kind,
                    _DEFAULT_LITERALS[spec.result_kind],
                    derived=True,
                )
                self.connect(node_id, result_id)
        return node_id

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    @staticmethod
    def _allowed_slots(target: Node) -> tuple[Slot, ...]:
        if target.is_data:
            return _DATA_SLOTS
        spec = lookup(target.domain, target.operator)
        if spec is not None and spec.arity == 1:
            return _UNARY_SLOTS
        return _BINARY_SLOTS

    def connect(self, source_id: NodeId, target_id: NodeId, slot: Slot | str | None = None) -> Slot:
        """Wire ``source_id``'s output into an input slot of ``target_id``.

        Args:
            source_id: Node whose value flows out.
            target_id: Node receiving the value.
            slot: Input slot on the target. Defaults to ``in`` for data nodes
                and the first free operand slot for operation nodes.

        Returns:
            The slot that was connected.

        Raises:
            WiringError: On self-connections, unknown nodes, occupied or
                unusable slots, or a source that already feeds another node.

        """
        if source_id == target_id:
            msg = f"Cannot connect node '{source_id}' to itself"
            raise WiringError(msg)
        try:
            source = self.node(source_id)
            target = self.node(target_id)
        except EditorError as e:
            raise WiringError(str(e)) from e

        if source.output is not None and source.output != target_id:
            msg = (
                f"Node '{source_id}' already feeds '{source.output}'; "
                "feeding more than one consumer is not supported"
            )
            raise WiringError(msg)

        allowed = self._allowed_slots(target)
        if slot is None:
            free = [s for s in allowed if s not in target.inputs]
            if not free:
                msg = f"Node '{target_id}' has no free input slot"
                raise WiringError(msg)
            chosen = free[0]
        else:
            try:
                chosen = Slot(slot)
            except ValueError as e:
                msg = f"Unknown input slot '{slot}'"
                raise WiringError(msg) from e
            if chosen not in allowed:
                msg = f"Node '{target_id}' has no input slot '{chosen}'"
                raise WiringError(msg)
            if chosen in target.inputs:
                msg = f"Input slot '{chosen}' of node '{target_id}' is already connected to '{target.inputs[chosen]}'"
                raise WiringError(msg)

        source.output = target_id
        target.inputs[chosen] = source_id
        if target.is_data:
            # The incoming value supersedes a rejected literal.
            target.has_error = False
        logger.debug("Connected %s -> %s.%s", source_id, target_id, chosen)
        self._changed()
        return chosen

    def disconnect(self, source_id: NodeId, target_id: NodeId) -> None:
        """Remove every connection from ``source_id`` into ``target_id``.

        Raises:
            WiringError: If the two nodes are not connected.

        """
        source = self.store.get(source_id)
        target = self.store.get(target_id)
        slots = [s for s, upstream in target.inputs.items() if upstream == source_id] if target else []
        feeds = source is not None and source.output == target_id
        if not slots and not feeds:
            msg = f"Node '{source_id}' is not connected to '{target_id}'"
            raise WiringError(msg)

        if target is not None:
            for slot in slots:
                del target.inputs[slot]
            if target.is_data:
                target.settled_value = UNSET
                if not target.has_incoming:
                    target.has_error = False
        if source is not None and feeds:
            source.output = None
        logger.debug("Disconnected %s -> %s", source_id, target_id)
        self._changed()

    def delete_node(self, node_id: NodeId) -> None:
        """Delete a node and sever every connection referencing it."""
        self.node(node_id)
        for other in self.store:
            if other.output == node_id:
                other.output = None
            for slot, upstream in list(other.inputs.items()):
                if upstream == node_id:
                    del other.inputs[slot]
        self.store.delete(node_id)
        logger.debug("Deleted node %s", node_id)
        self._changed()

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_operand(self, node_id: NodeId, raw: object) -> bool:
        """Set the literal value of a data node.

        A value that does not fit the node's kind is rejected: the node keeps
        its previous literal, is flagged with ``has_error`` and contributes
        no value until a valid literal is entered.

        Returns:
            True if the value was accepted.

        Raises:
            EditorError: If the node is not a data node or is fed by a connection.

        """
        node = self.node(node_id)
        if not node.is_data:
            msg = f"Node '{node_id}' is an operation node and holds no literal value"
            raise EditorError(msg)
        if node.has_incoming:
            msg = f"Node '{node_id}' receives its value from a connection and cannot be edited"
            raise EditorError(msg)

        value = classify(raw)
        if value is None or value_kind(value) != node.kind:
            logger.warning("Invalid %s input for node %s: %s", node.kind, node_id, reprlib.repr(raw))
            if not node.has_error:
                node.has_error = True
                self._changed()
            return False

        if node.has_error or not same_value(node.operand_value, value):
            node.operand_value = value
            node.has_error = False
            logger.debug("Node %s value set to %r", node_id, value)
            self._changed()
        return True

    def set_operand_text(self, node_id: NodeId, text: str) -> bool:
        """Set a data node's literal from text such as ``3.5`` or ``[[1, 2], [3, 4]]``."""
        parsed = parse_literal(text)
        return self.set_operand(node_id, parsed if parsed is not None else text)

    def set_operator(
        self,
        node_id: NodeId,
        operator: str,
        domain: OperatorDomain | str | None = None,
    ) -> None:
        """Change the operator (and optionally the domain) of an operation node.

        Raises:
            EditorError: If the node is not an operation node or the operator is
                not part of the domain's set.

        """
        node = self.node(node_id)
        if node.is_data:
            msg = f"Node '{node_id}' is a {node.kind} node and has no operator"
            raise EditorError(msg)
        spec = self._operator_spec(domain if domain is not None else node.domain, operator)
        if spec.operator == node.operator and spec.domain == node.domain:
            return
        node.operator = spec.operator
        node.domain = spec.domain
        logger.debug("Operation node %s changed to %s %s", node_id, spec.domain, spec.operator)
        self._changed()

    @staticmethod
    def _operator_spec(domain: OperatorDomain | str | None, operator: str):  # noqa: ANN205
        try:
            resolved = OperatorDomain(domain)  # type: ignore[arg-type]
        except ValueError as e:
            msg = f"Unknown operator domain '{domain}'"
            raise EditorError(msg) from e
        spec = lookup(resolved, operator)
        if spec is None:
            valid = ", ".join(operators_for(resolved))
            msg = f"Invalid operator '{operator}' for the {resolved} domain. Expected one of: {valid}"
            raise EditorError(msg)
        return spec
