"""Value resolution utilities for the evaluation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nodecalc._kinds import Slot
from nodecalc._values import TYPE_MISMATCH, UNSET, ErrorValue, Unset, Value, value_kind

if TYPE_CHECKING:
    from collections.abc import Callable

    from nodecalc._kinds import NodeKind
    from nodecalc._nodes import Node, NodeId
    from nodecalc._store import GraphStore

type ValueLookup = Callable[[NodeId], Value]


def effective_value(store: GraphStore, node_id: NodeId | None) -> Value:
    """Look up the value a node currently contributes to its consumers.

    Missing ids (no connection, or a dangling reference to a deleted node)
    read as Unset.
    """
    if node_id is None:
        return UNSET
    node = store.get(node_id)
    if node is None:
        return UNSET
    return node.effective_value()


def resolve_operands(node: Node, lookup: ValueLookup) -> tuple[Value, Value]:
    """Read the values on an operation node's first and second input slots."""
    first_id = node.inputs.get(Slot.IN1)
    second_id = node.inputs.get(Slot.IN2)
    first = lookup(first_id) if first_id is not None else UNSET
    second = lookup(second_id) if second_id is not None else UNSET
    return first, second


def is_propagable(value: Value, target_kind: NodeKind) -> bool:
    """Check whether a value may be written into a data node of a given kind.

    Unset and ErrorValue always propagate; data values only into a node of
    the matching kind.
    """
    match value:
        case Unset() | ErrorValue():
            return True
        case _:
            return value_kind(value) == target_kind


def propagated_value(value: Value, target_kind: NodeKind) -> Value:
    """The value a data node of ``target_kind`` settles on when fed ``value``."""
    return value if is_propagable(value, target_kind) else TYPE_MISMATCH
