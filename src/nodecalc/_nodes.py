"""Node record stored in the graph."""

from dataclasses import dataclass, field

from ._kinds import NodeKind, OperatorDomain, Slot
from ._values import UNSET, Value

type NodeId = str


@dataclass(slots=True)
class Node:
    """A single node of the computation graph.

    Data nodes (scalar, vector, matrix) carry a user-entered ``operand_value``;
    operation nodes carry an ``operator`` and its ``domain``. Both kinds carry
    wiring and the evaluator-derived ``settled_value``.

    Attributes:
        id: Unique identifier, never reused while the store exists.
        kind: Which of the closed set of node kinds this is.
        operand_value: Literal value of a data node. Superseded by
            ``settled_value`` while the node has an incoming connection.
        operator: Operator symbol of an operation node.
        domain: Operator domain of an operation node.
        inputs: Maps input slot to the id of the upstream node feeding it.
        output: Id of the single downstream node, if any.
        settled_value: Most recent value computed or propagated by the evaluator.
        is_derived: Auto-created result sink of an operation node.
        has_error: The last literal entered for this node failed validation.

    """

    id: NodeId
    kind: NodeKind
    operand_value: Value = UNSET
    operator: str | None = None
    domain: OperatorDomain | None = None
    inputs: dict[Slot, NodeId] = field(default_factory=dict)
    output: NodeId | None = None
    settled_value: Value = UNSET
    is_derived: bool = False
    has_error: bool = False

    @property
    def is_data(self) -> bool:
        return self.kind.is_data

    @property
    def has_incoming(self) -> bool:
        return len(self.inputs) > 0

    def effective_value(self) -> Value:
        """Value this node contributes to the nodes it feeds.

        Operation nodes contribute their last computed result. Data nodes
        contribute the settled value while connected, their literal otherwise,
        and nothing while an unconnected literal is flagged as invalid.
        """
        if not self.is_data:
            return self.settled_value
        if self.has_incoming:
            return self.settled_value
        if self.has_error:
            return UNSET
        return self.operand_value
