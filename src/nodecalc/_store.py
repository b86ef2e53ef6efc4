"""Authoritative in-memory storage of graph nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from ._nodes import Node, NodeId

ID_PREFIX = "node-"


class GraphStore:
    """Mapping of node id to node record for one editor session.

    The store performs no invariant checking; the evaluator and the editor
    keep wiring consistent. Iteration follows insertion order.
    """

    def __init__(self, *, first_id: int = 0) -> None:
        self._nodes: dict[NodeId, Node] = {}
        self._counter = first_id

    def next_id(self) -> NodeId:
        """Allocate a fresh node id. Ids are never handed out twice."""
        node_id = f"{ID_PREFIX}{self._counter}"
        self._counter += 1
        return node_id

    @property
    def counter(self) -> int:
        """Number that the next allocated id will carry."""
        return self._counter

    def advance_counter(self, value: int) -> None:
        """Move the id counter forward (never backwards) to at least ``value``."""
        self._counter = max(self._counter, value)

    def get(self, node_id: NodeId) -> Node | None:
        return self._nodes.get(node_id)

    def set(self, node_id: NodeId, node: Node) -> None:
        self._nodes[node_id] = node

    def delete(self, node_id: NodeId) -> None:
        del self._nodes[node_id]

    def all_ids(self) -> list[NodeId]:
        """Snapshot of all node ids in insertion order."""
        return list(self._nodes)

    def for_each_node(self, fn: Callable[[Node], None]) -> None:
        for node in list(self._nodes.values()):
            fn(node)

    def data_nodes(self) -> list[Node]:
        return [node for node in self._nodes.values() if node.is_data]

    def operation_nodes(self) -> list[Node]:
        return [node for node in self._nodes.values() if not node.is_data]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))
