"""Read-only view of the wiring between nodes."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._algorithms import topological_sort, unsortable_nodes

if TYPE_CHECKING:
    from collections.abc import Callable

    from nodecalc._nodes import NodeId
    from nodecalc._store import GraphStore


@dataclass(frozen=True, slots=True)
class WiringGraph:
    """Directed graph of value flow between the nodes of a store.

    An edge (a, b) means "a feeds b": a is listed in one of b's input slots, or
    b is a's output. Unlike the store, this view may be queried for cycles,
    chain lengths and wiring the evaluator does not support.

    Attributes:
        _predecessors: Mapping from node to the nodes feeding it.
        _successors: Mapping from node to the nodes it feeds.
        operations: Ids of operation nodes.
        dangling: (node, referenced id) pairs whose referenced node is missing.

    """

    _predecessors: dict[NodeId, frozenset[NodeId]] = field(default_factory=dict)
    _successors: dict[NodeId, frozenset[NodeId]] = field(default_factory=dict)
    operations: frozenset[NodeId] = field(default_factory=frozenset)
    dangling: tuple[tuple[NodeId, NodeId], ...] = ()

    @classmethod
    def from_store(cls, store: GraphStore) -> WiringGraph:
        """Build the wiring view of every node in a store.

        References to nodes that no longer exist are left out of the edge set
        and reported in ``dangling``.
        """
        predecessors: defaultdict[NodeId, set[NodeId]] = defaultdict(set)
        successors: defaultdict[NodeId, set[NodeId]] = defaultdict(set)
        dangling: list[tuple[NodeId, NodeId]] = []

        def add_edge(src: NodeId, dst: NodeId) -> None:
            successors[src].add(dst)
            predecessors[dst].add(src)

        for node in store:
            predecessors.setdefault(node.id, set())
            successors.setdefault(node.id, set())
            for upstream in node.inputs.values():
                if upstream in store:
                    add_edge(upstream, node.id)
                else:
                    dangling.append((node.id, upstream))
            if node.output is not None:
                if node.output in store:
                    add_edge(node.id, node.output)
                else:
                    dangling.append((node.id, node.output))

        return cls(
            _predecessors={k: frozenset(v) for k, v in predecessors.items()},
            _successors={k: frozenset(v) for k, v in successors.items()},
            operations=frozenset(node.id for node in store if not node.is_data),
            dangling=tuple(dangling),
        )

    @property
    def nodes(self) -> frozenset[NodeId]:
        return frozenset(self._predecessors) | frozenset(self._successors)

    def predecessors(self, node: NodeId) -> frozenset[NodeId]:
        return self._predecessors.get(node, frozenset())

    def successors(self, node: NodeId) -> frozenset[NodeId]:
        return self._successors.get(node, frozenset())

    def descendants(self, node: NodeId) -> frozenset[NodeId]:
        return self._reachable(node, self.successors)

    @staticmethod
    def _reachable(node: NodeId, step: Callable[[NodeId], frozenset[NodeId]]) -> frozenset[NodeId]:
        visited: set[NodeId] = set()
        stack = list(step(node))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(step(current))
        return frozenset(visited)

    def has_cycle(self) -> bool:
        return bool(unsortable_nodes(dict(self._successors)))

    def cyclic_nodes(self) -> frozenset[NodeId]:
        """Nodes that lie on at least one feedback loop."""
        candidates = unsortable_nodes(dict(self._successors))
        return frozenset(n for n in candidates if n in self.descendants(n))

    def consumers(self, node: NodeId) -> frozenset[NodeId]:
        """Distinct nodes fed by ``node``."""
        return self.successors(node)

    def multi_consumers(self) -> frozenset[NodeId]:
        """Nodes feeding more than one distinct consumer."""
        return frozenset(n for n, targets in self._successors.items() if len(targets) > 1)

    def longest_chain(self) -> int:
        """Number of operation nodes on the longest acyclic path.

        Nodes on or downstream of a cycle are ignored. A chain of ``n``
        operations settles within ``n + 1`` evaluator passes.
        """
        skip = unsortable_nodes(dict(self._successors))
        acyclic = {n: self.successors(n) - skip for n in self.nodes - skip}
        depth: dict[NodeId, int] = {}
        for node in topological_sort(acyclic):
            own = 1 if node in self.operations else 0
            upstream = [depth[p] for p in self.predecessors(node) if p in depth]
            depth[node] = max(upstream, default=0) + own
        return max(depth.values(), default=0)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        return node in self._predecessors or node in self._successors
