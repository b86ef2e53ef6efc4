"""Graph algorithms over successor mappings."""

from collections import defaultdict, deque
from collections.abc import Collection, Hashable, Mapping


def _kahn[T: Hashable](successors: Mapping[T, Collection[T]]) -> tuple[list[T], set[T]]:
    """Run Kahn's algorithm and return (order, nodes left over on or behind a cycle)."""
    indegree: defaultdict[T, int] = defaultdict(int)
    for node, targets in successors.items():
        indegree[node] = indegree.get(node, 0)
        for target in targets:
            indegree[target] += 1

    queue = deque(node for node, deg in indegree.items() if deg == 0)
    order: list[T] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for target in successors.get(node, ()):
            indegree[target] -= 1
            if indegree[target] == 0:
                queue.append(target)

    return order, set(indegree) - set(order)


def topological_sort[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph so every node comes before the nodes it feeds.

    Args:
        successors: Mapping from node to the nodes it feeds. An entry
            ``a: [b]`` means a value flows from a to b.

    Returns:
        List of nodes in topological order.

    Raises:
        ValueError: If the graph contains a cycle.

    Example:
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']

    """
    order, leftover = _kahn(successors)
    if leftover:
        msg = "Cycle detected in graph"
        raise ValueError(msg)
    return order


def unsortable_nodes[T: Hashable](successors: Mapping[T, Collection[T]]) -> frozenset[T]:
    """Nodes that cannot be ordered: members of cycles and everything downstream of them."""
    _, leftover = _kahn(successors)
    return frozenset(leftover)
