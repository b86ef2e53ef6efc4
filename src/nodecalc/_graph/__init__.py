"""Wiring graph diagnostics.

This module contains:
- WiringGraph: An immutable view of value flow between stored nodes
- topological_sort: Algorithm for ordering nodes by the flow of values
"""

from ._algorithms import topological_sort, unsortable_nodes
from ._wiring import WiringGraph

__all__ = ["WiringGraph", "topological_sort", "unsortable_nodes"]
