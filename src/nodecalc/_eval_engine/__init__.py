"""Evaluation engine module for nodecalc.

This module brings a mutable node graph to a fixpoint. It repeatedly
recomputes operation nodes and pushes their results downstream until a full
pass changes nothing or the iteration bound is reached.

Key types:
- Evaluator: Owns the evaluation of one GraphStore
- EvaluationReport: Structured result of one evaluation
- evaluate_graph: Functional shortcut for a single evaluation
- effective_value: Default value lookup used for operation inputs
"""

from ._engine import DEFAULT_MAX_ITERATIONS, EvaluationReport, Evaluator, evaluate_graph
from ._resolution import ValueLookup, effective_value, is_propagable

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "EvaluationReport",
    "Evaluator",
    "ValueLookup",
    "effective_value",
    "evaluate_graph",
    "is_propagable",
]
