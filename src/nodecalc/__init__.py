"""Fixpoint evaluator for scalar, vector and matrix node graphs."""

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "TYPE_MISMATCH",
    "UNSET",
    "Editor",
    "EditorError",
    "ErrorValue",
    "EvaluationReport",
    "Evaluator",
    "GraphDocument",
    "GraphFileError",
    "GraphStore",
    "Matrix",
    "Node",
    "NodeId",
    "NodeKind",
    "Operator",
    "OperatorDomain",
    "Scalar",
    "Slot",
    "Unset",
    "Value",
    "Vector",
    "WiringError",
    "WiringGraph",
    "apply_operator",
    "classify",
    "coerce",
    "effective_value",
    "evaluate_graph",
    "format_value",
    "load_graph",
    "operators_for",
    "parse_literal",
    "same_value",
    "save_graph",
]

from ._editor import Editor, EditorError, WiringError
from ._eval_engine import DEFAULT_MAX_ITERATIONS, EvaluationReport, Evaluator, effective_value, evaluate_graph
from ._graph import WiringGraph
from ._io import GraphDocument, GraphFileError, load_graph, save_graph
from ._kinds import NodeKind, Operator, OperatorDomain, Slot
from ._nodes import Node, NodeId
from ._ops import apply_operator, operators_for
from ._store import GraphStore
from ._values import (
    TYPE_MISMATCH,
    UNSET,
    ErrorValue,
    Matrix,
    Scalar,
    Unset,
    Value,
    Vector,
    classify,
    coerce,
    format_value,
    parse_literal,
    same_value,
)
