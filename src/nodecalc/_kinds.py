"""Closed enumerations shared by the node model, operators and evaluator."""

from enum import StrEnum, auto, unique


@unique
class NodeKind(StrEnum):
    """The kind of node in the computation graph."""

    SCALAR = auto()  # Data node holding a single number
    VECTOR = auto()  # Data node holding a flat sequence of numbers
    MATRIX = auto()  # Data node holding a rectangular sequence of rows
    OPERATION = auto()  # Applies an operator to its upstream inputs

    @property
    def is_data(self) -> bool:
        return self is not NodeKind.OPERATION


@unique
class OperatorDomain(StrEnum):
    """Type family an operation node is scoped to."""

    SCALAR = auto()
    VECTOR = auto()
    MATRIX = auto()


@unique
class Operator(StrEnum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    POW = "pow"
    DOT = "dot"
    CROSS = "cross"
    MATMUL = "matmul"
    DET = "det"
    TRANSPOSE = "transpose"


@unique
class Slot(StrEnum):
    """Input slot identifiers.

    Data nodes accept a single connection on ``in``; operation nodes take their
    first and second operands on ``in1`` and ``in2``.
    """

    IN = "in"
    IN1 = "in1"
    IN2 = "in2"
