"""Operator table keyed by (domain, operator) and the dispatch entry point."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nodecalc._kinds import NodeKind, Operator, OperatorDomain
from nodecalc._values import UNSET, ErrorValue, Unset, Value

from . import _matrix, _scalar, _vector

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True, slots=True)
class OperatorSpec:
    """Description of one operator within a domain.

    Attributes:
        domain: Domain the operator belongs to.
        operator: Operator symbol.
        arity: Number of operands read (1 for det/transpose, 2 otherwise).
        func: Pure function computing the result from the operands.
        result_kind: Node kind of the result sink created for this operator.

    """

    domain: OperatorDomain
    operator: Operator
    arity: int
    func: Callable[..., Value]
    result_kind: NodeKind


def _spec(
    domain: OperatorDomain,
    operator: Operator,
    func: Callable[..., Value],
    result_kind: NodeKind,
    arity: int = 2,
) -> tuple[tuple[OperatorDomain, Operator], OperatorSpec]:
    return (domain, operator), OperatorSpec(domain, operator, arity, func, result_kind)


_S = OperatorDomain.SCALAR
_V = OperatorDomain.VECTOR
_M = OperatorDomain.MATRIX

OPERATORS: dict[tuple[OperatorDomain, Operator], OperatorSpec] = dict(
    [
        _spec(_S, Operator.ADD, _scalar.add, NodeKind.SCALAR),
        _spec(_S, Operator.SUB, _scalar.subtract, NodeKind.SCALAR),
        _spec(_S, Operator.MUL, _scalar.multiply, NodeKind.SCALAR),
        _spec(_S, Operator.DIV, _scalar.divide, NodeKind.SCALAR),
        _spec(_S, Operator.POW, _scalar.power, NodeKind.SCALAR),
        _spec(_V, Operator.ADD, _vector.add, NodeKind.VECTOR),
        _spec(_V, Operator.SUB, _vector.subtract, NodeKind.VECTOR),
        _spec(_V, Operator.MUL, _vector.multiply, NodeKind.VECTOR),
        _spec(_V, Operator.DIV, _vector.divide, NodeKind.VECTOR),
        _spec(_V, Operator.DOT, _vector.dot, NodeKind.SCALAR),
        _spec(_V, Operator.CROSS, _vector.cross, NodeKind.VECTOR),
        _spec(_M, Operator.ADD, _matrix.add, NodeKind.MATRIX),
        _spec(_M, Operator.SUB, _matrix.subtract, NodeKind.MATRIX),
        _spec(_M, Operator.MUL, _matrix.multiply, NodeKind.MATRIX),
        _spec(_M, Operator.MATMUL, _matrix.matmul, NodeKind.MATRIX),
        _spec(_M, Operator.DET, _matrix.determinant, NodeKind.SCALAR, arity=1),
        _spec(_M, Operator.TRANSPOSE, _matrix.transpose, NodeKind.MATRIX, arity=1),
    ],
)


def lookup(domain: OperatorDomain | str | None, operator: str | None) -> OperatorSpec | None:
    """Find the operator spec for a (domain, operator) pair, or None if unknown."""
    if domain is None or operator is None:
        return None
    return OPERATORS.get((domain, operator))  # type: ignore[arg-type]


def operators_for(domain: OperatorDomain) -> tuple[Operator, ...]:
    """Operators legal in a domain, in table order."""
    return tuple(op for (dom, op) in OPERATORS if dom == domain)


def is_valid_operator(domain: OperatorDomain | str | None, operator: str | None) -> bool:
    return lookup(domain, operator) is not None


def apply_operator(
    domain: OperatorDomain | str | None,
    operator: str | None,
    first: Value,
    second: Value = UNSET,
) -> Value:
    """Apply an operator to already-resolved operand values.

    Unary operators read only ``first``. If any operand they read is Unset the
    result is Unset; if any is an ErrorValue that error is passed through
    unchanged. Unknown (domain, operator) pairs yield a generic ErrorValue.

    Args:
        domain: Operator domain of the operation node.
        operator: Operator symbol of the operation node.
        first: Value on the first input slot.
        second: Value on the second input slot.

    Returns:
        The computed value, Unset, or an ErrorValue.

    """
    spec = lookup(domain, operator)
    if spec is None:
        return ErrorValue(f"Unknown operator '{operator}' for domain '{domain}'")

    operands = (first, second)[: spec.arity]
    if any(isinstance(operand, Unset) for operand in operands):
        return UNSET
    for operand in operands:
        if isinstance(operand, ErrorValue):
            return operand
    return spec.func(*operands)
