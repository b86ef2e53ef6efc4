"""Vector-domain operators: elementwise +, -, *, / with scalar broadcast, dot, cross."""

import numpy as np

from nodecalc._values import ErrorValue, Scalar, Value, Vector

from ._arrays import as_array, to_vector


def _elementwise_operands(symbol: str, a: Value, b: Value) -> tuple[np.ndarray, np.ndarray] | ErrorValue:
    """Line up two operands for an elementwise operation.

    A bare scalar on either side is repeated to the length of the other
    operand. Two vectors must have equal length.
    """
    match (a, b):
        case (Vector(), Vector()):
            if len(a) != len(b):
                return ErrorValue(f"Vector {symbol}: dimension mismatch ({len(a)} vs {len(b)})")
            return as_array(a), as_array(b)
        case (Scalar(x), Vector()):
            return np.full(len(b), x, dtype=float), as_array(b)
        case (Vector(), Scalar(y)):
            return as_array(a), np.full(len(a), y, dtype=float)
        case _:
            return ErrorValue(f"Vector {symbol}: inputs must be vectors or a scalar and a vector")


def add(a: Value, b: Value) -> Value:
    operands = _elementwise_operands("+", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_vector(operands[0] + operands[1])


def subtract(a: Value, b: Value) -> Value:
    operands = _elementwise_operands("-", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_vector(operands[0] - operands[1])


def multiply(a: Value, b: Value) -> Value:
    operands = _elementwise_operands("*", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_vector(operands[0] * operands[1])


def divide(a: Value, b: Value) -> Value:
    operands = _elementwise_operands("/", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    numerator, divisor = operands
    if np.any(divisor == 0):
        return ErrorValue("Vector /: division by zero")
    return to_vector(numerator / divisor)


def dot(a: Value, b: Value) -> Value:
    match (a, b):
        case (Vector(), Vector()):
            if len(a) != len(b):
                return ErrorValue(f"Vector dot: dimension mismatch ({len(a)} vs {len(b)})")
            return Scalar(float(np.dot(as_array(a), as_array(b))))
        case _:
            return ErrorValue("Vector dot: inputs must be vectors")


def _lift(vector: Vector) -> np.ndarray:
    arr = as_array(vector)
    if len(arr) == 2:  # noqa: PLR2004
        return np.append(arr, 0.0)
    return arr


def cross(a: Value, b: Value) -> Value:
    """Cross product of 2D or 3D vectors.

    2D vectors are lifted into the z = 0 plane. The product of two 2D vectors
    is reported as its z component only.
    """
    match (a, b):
        case (Vector(), Vector()):
            if len(a) not in (2, 3) or len(b) not in (2, 3):
                return ErrorValue(f"Vector cross: requires 2D or 3D vectors (got {len(a)} and {len(b)})")
            product = np.cross(_lift(a), _lift(b))
            if len(a) == len(b) == 2:  # noqa: PLR2004
                return Scalar(float(product[2]))
            return to_vector(product)
        case _:
            return ErrorValue("Vector cross: inputs must be vectors")
