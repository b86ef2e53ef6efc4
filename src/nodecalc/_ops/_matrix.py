"""Matrix-domain operators: elementwise +, -, *, matmul, det, transpose."""

import numpy as np

from nodecalc._values import ErrorValue, Matrix, Scalar, Value

from ._arrays import as_array, to_matrix


def _same_shape_operands(symbol: str, a: Value, b: Value) -> tuple[np.ndarray, np.ndarray] | ErrorValue:
    match (a, b):
        case (Matrix(), Matrix()):
            if a.shape != b.shape:
                return ErrorValue(
                    f"Matrix {symbol}: dimension mismatch ({_dims(a)} vs {_dims(b)})",
                )
            return as_array(a), as_array(b)
        case _:
            return ErrorValue(f"Matrix {symbol}: inputs must be matrices")


def _dims(m: Matrix) -> str:
    rows, cols = m.shape
    return f"{rows}x{cols}"


def add(a: Value, b: Value) -> Value:
    operands = _same_shape_operands("+", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_matrix(operands[0] + operands[1])


def subtract(a: Value, b: Value) -> Value:
    operands = _same_shape_operands("-", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_matrix(operands[0] - operands[1])


def multiply(a: Value, b: Value) -> Value:
    """Elementwise (Hadamard) product; use matmul for the matrix product."""
    operands = _same_shape_operands("*", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    return to_matrix(operands[0] * operands[1])


def matmul(a: Value, b: Value) -> Value:
    match (a, b):
        case (Matrix(), Matrix()):
            if a.shape[1] != b.shape[0]:
                return ErrorValue(
                    f"Matrix matmul: inner dimensions do not match ({_dims(a)} vs {_dims(b)})",
                )
            return to_matrix(as_array(a) @ as_array(b))
        case _:
            return ErrorValue("Matrix matmul: inputs must be matrices")


def determinant(a: Value) -> Value:
    match a:
        case Matrix():
            rows, cols = a.shape
            if rows != cols:
                return ErrorValue(f"Matrix det: matrix must be square (got {_dims(a)})")
            return Scalar(float(np.linalg.det(as_array(a))))
        case _:
            return ErrorValue("Matrix det: input must be a matrix")


def transpose(a: Value) -> Value:
    match a:
        case Matrix():
            return to_matrix(as_array(a).T)
        case _:
            return ErrorValue("Matrix transpose: input must be a matrix")
