"""Conversions between tuple-based values and numpy arrays."""

import numpy as np

from nodecalc._values import Matrix, Scalar, Vector


def as_array(value: Scalar | Vector | Matrix) -> np.ndarray:
    match value:
        case Scalar(x):
            return np.asarray(x, dtype=float)
        case Vector(items):
            return np.asarray(items, dtype=float)
        case Matrix(rows):
            return np.asarray(rows, dtype=float)


def to_vector(arr: np.ndarray) -> Vector:
    return Vector(tuple(float(x) for x in arr))


def to_matrix(arr: np.ndarray) -> Matrix:
    return Matrix(tuple(tuple(float(x) for x in row) for row in arr))
