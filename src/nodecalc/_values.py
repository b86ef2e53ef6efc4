"""Tagged value domain flowing through the node graph.

Every value a node can hold or receive is one of five variants:

- Unset: no value yet (an operand is missing upstream)
- Scalar: a single number
- Vector: a flat, non-empty sequence of numbers
- Matrix: a non-empty rectangular sequence of non-empty rows
- ErrorValue: a diagnostic message that travels through the graph like data

Numbers are stored as floats inside tuples so that dataclass equality is
deep structural equality.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from numbers import Real
from typing import TYPE_CHECKING, Any

from ._kinds import NodeKind

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class Unset:
    """Marker for a value that is not available yet."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset()


@dataclass(frozen=True, slots=True)
class Scalar:
    value: float


@dataclass(frozen=True, slots=True)
class Vector:
    items: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class Matrix:
    rows: tuple[tuple[float, ...], ...]

    @property
    def shape(self) -> tuple[int, int]:
        """(rows, columns) of the matrix."""
        return len(self.rows), len(self.rows[0])


@dataclass(frozen=True, slots=True)
class ErrorValue:
    message: str


Value = Unset | Scalar | Vector | Matrix | ErrorValue
DataValue = Scalar | Vector | Matrix

TYPE_MISMATCH = ErrorValue("Type Mismatch")


def is_number(raw: object) -> bool:
    """Check whether a raw object is a real number (booleans excluded)."""
    return isinstance(raw, Real) and not isinstance(raw, bool)


def _is_sequence(raw: object) -> bool:
    return isinstance(raw, (list, tuple))


def _shape_of(raw: object) -> tuple[int, ...] | None:
    """Recursively compute the shape of a rectangular numeric nesting.

    Returns:
        ``()`` for a number, ``(n,)`` for a flat sequence, ``(m, n)`` for a
        rectangular sequence of sequences and so on. None if any leaf is not
        numeric, any level is empty, or sibling rows disagree in shape.

    """
    if is_number(raw):
        return ()
    if not _is_sequence(raw) or len(raw) == 0:  # type: ignore[arg-type]
        return None
    child_shapes = {_shape_of(child) for child in raw}  # type: ignore[union-attr]
    if len(child_shapes) != 1:
        return None
    (child_shape,) = child_shapes
    if child_shape is None:
        return None
    return (len(raw), *child_shape)  # type: ignore[arg-type]


def _floats(items: Iterable[Any]) -> tuple[float, ...]:
    return tuple(float(x) for x in items)


def classify(raw: object) -> DataValue | None:
    """Classify raw data as a Scalar, Vector or Matrix.

    Value instances of those three variants are returned unchanged. Integers
    too large for a float and nestings too deep to walk are rejected.

    Returns:
        The classified value, or None if the data is none of the three.

    """
    if isinstance(raw, (Scalar, Vector, Matrix)):
        return raw
    try:
        match _shape_of(raw):
            case ():
                return Scalar(float(raw))  # type: ignore[arg-type]
            case (_,):
                return Vector(_floats(raw))  # type: ignore[arg-type]
            case (_, _):
                return Matrix(tuple(_floats(row) for row in raw))  # type: ignore[union-attr]
            case _:
                return None
    except (OverflowError, RecursionError):
        return None


def coerce(raw: object) -> Value:
    """Like classify, but for data found downstream: misfits become ErrorValue."""
    if isinstance(raw, (Unset, ErrorValue)):
        return raw
    if raw is None:
        return UNSET
    value = classify(raw)
    if value is None:
        return ErrorValue(f"Not a numeric value: {raw!r}")
    return value


def parse_literal(text: str) -> DataValue | None:
    """Parse literal text typed into a node (JSON syntax, e.g. ``[1, 2]``)."""
    text = text.strip()
    if not text:
        return None
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return classify(raw)


def value_kind(value: Value) -> NodeKind | None:
    """Return the data node kind a value fits, or None for Unset/ErrorValue."""
    match value:
        case Scalar():
            return NodeKind.SCALAR
        case Vector():
            return NodeKind.VECTOR
        case Matrix():
            return NodeKind.MATRIX
        case Unset() | ErrorValue():
            return None


def _canonical(value: Value) -> object:
    # NaN never equals itself; map it to a sentinel so a NaN result can settle.
    def fix(x: float) -> object:
        return "nan" if math.isnan(x) else x

    match value:
        case Scalar(x):
            return ("scalar", fix(x))
        case Vector(items):
            return ("vector", tuple(fix(x) for x in items))
        case Matrix(rows):
            return ("matrix", tuple(tuple(fix(x) for x in row) for row in rows))
        case _:
            return value


def same_value(a: Value, b: Value) -> bool:
    """Structural equality used for change detection."""
    return _canonical(a) == _canonical(b)


def to_raw(value: Value) -> float | list[float] | list[list[float]] | str | None:
    """Convert a value back to plain Python data.

    Unset becomes None and an ErrorValue becomes its message.
    """
    match value:
        case Scalar(x):
            return x
        case Vector(items):
            return list(items)
        case Matrix(rows):
            return [list(row) for row in rows]
        case ErrorValue(message):
            return message
        case Unset():
            return None


def _format_number(x: float) -> str:
    if x.is_integer():
        return str(int(x))
    return format(x, ".10g")


def format_value(value: Value) -> str:
    """Render a value as display text."""
    match value:
        case Scalar(x):
            return _format_number(x)
        case Vector(items):
            return "[" + ", ".join(_format_number(x) for x in items) + "]"
        case Matrix(rows):
            return "[" + ", ".join("[" + ", ".join(_format_number(x) for x in row) + "]" for row in rows) + "]"
        case ErrorValue(message):
            return f"Error: {message}"
        case Unset():
            return "--"
