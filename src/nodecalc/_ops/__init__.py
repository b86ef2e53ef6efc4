"""Linear-algebra operator library.

Pure functions over the tagged value domain, keyed by (domain, operator):

- scalar: +, -, *, /, pow
- vector: +, -, *, / (with scalar broadcast), dot, cross
- matrix: +, -, * (elementwise), matmul, det, transpose

Every operator returns a Value; failures are ErrorValues, never exceptions.
"""

from ._registry import OPERATORS, OperatorSpec, apply_operator, is_valid_operator, lookup, operators_for

__all__ = [
    "OPERATORS",
    "OperatorSpec",
    "apply_operator",
    "is_valid_operator",
    "lookup",
    "operators_for",
]
