"""Scalar-domain operators: +, -, *, /, pow."""

import math

from nodecalc._values import ErrorValue, Scalar, Value


def _operands(symbol: str, a: Value, b: Value) -> tuple[float, float] | ErrorValue:
    match (a, b):
        case (Scalar(x), Scalar(y)):
            return x, y
        case _:
            return ErrorValue(f"Scalar {symbol}: inputs must be scalars")


def add(a: Value, b: Value) -> Value:
    operands = _operands("+", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    x, y = operands
    return Scalar(x + y)


def subtract(a: Value, b: Value) -> Value:
    operands = _operands("-", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    x, y = operands
    return Scalar(x - y)


def multiply(a: Value, b: Value) -> Value:
    operands = _operands("*", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    x, y = operands
    return Scalar(x * y)


def divide(a: Value, b: Value) -> Value:
    operands = _operands("/", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    x, y = operands
    if y == 0:
        return ErrorValue("Division by zero")
    return Scalar(x / y)


def power(a: Value, b: Value) -> Value:
    """Raise the first operand to the power of the second.

    Results that are not real numbers (negative base with a fractional
    exponent, zero to a negative power) or that overflow become errors.
    """
    operands = _operands("pow", a, b)
    if isinstance(operands, ErrorValue):
        return operands
    base, exponent = operands
    if base == 0 and exponent < 0:
        return ErrorValue("pow: zero cannot be raised to a negative power")
    if base < 0 and not exponent.is_integer():
        return ErrorValue("pow: negative base with a fractional exponent has no real result")
    try:
        return Scalar(math.pow(base, exponent))
    except OverflowError:
        return ErrorValue("pow: result is too large")
