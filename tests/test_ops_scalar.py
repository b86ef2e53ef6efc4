"""Tests for scalar-domain operators."""

import pytest

from nodecalc._ops import _scalar
from nodecalc._values import ErrorValue, Scalar, Vector


class TestArithmetic:
    def test_add(self) -> None:
        assert _scalar.add(Scalar(2.0), Scalar(3.0)) == Scalar(5.0)

    def test_subtract(self) -> None:
        assert _scalar.subtract(Scalar(2.0), Scalar(3.0)) == Scalar(-1.0)

    def test_multiply(self) -> None:
        assert _scalar.multiply(Scalar(2.0), Scalar(3.0)) == Scalar(6.0)

    def test_divide(self) -> None:
        assert _scalar.divide(Scalar(6.0), Scalar(3.0)) == Scalar(2.0)

    def test_divide_by_zero(self) -> None:
        assert _scalar.divide(Scalar(1.0), Scalar(0.0)) == ErrorValue("Division by zero")

    def test_non_scalar_input(self) -> None:
        result = _scalar.add(Scalar(1.0), Vector((1.0, 2.0)))
        assert result == ErrorValue("Scalar +: inputs must be scalars")


class TestPower:
    """Tests for the pow operator."""

    def test_integer_power(self) -> None:
        assert _scalar.power(Scalar(2.0), Scalar(10.0)) == Scalar(1024.0)

    def test_fractional_power(self) -> None:
        result = _scalar.power(Scalar(9.0), Scalar(0.5))
        assert isinstance(result, Scalar)
        assert result.value == pytest.approx(3.0)

    def test_negative_base_integer_exponent(self) -> None:
        assert _scalar.power(Scalar(-2.0), Scalar(3.0)) == Scalar(-8.0)

    def test_negative_base_fractional_exponent(self) -> None:
        result = _scalar.power(Scalar(-8.0), Scalar(1 / 3))
        assert isinstance(result, ErrorValue)
        assert "no real result" in result.message

    def test_zero_to_negative_power(self) -> None:
        result = _scalar.power(Scalar(0.0), Scalar(-1.0))
        assert isinstance(result, ErrorValue)

    def test_overflow(self) -> None:
        result = _scalar.power(Scalar(10.0), Scalar(1000.0))
        assert result == ErrorValue("pow: result is too large")
