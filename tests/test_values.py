"""Tests for the tagged value domain."""

import math

import pytest

from nodecalc._kinds import NodeKind
from nodecalc._values import (
    TYPE_MISMATCH,
    UNSET,
    ErrorValue,
    Matrix,
    Scalar,
    Unset,
    Vector,
    classify,
    coerce,
    format_value,
    parse_literal,
    same_value,
    to_raw,
    value_kind,
)


class TestClassify:
    """Tests for classify function."""

    def test_number_is_scalar(self) -> None:
        assert classify(3) == Scalar(3.0)
        assert classify(2.5) == Scalar(2.5)

    def test_bool_is_not_a_number(self) -> None:
        assert classify(True) is None  # noqa: FBT003
        assert classify([True, False]) is None

    def test_flat_sequence_is_vector(self) -> None:
        assert classify([1, 2, 3]) == Vector((1.0, 2.0, 3.0))
        assert classify((4.5,)) == Vector((4.5,))

    def test_rectangular_nesting_is_matrix(self) -> None:
        assert classify([[1, 2], [3, 4]]) == Matrix(((1.0, 2.0), (3.0, 4.0)))

    def test_ragged_rows_rejected(self) -> None:
        assert classify([[1, 2], [3]]) is None

    def test_empty_sequences_rejected(self) -> None:
        assert classify([]) is None
        assert classify([[]]) is None

    def test_mixed_nesting_rejected(self) -> None:
        assert classify([1, [2]]) is None

    def test_non_numeric_rejected(self) -> None:
        assert classify("3") is None
        assert classify(None) is None
        assert classify(["a", "b"]) is None

    def test_int_too_large_for_float_rejected(self) -> None:
        assert classify(10**400) is None
        assert classify([1, 10**400]) is None

    def test_deep_nesting_rejected(self) -> None:
        raw: object = 1.0
        for _ in range(100_000):
            raw = [raw]
        assert classify(raw) is None

    def test_three_levels_rejected(self) -> None:
        assert classify([[[1]]]) is None

    def test_value_instances_pass_through(self) -> None:
        vector = Vector((1.0, 2.0))
        assert classify(vector) is vector


class TestCoerce:
    """Tests for coerce function."""

    def test_none_is_unset(self) -> None:
        assert coerce(None) is UNSET

    def test_misfit_becomes_error(self) -> None:
        result = coerce([[1, 2], [3]])
        assert isinstance(result, ErrorValue)
        assert "Not a numeric value" in result.message

    def test_existing_values_pass_through(self) -> None:
        error = ErrorValue("boom")
        assert coerce(error) is error
        assert coerce(UNSET) is UNSET

    def test_raw_data_classified(self) -> None:
        assert coerce([1, 2]) == Vector((1.0, 2.0))


class TestParseLiteral:
    """Tests for parse_literal function."""

    def test_scalar_text(self) -> None:
        assert parse_literal("3.5") == Scalar(3.5)

    def test_vector_text(self) -> None:
        assert parse_literal(" [1, 2] ") == Vector((1.0, 2.0))

    def test_matrix_text(self) -> None:
        assert parse_literal("[[1, 0], [0, 1]]") == Matrix(((1.0, 0.0), (0.0, 1.0)))

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "abc",
            "[1, 2",
            '"3"',
            "true",
            "[]",
            "1" + "0" * 400,
            "1" * 5000,
            "[" * 100_000 + "]" * 100_000,
        ],
        ids=[
            "empty",
            "blank",
            "word",
            "unclosed",
            "string",
            "bool",
            "empty-list",
            "huge-int",
            "too-many-digits",
            "deep",
        ],
    )
    def test_invalid_text(self, text: str) -> None:
        assert parse_literal(text) is None


class TestValueKind:
    def test_data_values(self) -> None:
        assert value_kind(Scalar(1.0)) == NodeKind.SCALAR
        assert value_kind(Vector((1.0,))) == NodeKind.VECTOR
        assert value_kind(Matrix(((1.0,),))) == NodeKind.MATRIX

    def test_non_data_values(self) -> None:
        assert value_kind(UNSET) is None
        assert value_kind(TYPE_MISMATCH) is None


class TestSameValue:
    """Tests for same_value function."""

    def test_structural_equality(self) -> None:
        assert same_value(Vector((1.0, 2.0)), Vector((1.0, 2.0)))
        assert not same_value(Vector((1.0, 2.0)), Vector((2.0, 1.0)))

    def test_different_variants(self) -> None:
        assert not same_value(Scalar(1.0), Vector((1.0,)))
        assert not same_value(UNSET, ErrorValue("x"))

    def test_nan_equals_nan(self) -> None:
        assert same_value(Scalar(math.nan), Scalar(math.nan))
        assert same_value(Matrix(((math.nan, 1.0),)), Matrix(((math.nan, 1.0),)))

    def test_errors_compare_by_message(self) -> None:
        assert same_value(ErrorValue("a"), ErrorValue("a"))
        assert not same_value(ErrorValue("a"), ErrorValue("b"))

    def test_unset_singleton(self) -> None:
        assert same_value(Unset(), UNSET)


class TestToRaw:
    def test_round_trip_shapes(self) -> None:
        assert to_raw(Scalar(2.0)) == 2.0
        assert to_raw(Vector((1.0, 2.0))) == [1.0, 2.0]
        assert to_raw(Matrix(((1.0, 2.0),))) == [[1.0, 2.0]]

    def test_error_and_unset(self) -> None:
        assert to_raw(ErrorValue("bad")) == "bad"
        assert to_raw(UNSET) is None


class TestFormatValue:
    """Tests for format_value function."""

    def test_integral_floats_drop_decimal(self) -> None:
        assert format_value(Scalar(2.0)) == "2"

    def test_fractional(self) -> None:
        assert format_value(Scalar(0.5)) == "0.5"

    def test_vector_and_matrix(self) -> None:
        assert format_value(Vector((6.0, 8.0))) == "[6, 8]"
        assert format_value(Matrix(((1.0, 0.0), (0.0, 1.5)))) == "[[1, 0], [0, 1.5]]"

    def test_error_and_unset(self) -> None:
        assert format_value(TYPE_MISMATCH) == "Error: Type Mismatch"
        assert format_value(UNSET) == "--"
