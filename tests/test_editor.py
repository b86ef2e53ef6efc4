"""Tests for the editor session."""

import pytest

from nodecalc._editor import Editor, EditorError, WiringError
from nodecalc._kinds import NodeKind, Operator, OperatorDomain, Slot
from nodecalc._values import UNSET, Matrix, Scalar, Vector


@pytest.fixture
def editor() -> Editor:
    return Editor()


class TestFactories:
    """Tests for node factories."""

    def test_defaults(self, editor: Editor) -> None:
        scalar = editor.node(editor.add_scalar_node())
        vector = editor.node(editor.add_vector_node())
        matrix = editor.node(editor.add_matrix_node())
        assert scalar.operand_value == Scalar(0.0)
        assert vector.operand_value == Vector((0.0, 0.0))
        assert matrix.operand_value == Matrix(((1.0, 0.0), (0.0, 1.0)))

    def test_sequential_ids(self, editor: Editor) -> None:
        assert editor.add_scalar_node() == "node-0"
        assert editor.add_scalar_node() == "node-1"

    def test_invalid_initial_value(self, editor: Editor) -> None:
        with pytest.raises(EditorError, match="Invalid initial vector value"):
            editor.add_vector_node(3)

    def test_operation_creates_result_node(self, editor: Editor) -> None:
        op_id = editor.add_operation_node(OperatorDomain.VECTOR, Operator.DOT)
        op = editor.node(op_id)
        assert op.kind == NodeKind.OPERATION
        assert op.output is not None
        result = editor.node(op.output)
        assert result.kind == NodeKind.SCALAR
        assert result.is_derived
        assert result.inputs == {Slot.IN: op_id}

    def test_cross_result_is_vector(self, editor: Editor) -> None:
        op = editor.node(editor.add_operation_node("vector", "cross"))
        assert op.output is not None
        assert editor.node(op.output).kind == NodeKind.VECTOR

    def test_operation_without_result(self, editor: Editor) -> None:
        op = editor.node(editor.add_operation_node("scalar", "+", with_result=False))
        assert op.output is None
        assert len(editor.store) == 1

    def test_invalid_operator_for_domain(self, editor: Editor) -> None:
        with pytest.raises(EditorError, match="Expected one of"):
            editor.add_operation_node("scalar", "dot")
        assert len(editor.store) == 0

    def test_unknown_domain(self, editor: Editor) -> None:
        with pytest.raises(EditorError, match="Unknown operator domain"):
            editor.add_operation_node("tensor", "+")


class TestConnect:
    """Tests for connect."""

    def test_default_slots_fill_in_order(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "-")
        a = editor.add_scalar_node(5)
        b = editor.add_scalar_node(2)
        assert editor.connect(a, op) == Slot.IN1
        assert editor.connect(b, op) == Slot.IN2
        result = editor.node(op).output
        assert result is not None
        assert editor.value_of(result) == Scalar(3.0)

    def test_explicit_slot(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "-")
        a = editor.add_scalar_node(5)
        b = editor.add_scalar_node(2)
        editor.connect(a, op, "in2")
        editor.connect(b, op, "in1")
        result = editor.node(op).output
        assert result is not None
        assert editor.value_of(result) == Scalar(-3.0)

    def test_self_connection_rejected(self, editor: Editor) -> None:
        a = editor.add_scalar_node()
        with pytest.raises(WiringError, match="itself"):
            editor.connect(a, a)

    def test_unknown_node_rejected(self, editor: Editor) -> None:
        a = editor.add_scalar_node()
        with pytest.raises(WiringError, match="Unknown node"):
            editor.connect(a, "node-99")

    def test_occupied_slot_rejected(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        editor.connect(editor.add_scalar_node(), op, Slot.IN1)
        with pytest.raises(WiringError, match="already connected"):
            editor.connect(editor.add_scalar_node(), op, Slot.IN1)

    def test_no_free_slot(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        editor.connect(editor.add_scalar_node(), op)
        editor.connect(editor.add_scalar_node(), op)
        with pytest.raises(WiringError, match="no free input slot"):
            editor.connect(editor.add_scalar_node(), op)

    def test_second_consumer_rejected(self, editor: Editor) -> None:
        a = editor.add_scalar_node()
        editor.connect(a, editor.add_operation_node("scalar", "+"))
        with pytest.raises(WiringError, match="already feeds"):
            editor.connect(a, editor.add_operation_node("scalar", "+"))

    def test_same_source_on_both_slots(self, editor: Editor) -> None:
        a = editor.add_scalar_node(3)
        op = editor.add_operation_node("scalar", "*")
        editor.connect(a, op)
        editor.connect(a, op)
        result = editor.node(op).output
        assert result is not None
        assert editor.value_of(result) == Scalar(9.0)

    def test_unary_operator_has_one_slot(self, editor: Editor) -> None:
        op = editor.add_operation_node("matrix", "transpose")
        with pytest.raises(WiringError, match="no input slot 'in2'"):
            editor.connect(editor.add_matrix_node(), op, Slot.IN2)

    def test_data_node_only_accepts_in(self, editor: Editor) -> None:
        target = editor.add_scalar_node()
        with pytest.raises(WiringError):
            editor.connect(editor.add_scalar_node(), target, Slot.IN1)

    def test_unknown_slot(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        with pytest.raises(WiringError, match="Unknown input slot"):
            editor.connect(editor.add_scalar_node(), op, "in3")


class TestDisconnectAndDelete:
    """Tests for disconnect and delete_node."""

    def test_disconnect_clears_both_sides(self, editor: Editor) -> None:
        a = editor.add_scalar_node(1)
        op = editor.add_operation_node("scalar", "+")
        editor.connect(a, op)
        editor.disconnect(a, op)
        assert editor.node(a).output is None
        assert editor.node(op).inputs == {}

    def test_disconnect_data_target_restores_literal(self, editor: Editor) -> None:
        source = editor.add_scalar_node(4)
        target = editor.add_scalar_node(7)
        editor.connect(source, target)
        assert editor.value_of(target) == Scalar(4.0)

        editor.disconnect(source, target)

        assert editor.node(target).settled_value is UNSET
        assert editor.value_of(target) == Scalar(7.0)

    def test_disconnect_clears_error_flag(self, editor: Editor) -> None:
        source = editor.add_scalar_node(4)
        target = editor.add_scalar_node(7)
        editor.connect(source, target)
        editor.node(target).has_error = True
        editor.disconnect(source, target)
        assert not editor.node(target).has_error

    def test_connect_clears_error_flag(self, editor: Editor) -> None:
        target = editor.add_scalar_node(7)
        assert editor.set_operand(target, "abc") is False
        op = editor.add_operation_node("scalar", "+", with_result=False)
        editor.connect(editor.add_scalar_node(2), op)
        editor.connect(editor.add_scalar_node(3), op)

        editor.connect(op, target)

        assert not editor.node(target).has_error
        assert editor.value_of(target) == Scalar(5.0)

    def test_disconnect_unconnected(self, editor: Editor) -> None:
        a = editor.add_scalar_node()
        b = editor.add_scalar_node()
        with pytest.raises(WiringError, match="not connected"):
            editor.disconnect(a, b)

    def test_delete_severs_references(self, editor: Editor) -> None:
        a = editor.add_scalar_node(1)
        b = editor.add_scalar_node(2)
        op = editor.add_operation_node("scalar", "+")
        editor.connect(a, op)
        editor.connect(b, op)
        result = editor.node(op).output
        assert result is not None

        editor.delete_node(op)

        assert op not in editor.store
        assert editor.node(a).output is None
        assert editor.node(b).output is None
        assert editor.node(result).inputs == {}

    def test_delete_upstream_stalls_result(self, editor: Editor) -> None:
        a = editor.add_scalar_node(1)
        op = editor.add_operation_node("scalar", "+")
        editor.connect(a, op)
        editor.connect(editor.add_scalar_node(2), op)
        result = editor.node(op).output
        assert result is not None

        editor.delete_node(a)

        assert editor.value_of(result) is UNSET

    def test_delete_unknown(self, editor: Editor) -> None:
        with pytest.raises(EditorError):
            editor.delete_node("node-5")

    def test_ids_not_reused_after_delete(self, editor: Editor) -> None:
        a = editor.add_scalar_node()
        editor.delete_node(a)
        assert editor.add_scalar_node() == "node-1"


class TestEdits:
    """Tests for literal and operator edits."""

    def test_set_operand_reevaluates(self, editor: Editor) -> None:
        a = editor.add_scalar_node(6)
        op = editor.add_operation_node("scalar", "/")
        editor.connect(a, op)
        editor.connect(editor.add_scalar_node(3), op)
        result = editor.node(op).output
        assert result is not None

        assert editor.set_operand(a, 9) is True

        assert editor.value_of(result) == Scalar(3.0)

    def test_invalid_literal_sets_error_and_keeps_previous(self, editor: Editor) -> None:
        a = editor.add_scalar_node(6)
        op = editor.add_operation_node("scalar", "+")
        editor.connect(a, op)
        editor.connect(editor.add_scalar_node(1), op)
        result = editor.node(op).output
        assert result is not None

        assert editor.set_operand(a, [1, 2]) is False

        node = editor.node(a)
        assert node.has_error
        assert node.operand_value == Scalar(6.0)
        assert editor.value_of(a) is UNSET
        assert editor.value_of(result) is UNSET

    def test_valid_literal_clears_error(self, editor: Editor) -> None:
        a = editor.add_scalar_node(6)
        editor.set_operand(a, "oops")
        assert editor.set_operand(a, 2) is True
        assert not editor.node(a).has_error
        assert editor.value_of(a) == Scalar(2.0)

    def test_set_operand_text(self, editor: Editor) -> None:
        m = editor.add_matrix_node()
        assert editor.set_operand_text(m, "[[1, 2], [3, 4]]") is True
        assert editor.value_of(m) == Matrix(((1.0, 2.0), (3.0, 4.0)))
        assert editor.set_operand_text(m, "[[1, 2], [3]]") is False
        assert editor.node(m).has_error

    @pytest.mark.parametrize("text", ["1" + "0" * 400, "[" * 100_000 + "]" * 100_000], ids=["huge-int", "deep"])
    def test_unparsable_text_rejected(self, editor: Editor, text: str) -> None:
        a = editor.add_scalar_node(6)
        assert editor.set_operand_text(a, text) is False
        assert editor.node(a).has_error
        assert editor.node(a).operand_value == Scalar(6.0)

    def test_int_too_large_for_float_rejected(self, editor: Editor) -> None:
        a = editor.add_scalar_node(6)
        assert editor.set_operand(a, 10**400) is False
        assert editor.node(a).has_error

    def test_connected_node_cannot_be_edited(self, editor: Editor) -> None:
        source = editor.add_scalar_node(1)
        target = editor.add_scalar_node(2)
        editor.connect(source, target)
        with pytest.raises(EditorError, match="cannot be edited"):
            editor.set_operand(target, 5)

    def test_operation_has_no_literal(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        with pytest.raises(EditorError):
            editor.set_operand(op, 5)

    def test_set_operator(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        editor.connect(editor.add_scalar_node(2), op)
        editor.connect(editor.add_scalar_node(5), op)
        editor.set_operator(op, "pow")
        result = editor.node(op).output
        assert result is not None
        assert editor.value_of(result) == Scalar(32.0)

    def test_set_operator_outside_domain(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+")
        with pytest.raises(EditorError, match="Invalid operator 'det'"):
            editor.set_operator(op, "det")
        assert editor.node(op).operator == "+"

    def test_set_operator_with_domain(self, editor: Editor) -> None:
        op = editor.add_operation_node("scalar", "+", with_result=False)
        editor.set_operator(op, "det", OperatorDomain.MATRIX)
        node = editor.node(op)
        assert node.domain == OperatorDomain.MATRIX
        assert node.operator == "det"

    def test_set_operator_on_data_node(self, editor: Editor) -> None:
        with pytest.raises(EditorError, match="has no operator"):
            editor.set_operator(editor.add_scalar_node(), "+")


class TestBatch:
    """Tests for grouping mutations."""

    def test_batch_evaluates_once(self) -> None:
        calls: list[str] = []
        editor = Editor(on_node_settled=lambda node_id, _value: calls.append(node_id))
        with editor.batch():
            a = editor.add_scalar_node(1)
            b = editor.add_scalar_node(2)
        assert calls == [a, b]

    def test_unbatched_mutations_each_evaluate(self) -> None:
        calls: list[str] = []
        editor = Editor(on_node_settled=lambda node_id, _value: calls.append(node_id))
        a = editor.add_scalar_node(1)
        b = editor.add_scalar_node(2)
        assert calls == [a, a, b]

    def test_nested_batches(self) -> None:
        calls: list[str] = []
        editor = Editor(on_node_settled=lambda node_id, _value: calls.append(node_id))
        with editor.batch():
            with editor.batch():
                a = editor.add_scalar_node(1)
            assert calls == []
        assert calls == [a]
