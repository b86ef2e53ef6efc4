"""Step 2: Vectors, Matrices and Type Errors.

Operations are scoped to a domain. Vector operators broadcast a bare scalar
against a vector, and a result that does not fit its destination node settles
as a "Type Mismatch" error instead of raising.
"""

import nodecalc as nc

editor = nc.Editor()

# Group several mutations into a single evaluation
with editor.batch():
    factor = editor.add_scalar_node(2)
    direction = editor.add_vector_node([3, 4])
    scale = editor.add_operation_node("vector", "*")
    editor.connect(factor, scale)
    editor.connect(direction, scale)

    rotation = editor.add_matrix_node([[0, -1], [1, 0]])
    det = editor.add_operation_node("matrix", "det", with_result=False)
    wrong_sink = editor.add_vector_node()
    editor.connect(rotation, det)
    # det produces a scalar, so a vector node cannot hold it
    editor.connect(det, wrong_sink)

if __name__ == "__main__":
    scaled = editor.node(scale).output
    print(f"2 * [3, 4] = {nc.format_value(editor.value_of(scaled))}")
    print(f"det into a vector node: {nc.format_value(editor.value_of(wrong_sink))}")

    report = editor.last_report
    for node_id, message in report.errors:
        print(f"{node_id}: {message}")
