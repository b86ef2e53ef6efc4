"""Step 1: Your First Graph.

This example builds the smallest useful graph: two scalar nodes divided by an
operation node whose result lands in an automatically created result node.
"""

import nodecalc as nc

editor = nc.Editor()

# Data nodes hold literal values
dividend = editor.add_scalar_node(6)
divisor = editor.add_scalar_node(3)

# Operation nodes come with a result node of the operator's output kind
division = editor.add_operation_node("scalar", "/")
result = editor.node(division).output

# Wiring fills in1, then in2; every mutation re-evaluates the graph
editor.connect(dividend, division)
editor.connect(divisor, division)

if __name__ == "__main__":
    print(f"6 / 3 = {nc.format_value(editor.value_of(result))}")

    # Editing a literal propagates to the result immediately
    editor.set_operand(divisor, 0)
    print(f"6 / 0 = {nc.format_value(editor.value_of(result))}")
