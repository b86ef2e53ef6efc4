"""Step 3: Saving, Loading and Checking Graphs.

Graphs are stored as TOML. A loaded graph can be evaluated directly, and the
wiring view reports cycles and how many passes a graph needs to settle.
"""

from pathlib import Path

import nodecalc as nc

editor = nc.Editor()
with editor.batch():
    a = editor.add_matrix_node([[1, 2], [3, 4]])
    b = editor.add_matrix_node()
    product = editor.add_operation_node("matrix", "matmul")
    editor.connect(a, product)
    editor.connect(b, product)
    transpose = editor.add_operation_node("matrix", "transpose")
    editor.connect(editor.node(product).output, transpose)

if __name__ == "__main__":
    path = Path(__file__).parent / "step3_graph.toml"
    nc.save_graph(editor.store, path)

    store = nc.load_graph(path)
    report = nc.evaluate_graph(store)
    print(f"settled in {report.iterations} passes (converged: {report.converged})")

    graph = nc.WiringGraph.from_store(store)
    print(f"longest chain: {graph.longest_chain()} operations, cyclic: {graph.has_cycle()}")
    for node_id, value in report.values.items():
        print(f"{node_id}: {nc.format_value(value)}")
