import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from nodecalc._editor import Editor, EditorError
from nodecalc._eval_engine import Evaluator
from nodecalc._io import GraphFileError, load_graph, save_graph
from nodecalc._kinds import Operator, OperatorDomain
from nodecalc._store import GraphStore
from nodecalc._values import format_value, parse_literal

from .config import ConfigError, NodecalcConfig, get_config
from .diagnostics import diagnose
from .render import render_graph_summary, render_issues, render_report_summary, render_value_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Nodecalc CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _get_config() -> NodecalcConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _resolve_graph_path(graph: Path | None, config: NodecalcConfig) -> Path:
    effective = graph if graph is not None else config.graph
    if effective is None:
        err_console.print("[red]Error: Graph file required. Pass GRAPH or configure \\[tool.nodecalc].graph[/red]")
        raise typer.Exit(code=1)
    return effective


def _load(path: Path) -> GraphStore:
    err_console.print(f"[cyan]Loading graph from:[/cyan] {escape(str(path))}")
    try:
        return load_graph(path)
    except GraphFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _save(store: GraphStore, path: Path) -> None:
    err_console.print(f"[cyan]Writing graph to:[/cyan] {escape(str(path))}")
    save_graph(store, path)


def build_sample_graph() -> GraphStore:
    """Build the starter graph: 6 / 3 into a scalar result node."""
    editor = Editor()
    with editor.batch():
        dividend = editor.add_scalar_node(6)
        divisor = editor.add_scalar_node(3)
        division = editor.add_operation_node(OperatorDomain.SCALAR, Operator.DIV)
        editor.connect(dividend, division)
        editor.connect(divisor, division)
    return editor.store


@app.command("eval")
def eval_command(
    graph: Annotated[
        Path | None,
        typer.Argument(help="Path to graph TOML file (defaults to [tool.nodecalc].graph)"),
    ] = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the settled graph to this TOML file"),
    ] = None,
    max_iterations: Annotated[
        int | None,
        typer.Option("--max-iterations", min=1, help="Maximum number of evaluation passes"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit non-zero on error values or when the pass bound is reached"),
    ] = False,
) -> None:
    """Evaluate a graph and show the settled value of every data node."""
    err_console.print()
    config = _get_config()
    graph_path = _resolve_graph_path(graph, config)
    store = _load(graph_path)

    bound = max_iterations if max_iterations is not None else config.max_iterations
    err_console.print(f"[cyan]Evaluating {len(store)} nodes...[/cyan]")
    report = Evaluator(store, max_iterations=bound).evaluate()
    err_console.print()

    render_value_table(store, out_console)
    err_console.print()
    render_report_summary(report, err_console)

    effective_output = output if output is not None else config.output
    if effective_output is not None:
        _save(store, effective_output)

    err_console.print()
    failed = not report.success or not report.converged
    if strict and failed:
        err_console.print("[red]✗ Evaluation finished with errors[/red]")
        raise typer.Exit(code=1)
    err_console.print("[green]✓ Evaluation complete[/green]")
    err_console.print()


@app.command()
def check(
    graph: Annotated[
        Path | None,
        typer.Argument(help="Path to graph TOML file (defaults to [tool.nodecalc].graph)"),
    ] = None,
    *,
    max_iterations: Annotated[
        int | None,
        typer.Option("--max-iterations", min=1, help="Pass bound to check chain lengths against"),
    ] = None,
) -> None:
    """Check the consistency of a graph without evaluating it."""
    err_console.print()
    config = _get_config()
    store = _load(_resolve_graph_path(graph, config))
    err_console.print()

    bound = max_iterations if max_iterations is not None else config.max_iterations
    diagnosis = diagnose(store, max_iterations=bound)
    render_graph_summary(store, diagnosis, err_console)
    err_console.print()

    if diagnosis.issues:
        render_issues(diagnosis, err_console)
        err_console.print()

    if not diagnosis.is_consistent:
        err_console.print(f"[red]✗ Graph has {len(diagnosis.errors)} inconsistencies[/red]")
        raise typer.Exit(code=1)
    err_console.print("[green]✓ Graph is consistent[/green]")
    err_console.print()


@app.command("set")
def set_command(
    graph: Annotated[
        Path,
        typer.Argument(help="Path to graph TOML file"),
    ],
    node_id: Annotated[
        str,
        typer.Argument(help="Id of the data node to edit (e.g. node-0)"),
    ],
    value: Annotated[
        str,
        typer.Argument(help="New literal in JSON syntax, e.g. 2.5 or [1, 2] or [[1, 0], [0, 1]]"),
    ],
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Write the edited graph here instead of overwriting GRAPH"),
    ] = None,
) -> None:
    """Set the literal of a data node, re-evaluate and save the graph."""
    err_console.print()
    config = _get_config()
    store = _load(graph)

    if parse_literal(value) is None:
        err_console.print(f"[red]Error: '{escape(value)}' is not a scalar, vector or matrix literal[/red]")
        raise typer.Exit(code=1)

    editor = Editor(store, max_iterations=config.max_iterations)
    try:
        with editor.batch():
            accepted = editor.set_operand_text(node_id, value)
    except EditorError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    if not accepted:
        node = editor.node(node_id)
        err_console.print(f"[red]Error: {escape(value)} does not fit {node.kind} node {escape(node_id)}[/red]")
        raise typer.Exit(code=1)

    err_console.print(f"[cyan]{escape(node_id)} =[/cyan] {escape(format_value(editor.value_of(node_id)))}")
    err_console.print()
    render_value_table(store, out_console)
    err_console.print()

    _save(store, output if output is not None else graph)
    err_console.print()
    err_console.print("[green]✓ Value updated[/green]")
    err_console.print()


@app.command()
def init(
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ],
) -> None:
    """Generate a sample graph file (6 / 3 into a result node)."""
    err_console.print()
    err_console.print("[cyan]Building sample graph...[/cyan]")
    store = build_sample_graph()
    _save(store, output)
    err_console.print()
    err_console.print("[green]✓ Sample graph created[/green]")
    err_console.print()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
