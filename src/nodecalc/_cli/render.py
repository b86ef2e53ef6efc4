"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nodecalc._kinds import NodeKind
from nodecalc._values import ErrorValue, Unset, format_value

from .diagnostics import Severity

if TYPE_CHECKING:
    from rich.console import Console

    from nodecalc._eval_engine import EvaluationReport
    from nodecalc._nodes import Node
    from nodecalc._store import GraphStore

    from .diagnostics import Diagnosis


def _get_kind_style(kind: NodeKind) -> str:
    """Get Rich style string for a node kind.

    Args:
        kind: The NodeKind.

    Returns:
        Rich style string.

    """
    match kind:
        case NodeKind.SCALAR:
            return "blue"
        case NodeKind.VECTOR:
            return "green"
        case NodeKind.MATRIX:
            return "magenta"
        case NodeKind.OPERATION:
            return "yellow"


def _source_label(node: Node) -> str:
    if node.has_incoming:
        upstream = ", ".join(node.inputs.values())
        return f"[dim]from {escape(upstream)}[/dim]"
    if node.has_error:
        return "[red]invalid literal[/red]"
    return "literal"


def _styled_value(node: Node) -> str:
    value = node.effective_value()
    text = escape(format_value(value))
    match value:
        case ErrorValue():
            return f"[red]{text}[/red]"
        case Unset():
            return f"[dim]{text}[/dim]"
        case _:
            return text


def render_value_table(store: GraphStore, console: Console) -> None:
    """Render the effective value of every data node as a Rich table.

    Args:
        store: Evaluated graph store.
        console: Rich Console to output to.

    """
    nodes = store.data_nodes()
    if not nodes:
        console.print("[dim]No data nodes[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Node", style="bold")
    table.add_column("Kind")
    table.add_column("Value")
    table.add_column("Source")

    for node in nodes:
        kind_style = _get_kind_style(node.kind)
        kind_text = f"[{kind_style}]{node.kind.upper()}[/{kind_style}]"
        if node.is_derived:
            kind_text += " [dim](result)[/dim]"
        table.add_row(escape(node.id), kind_text, _styled_value(node), _source_label(node))

    console.print(table)


def render_report_summary(report: EvaluationReport, console: Console) -> None:
    """Render the outcome of an evaluation as a Rich panel."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value")

    table.add_row("Passes", str(report.iterations))
    table.add_row("Converged", "[green]yes[/green]" if report.converged else "[yellow]no (bound reached)[/yellow]")
    table.add_row("Error values", f"[red]{len(report.errors)}[/red]" if report.errors else "0")
    if report.faults:
        table.add_row("Faults", f"[red]{len(report.faults)}[/red]")
    if report.multi_consumers:
        table.add_row("Multi-consumer", ", ".join(sorted(report.multi_consumers)))

    border_style = "green" if report.success and report.converged else "yellow"
    console.print(Panel(table, title="[bold]Evaluation[/bold]", border_style=border_style))


def render_graph_summary(store: GraphStore, diagnosis: Diagnosis, console: Console) -> None:
    """Render node counts and wiring statistics as a Rich panel."""
    counts = Counter(node.kind for node in store)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Kind", style="bold")
    table.add_column("Nodes", justify="right")
    for kind in NodeKind:
        kind_style = _get_kind_style(kind)
        table.add_row(f"[{kind_style}]{kind.upper()}[/{kind_style}]", str(counts.get(kind, 0)))

    subtitle = f"longest chain: {diagnosis.longest_chain}"
    if diagnosis.has_cycle:
        subtitle += ", cyclic"
    console.print(
        Panel(
            table,
            title=f"[bold]Graph: {len(store)} nodes[/bold]",
            subtitle=f"[dim]{subtitle}[/dim]",
            border_style="cyan",
        ),
    )


def render_issues(diagnosis: Diagnosis, console: Console) -> None:
    """Render the issues found by a graph check."""
    for issue in diagnosis.issues:
        color = "red" if issue.severity is Severity.ERROR else "yellow"
        where = f"{escape(issue.node_id)}: " if issue.node_id is not None else ""
        console.print(f"  [{color}]{issue.severity.upper()}[/{color}] {where}{escape(issue.message)}")
