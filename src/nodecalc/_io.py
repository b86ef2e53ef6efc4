"""TOML persistence of graph stores.

A graph file holds the id counter and one table per node:

    next_id = 3

    [nodes.node-0]
    kind = "scalar"
    operand_value = 6.0

    [nodes.node-1]
    kind = "operation"
    domain = "scalar"
    operator = "/"
    inputs = { in1 = "node-0" }
    output = "node-2"

Unset values and fields left at their defaults are omitted because TOML has no
null. An ErrorValue settled on a node is written as ``settled_error``.
"""

import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, ValidationError

from ._kinds import NodeKind, OperatorDomain, Slot
from ._nodes import Node
from ._store import ID_PREFIX, GraphStore
from ._values import UNSET, ErrorValue, Matrix, Scalar, Value, Vector, classify, to_raw, value_kind

logger = logging.getLogger(__name__)

# Strict so booleans and numeric strings are rejected rather than converted.
RawValue = StrictFloat | list[StrictFloat] | list[list[StrictFloat]]


class GraphFileError(Exception):
    """A graph file that cannot be read or does not describe a valid graph."""


class NodeRecord(BaseModel):
    """One ``[nodes.<id>]`` table of a graph file."""

    model_config = ConfigDict(extra="forbid")

    kind: NodeKind
    operand_value: RawValue | None = None
    operator: str | None = None
    domain: OperatorDomain | None = None
    inputs: dict[Slot, str] = {}
    output: str | None = None
    settled_value: RawValue | None = None
    settled_error: str | None = None
    is_derived: bool = False
    has_error: bool = False


class GraphDocument(BaseModel):
    """A whole graph file."""

    model_config = ConfigDict(extra="forbid")

    next_id: int = Field(default=0, ge=0)
    nodes: dict[str, NodeRecord] = Field(default_factory=dict)


def _raw_data(value: Value) -> RawValue | None:
    match value:
        case Scalar() | Vector() | Matrix():
            return to_raw(value)  # type: ignore[return-value]
        case _:
            return None


def _node_to_record(node: Node) -> NodeRecord:
    settled_error = node.settled_value.message if isinstance(node.settled_value, ErrorValue) else None
    return NodeRecord(
        kind=node.kind,
        operand_value=_raw_data(node.operand_value),
        operator=node.operator,
        domain=node.domain,
        inputs=dict(node.inputs),
        output=node.output,
        settled_value=_raw_data(node.settled_value),
        settled_error=settled_error,
        is_derived=node.is_derived,
        has_error=node.has_error,
    )


def _record_value(node_id: str, field_name: str, raw: RawValue | None) -> Value:
    if raw is None:
        return UNSET
    value = classify(raw)
    if value is None:
        msg = f"Node '{node_id}': {field_name} {raw!r} is not a scalar, vector or matrix"
        raise GraphFileError(msg)
    return value


def _record_to_node(node_id: str, record: NodeRecord) -> Node:
    operand = _record_value(node_id, "operand_value", record.operand_value)
    if record.kind.is_data:
        if operand is not UNSET and value_kind(operand) != record.kind:
            msg = f"Node '{node_id}': operand_value does not fit a {record.kind} node"
            raise GraphFileError(msg)
    elif operand is not UNSET:
        msg = f"Node '{node_id}': operation nodes carry no operand_value"
        raise GraphFileError(msg)

    if record.settled_error is not None and record.settled_value is not None:
        msg = f"Node '{node_id}': settled_value and settled_error are mutually exclusive"
        raise GraphFileError(msg)
    if record.settled_error is not None:
        settled: Value = ErrorValue(record.settled_error)
    else:
        settled = _record_value(node_id, "settled_value", record.settled_value)

    return Node(
        id=node_id,
        kind=record.kind,
        operand_value=operand,
        operator=record.operator,
        domain=record.domain,
        inputs=dict(record.inputs),
        output=record.output,
        settled_value=settled,
        is_derived=record.is_derived,
        has_error=record.has_error,
    )


def store_to_document(store: GraphStore) -> GraphDocument:
    """Convert a store into its file representation."""
    return GraphDocument(
        next_id=store.counter,
        nodes={node.id: _node_to_record(node) for node in store},
    )


def document_to_store(document: GraphDocument) -> GraphStore:
    """Rebuild a store from its file representation.

    The id counter resumes after the larger of ``next_id`` and the highest
    numbered ``node-<n>`` id present, so ids are never handed out twice.

    Raises:
        GraphFileError: If a node's values do not fit its kind.

    """
    store = GraphStore()
    highest = -1
    for node_id, record in document.nodes.items():
        store.set(node_id, _record_to_node(node_id, record))
        suffix = node_id.removeprefix(ID_PREFIX)
        if node_id.startswith(ID_PREFIX) and suffix.isdigit():
            highest = max(highest, int(suffix))
    store.advance_counter(max(document.next_id, highest + 1))
    return store


def load_graph(path: Path | str) -> GraphStore:
    """Load a graph store from a TOML file.

    Raises:
        GraphFileError: If the file is missing, is not valid TOML, or does not
            describe a valid graph.

    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            contents = tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"Graph file not found: {path}"
        raise GraphFileError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse {path}: {e}"
        raise GraphFileError(msg) from e

    try:
        document = GraphDocument.model_validate(contents)
    except ValidationError as e:
        msg = f"Invalid graph file {path}:\n{e}"
        raise GraphFileError(msg) from e

    store = document_to_store(document)
    logger.debug("Loaded %d nodes from %s", len(store), path)
    return store


def save_graph(store: GraphStore, path: Path | str) -> None:
    """Write a graph store to a TOML file, creating parent directories as needed."""
    path = Path(path)
    data = store_to_document(store).model_dump(mode="json", exclude_none=True, exclude_defaults=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)
    logger.debug("Saved %d nodes to %s", len(store), path)
