"""Nodes of a frozen schema graph.

Frozen nodes reference each other directly, so the graph may contain
cycles. Nodes compare by identity. Their ``repr`` is depth-limited, so a
cyclic graph renders in finite space.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from .names import Name

__all__ = [
    "NodeKind",
    "SimpleNode",
    "ArrayNode",
    "MapNode",
    "UnionNode",
    "FrozenField",
    "RecordNode",
    "EnumNode",
    "FixedNode",
    "DecimalNode",
    "FrozenNode",
    "render_node",
]


class NodeKind(enum.Enum):
    """Kinds of frozen nodes; the value is the name used when rendering."""

    NULL = "Null"
    BOOLEAN = "Boolean"
    INT = "Int"
    LONG = "Long"
    FLOAT = "Float"
    DOUBLE = "Double"
    BYTES = "Bytes"
    STRING = "String"
    ARRAY = "Array"
    MAP = "Map"
    UNION = "Union"
    RECORD = "Record"
    ENUM = "Enum"
    FIXED = "Fixed"
    DECIMAL = "Decimal"
    UUID = "Uuid"
    DATE = "Date"
    TIME_MILLIS = "TimeMillis"
    TIME_MICROS = "TimeMicros"
    TIMESTAMP_MILLIS = "TimestampMillis"
    TIMESTAMP_MICROS = "TimestampMicros"
    DURATION = "Duration"

    @property
    def is_simple(self) -> bool:
        """Whether nodes of this kind carry no data of their own."""
        return self not in _COMPOSITE_KINDS


_COMPOSITE_KINDS = frozenset(
    {
        NodeKind.ARRAY,
        NodeKind.MAP,
        NodeKind.UNION,
        NodeKind.RECORD,
        NodeKind.ENUM,
        NodeKind.FIXED,
        NodeKind.DECIMAL,
    }
)


class _Rendered:
    def __repr__(self) -> str:
        return render_node(self)


@dataclass(eq=False, repr=False)
class SimpleNode(_Rendered):
    """A node that carries nothing but its kind (primitives, most logical types)."""

    kind: NodeKind

    def __post_init__(self) -> None:
        if not isinstance(self.kind, NodeKind) or not self.kind.is_simple:
            raise ValueError(f"{self.kind!r} is not the kind of a simple node")


@dataclass(eq=False, repr=False)
class ArrayNode(_Rendered):
    """An array whose items all follow ``items``."""

    items: Any
    kind: ClassVar[NodeKind] = NodeKind.ARRAY


@dataclass(eq=False, repr=False)
class MapNode(_Rendered):
    """A map with string keys whose values all follow ``values``."""

    values: Any
    kind: ClassVar[NodeKind] = NodeKind.MAP


@dataclass(eq=False, repr=False)
class UnionNode(_Rendered):
    """A union of ``variants``; ``per_type_lookup`` is filled once the graph is complete."""

    variants: list
    per_type_lookup: Any = None
    kind: ClassVar[NodeKind] = NodeKind.UNION


@dataclass(eq=False, repr=False)
class FrozenField:
    """A record field: its name and the node of its schema."""

    name: str
    schema: Any

    def __repr__(self) -> str:
        return _render_field(self, 1)


@dataclass(eq=False, repr=False)
class RecordNode(_Rendered):
    """A record; ``per_name_lookup`` maps field names to their positions."""

    name: Name
    fields: list
    per_name_lookup: dict = field(init=False)
    kind: ClassVar[NodeKind] = NodeKind.RECORD

    def __post_init__(self) -> None:
        self.per_name_lookup = {f.name: i for i, f in enumerate(self.fields)}


@dataclass(eq=False, repr=False)
class EnumNode(_Rendered):
    """An enum; ``per_name_lookup`` maps symbols to their positions."""

    name: Name
    symbols: list
    per_name_lookup: dict = field(init=False)
    kind: ClassVar[NodeKind] = NodeKind.ENUM

    def __post_init__(self) -> None:
        self.per_name_lookup = {s: i for i, s in enumerate(self.symbols)}


@dataclass(eq=False, repr=False)
class FixedNode(_Rendered):
    """A fixed-size byte sequence of ``size`` bytes."""

    name: Name
    size: int
    kind: ClassVar[NodeKind] = NodeKind.FIXED


@dataclass(eq=False, repr=False)
class DecimalNode(_Rendered):
    """A decimal; stored as bytes when ``fixed`` is None, else in that fixed node."""

    precision: int
    scale: int
    fixed: Optional[FixedNode] = None
    kind: ClassVar[NodeKind] = NodeKind.DECIMAL


FrozenNode = Union[
    SimpleNode,
    ArrayNode,
    MapNode,
    UnionNode,
    RecordNode,
    EnumNode,
    FixedNode,
    DecimalNode,
]

_MAX_DEPTH = 2


def render_node(node: FrozenNode) -> str:
    """A readable description of ``node``, cut off two levels down."""
    return _render(node, 0)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _render_fixed_struct(node: FixedNode) -> str:
    return f"Fixed {{ size: {node.size}, name: {_quote(node.name.fully_qualified_name)} }}"


def _render_field(f: FrozenField, depth: int) -> str:
    return f"RecordField {{ name: {_quote(f.name)}, schema: {_render(f.schema, depth)} }}"


def _render(node: FrozenNode, depth: int) -> str:
    label = node.kind.value
    if isinstance(node, SimpleNode) or depth >= _MAX_DEPTH:
        return label
    inner = depth + 1
    if isinstance(node, ArrayNode):
        body = _render(node.items, inner)
    elif isinstance(node, MapNode):
        body = _render(node.values, inner)
    elif isinstance(node, UnionNode):
        variants = ", ".join(_render(v, inner) for v in node.variants)
        body = f"Union {{ variants: [{variants}] }}"
    elif isinstance(node, RecordNode):
        fields = ", ".join(_render_field(f, inner) for f in node.fields)
        body = (
            f"Record {{ fields: [{fields}], "
            f"name: {_quote(node.name.fully_qualified_name)} }}"
        )
    elif isinstance(node, EnumNode):
        symbols = ", ".join(_quote(s) for s in node.symbols)
        body = (
            f"Enum {{ name: {_quote(node.name.fully_qualified_name)}, "
            f"symbols: [{symbols}] }}"
        )
    elif isinstance(node, FixedNode):
        body = _render_fixed_struct(node)
    elif isinstance(node, DecimalNode):
        representation = (
            "Bytes" if node.fixed is None else f"Fixed({_render_fixed_struct(node.fixed)})"
        )
        body = (
            f"Decimal {{ precision: {node.precision}, scale: {node.scale}, "
            f"repr: {representation} }}"
        )
    else:
        raise TypeError(f"Not a frozen schema node: {node!r}")
    return f"{label}({body})"