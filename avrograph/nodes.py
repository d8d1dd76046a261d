"""Editable graph representation of an Avro schema.

Nodes live in a flat list held by :class:`SchemaMut`; references between
nodes are :class:`SchemaKey` values that index into that list. The first
node is the root of the schema.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from .errors import SchemaError
from .names import Name

__all__ = [
    "SchemaKey",
    "Primitive",
    "ArrayType",
    "MapType",
    "UnionType",
    "RecordField",
    "RecordType",
    "EnumType",
    "FixedType",
    "LogicalKind",
    "Decimal",
    "UnknownLogicalType",
    "LogicalType",
    "LogicalTypeNode",
    "RegularType",
    "SchemaNode",
    "SchemaMut",
]


@dataclass(frozen=True, order=True)
class SchemaKey:
    """The location of a node in a :class:`SchemaMut`."""

    idx: int

    def __post_init__(self) -> None:
        if not isinstance(self.idx, int) or isinstance(self.idx, bool) or self.idx < 0:
            raise ValueError(f"SchemaKey index must be a non-negative integer, got {self.idx!r}")

    @classmethod
    def root(cls) -> SchemaKey:
        """The key of the root node, which is always the first one."""
        return cls(0)

    def __repr__(self) -> str:
        return f"SchemaKey({self.idx})"


class Primitive(enum.Enum):
    """Avro primitive types; the value is the type name used in schema JSON."""

    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"


@dataclass
class ArrayType:
    """An Avro array; ``items`` is the key of the schema of every item."""

    items: SchemaKey


@dataclass
class MapType:
    """An Avro map with string keys; ``values`` is the key of the value schema."""

    values: SchemaKey


@dataclass
class UnionType:
    """An Avro union; ``variants`` are the keys of the allowed schemas."""

    variants: list[SchemaKey]


@dataclass
class RecordField:
    """A field of a record: its name and the key of its schema."""

    name: str
    type_: SchemaKey


@dataclass
class RecordType:
    """An Avro record, with its fully qualified name and its fields."""

    name: Name
    fields: list[RecordField]


@dataclass
class EnumType:
    """An Avro enum, with its fully qualified name and its symbols."""

    name: Name
    symbols: list[str]


@dataclass
class FixedType:
    """An Avro fixed type of ``size`` bytes."""

    name: Name
    size: int


class LogicalKind(enum.Enum):
    """Logical types that carry no parameters."""

    UUID = "uuid"
    DATE = "date"
    TIME_MILLIS = "time-millis"
    TIME_MICROS = "time-micros"
    TIMESTAMP_MILLIS = "timestamp-millis"
    TIMESTAMP_MICROS = "timestamp-micros"
    DURATION = "duration"

    def as_str(self) -> str:
        """The name of the logical type as it appears in schema JSON."""
        return self.value


@dataclass
class Decimal:
    """The ``decimal`` logical type."""

    scale: int
    precision: int

    def as_str(self) -> str:
        """The name of the logical type as it appears in schema JSON."""
        return "decimal"


@dataclass
class UnknownLogicalType:
    """A logical type that is not handled in any particular way."""

    logical_type_name: str

    def as_str(self) -> str:
        """The name of the logical type as it appears in schema JSON."""
        return self.logical_type_name


LogicalType = Union[LogicalKind, Decimal, UnknownLogicalType]


@dataclass
class LogicalTypeNode:
    """A node annotating the regular type at ``inner`` with a logical type."""

    inner: SchemaKey
    logical_type: LogicalType


RegularType = Union[
    Primitive, ArrayType, MapType, UnionType, RecordType, EnumType, FixedType
]
SchemaNode = Union[RegularType, LogicalTypeNode]


class SchemaMut:
    """An editable Avro schema, stored as a possibly cyclic graph of nodes."""

    __slots__ = ("_nodes", "_schema_json")

    def __init__(self, nodes, schema_json: Optional[str] = None) -> None:
        self._nodes: list[SchemaNode] = list(nodes)
        self._schema_json = schema_json

    @classmethod
    def from_nodes(cls, nodes) -> SchemaMut:
        """Build a schema from nodes; the first one is the root."""
        return cls(nodes, None)

    @property
    def nodes(self) -> tuple[SchemaNode, ...]:
        """The graph storage; keys index into it."""
        return tuple(self._nodes)

    @property
    def schema_json(self) -> Optional[str]:
        """The original JSON of the schema, if it is still known."""
        return self._schema_json

    def edit_nodes(self) -> list[SchemaNode]:
        """The graph storage, for editing.

        The original JSON is dropped, since it may no longer match.
        """
        self._schema_json = None
        return self._nodes

    def root(self) -> SchemaNode:
        """The root node, which is the first one."""
        if not self._nodes:
            raise SchemaError(
                "Schema should have nodes - have you updated it "
                "in such a way that all of its nodes were removed?"
            )
        return self._nodes[0]

    def get(self, key: SchemaKey) -> Optional[SchemaNode]:
        """The node at ``key``, or ``None`` if there is none."""
        if key.idx < len(self._nodes):
            return self._nodes[key.idx]
        return None

    def __getitem__(self, key: SchemaKey) -> SchemaNode:
        node = self.get(key)
        if node is None:
            raise IndexError(
                f"SchemaKey index {key.idx} is out of bounds (len: {len(self._nodes)})"
            )
        return node

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"SchemaMut(nodes={self._nodes!r})"