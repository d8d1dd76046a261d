"""Frozen, fully resolved schema graph used for encoding and decoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .canonical import canonical_form_rabin_fingerprint
from .errors import SchemaError
from .frozen_nodes import (
    ArrayNode,
    DecimalNode,
    EnumNode,
    FixedNode,
    FrozenField,
    FrozenNode,
    MapNode,
    NodeKind,
    RecordNode,
    SimpleNode,
    UnionNode,
    render_node,
)
from .lookup import UnionLookup
from .nodes import (
    ArrayType,
    Decimal,
    EnumType,
    FixedType,
    LogicalKind,
    LogicalTypeNode,
    MapType,
    Primitive,
    RecordType,
    SchemaKey,
    SchemaMut,
    UnionType,
)
from .parsing import parse_schema
from .schema_json import schema_to_json

__all__ = ["Schema", "freeze"]


@dataclass(frozen=True)
class _Remap:
    """A logical type that is not understood: references go to its inner node."""

    idx: int


# Logical types that resolve to a simple node, given the primitive they annotate.
_SIMPLE_LOGICAL = {
    (LogicalKind.UUID, Primitive.STRING): NodeKind.UUID,
    (LogicalKind.DATE, Primitive.INT): NodeKind.DATE,
    (LogicalKind.TIME_MILLIS, Primitive.INT): NodeKind.TIME_MILLIS,
    (LogicalKind.TIME_MICROS, Primitive.LONG): NodeKind.TIME_MICROS,
    (LogicalKind.TIMESTAMP_MILLIS, Primitive.LONG): NodeKind.TIMESTAMP_MILLIS,
    (LogicalKind.TIMESTAMP_MICROS, Primitive.LONG): NodeKind.TIMESTAMP_MICROS,
}

_Resolution = Union[None, _Remap, FrozenNode]


def _resolve_logical(
    node: LogicalTypeNode, nodes, decimal_links: list, idx: int
) -> _Resolution:
    inner_idx = node.inner.idx
    if inner_idx >= len(nodes):
        raise SchemaError("Logical type refers to node that doesn't exist")
    inner = nodes[inner_idx]
    logical_type = node.logical_type
    if isinstance(inner, LogicalTypeNode):
        raise SchemaError(
            "Immediately-nested logical types: "
            f"{inner.logical_type!r} in {logical_type!r}"
        )
    if isinstance(logical_type, Decimal):
        if inner is Primitive.BYTES:
            return DecimalNode(precision=logical_type.precision, scale=logical_type.scale)
        if isinstance(inner, FixedType):
            decimal_links.append((idx, inner_idx))
            return DecimalNode(precision=logical_type.precision, scale=logical_type.scale)
        return _Remap(inner_idx)
    if isinstance(logical_type, LogicalKind):
        if logical_type is LogicalKind.DURATION:
            if isinstance(inner, FixedType) and inner.size == 12:
                return SimpleNode(NodeKind.DURATION)
            return _Remap(inner_idx)
        if isinstance(inner, Primitive):
            kind = _SIMPLE_LOGICAL.get((logical_type, inner))
            if kind is not None:
                return SimpleNode(kind)
    return _Remap(inner_idx)


class Schema:
    """An Avro schema as a fully pre-computed, possibly cyclic graph of nodes.

    Built from a :class:`SchemaMut` (or directly from JSON), it also keeps
    the schema JSON and the Rabin fingerprint of its canonical form.
    """

    __slots__ = ("_nodes", "_root_idx", "_fingerprint", "_schema_json")

    def __init__(
        self, nodes: list, root_idx: int, fingerprint: bytes, schema_json: str
    ) -> None:
        self._nodes = nodes
        self._root_idx = root_idx
        self._fingerprint = fingerprint
        self._schema_json = schema_json

    @classmethod
    def parse(cls, text: str) -> Schema:
        """Parse schema JSON straight into a frozen schema."""
        return cls.from_mut(parse_schema(text))

    @classmethod
    def from_mut(cls, schema_mut: SchemaMut) -> Schema:
        """Resolve an editable schema into a frozen one.

        Raises :class:`SchemaError` if the graph is invalid (no nodes, keys
        out of bounds, nested logical types...).
        """
        nodes = schema_mut.nodes
        if not nodes:
            raise SchemaError("Schema must have at least one node (the root)")
        length = len(nodes)

        decimal_links: list[tuple[int, int]] = []
        resolutions: list[_Resolution] = [
            _resolve_logical(node, nodes, decimal_links, i)
            if isinstance(node, LogicalTypeNode)
            else None
            for i, node in enumerate(nodes)
        ]

        fingerprint = canonical_form_rabin_fingerprint(schema_mut)
        schema_json = schema_mut.schema_json
        if schema_json is None:
            schema_json = schema_to_json(schema_mut)

        def target_idx(key: SchemaKey) -> int:
            idx = key.idx
            if idx >= length:
                raise SchemaError(
                    f"SchemaKey index {idx} is out of bounds (len: {length})"
                )
            resolution = resolutions[idx]
            if isinstance(resolution, _Remap):
                idx = resolution.idx
            return idx

        # First create every node, so that references (possibly cyclic) can
        # then be wired to the final objects.
        frozen: list = []
        for node, resolution in zip(nodes, resolutions):
            if isinstance(node, LogicalTypeNode):
                frozen.append(
                    SimpleNode(NodeKind.NULL) if isinstance(resolution, _Remap) else resolution
                )
            elif isinstance(node, Primitive):
                frozen.append(SimpleNode(NodeKind[node.name]))
            elif isinstance(node, ArrayType):
                frozen.append(ArrayNode(items=None))
            elif isinstance(node, MapType):
                frozen.append(MapNode(values=None))
            elif isinstance(node, UnionType):
                frozen.append(UnionNode(variants=[]))
            elif isinstance(node, RecordType):
                frozen.append(
                    RecordNode(
                        name=node.name,
                        fields=[FrozenField(f.name, None) for f in node.fields],
                    )
                )
            elif isinstance(node, EnumType):
                frozen.append(EnumNode(name=node.name, symbols=list(node.symbols)))
            elif isinstance(node, FixedType):
                frozen.append(FixedNode(name=node.name, size=node.size))
            else:
                raise SchemaError(f"Unexpected schema node: {node!r}")

        for node, target in zip(nodes, frozen):
            if isinstance(node, ArrayType):
                target.items = frozen[target_idx(node.items)]
            elif isinstance(node, MapType):
                target.values = frozen[target_idx(node.values)]
            elif isinstance(node, UnionType):
                target.variants = [frozen[target_idx(key)] for key in node.variants]
            elif isinstance(node, RecordType):
                for source_field, frozen_field in zip(node.fields, target.fields):
                    frozen_field.schema = frozen[target_idx(source_field.type_)]

        for decimal_idx, fixed_idx in decimal_links:
            frozen[decimal_idx].fixed = frozen[fixed_idx]

        # Lookup tables read the finished variants, so they come last.
        for target in frozen:
            if isinstance(target, UnionNode):
                target.per_type_lookup = UnionLookup(target.variants)

        root_resolution = resolutions[0]
        root_idx = root_resolution.idx if isinstance(root_resolution, _Remap) else 0
        return cls(frozen, root_idx, fingerprint, schema_json)

    @property
    def root(self) -> FrozenNode:
        """The node representing the whole schema."""
        return self._nodes[self._root_idx]

    @property
    def json(self) -> str:
        """The JSON of this schema."""
        return self._schema_json

    @property
    def rabin_fingerprint(self) -> bytes:
        """The 8-byte Rabin fingerprint of the schema's canonical form."""
        return self._fingerprint

    def __repr__(self) -> str:
        return render_node(self.root)


def freeze(schema_mut: SchemaMut) -> Schema:
    """Turn an editable schema into a frozen :class:`Schema`."""
    return Schema.from_mut(schema_mut)


def _root_of(schema: Schema) -> Optional[FrozenNode]:
    return schema.root