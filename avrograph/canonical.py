"""Parsing Canonical Form of a schema and its Rabin fingerprint."""

from __future__ import annotations

from .errors import SchemaError
from .names import Name
from .nodes import (
    ArrayType,
    EnumType,
    FixedType,
    LogicalTypeNode,
    MapType,
    Primitive,
    RecordType,
    SchemaKey,
    SchemaMut,
    UnionType,
)
from .rabin import Rabin

__all__ = ["canonical_form_rabin_fingerprint"]


def canonical_form_rabin_fingerprint(schema: SchemaMut) -> bytes:
    """The 8-byte Rabin fingerprint of the schema's Parsing Canonical Form.

    This is the fingerprint used by single object encoding. Logical types
    are ignored, as the canonical form does not carry them.
    """
    writer = _CanonicalWriter(schema.nodes)
    writer.write(SchemaKey.root())
    hasher = Rabin()
    hasher.update("".join(writer.parts))
    return hasher.digest()


class _CanonicalWriter:
    """Writes the canonical form the way the reference implementation does.

    No escaping is applied, so the output is not guaranteed to be valid JSON.
    """

    def __init__(self, nodes) -> None:
        self._nodes = nodes
        self._named_type_written = [False] * len(nodes)
        self.parts: list[str] = []

    def _emit(self, text: str) -> None:
        self.parts.append(text)

    def _write_full_definition(self, idx: int, name: Name) -> bool:
        """True the first time a named node is met; otherwise write its name."""
        if not self._named_type_written[idx]:
            self._named_type_written[idx] = True
            return True
        self._emit(f'"{name.fully_qualified_name}"')
        return False

    def write(self, key: SchemaKey) -> None:
        if key.idx >= len(self._nodes):
            raise SchemaError("SchemaKey refers to non-existing node")
        node = self._nodes[key.idx]

        if isinstance(node, LogicalTypeNode):
            self.write(node.inner)
        elif isinstance(node, Primitive):
            self._emit(f'"{node.value}"')
        elif isinstance(node, UnionType):
            self._emit("[")
            for position, variant in enumerate(node.variants):
                if position:
                    self._emit(",")
                self.write(variant)
            self._emit("]")
        elif isinstance(node, ArrayType):
            self._emit('{"type":"array","items":')
            self.write(node.items)
            self._emit("}")
        elif isinstance(node, MapType):
            self._emit('{"type":"map","values":')
            self.write(node.values)
            self._emit("}")
        elif isinstance(node, EnumType):
            if self._write_full_definition(key.idx, node.name):
                self._emit('{"name":"')
                self._emit(node.name.fully_qualified_name)
                self._emit('","type":"enum","symbols":[')
                self._emit(",".join(f'"{symbol}"' for symbol in node.symbols))
                self._emit("]}")
        elif isinstance(node, FixedType):
            if self._write_full_definition(key.idx, node.name):
                self._emit('{"name":"')
                self._emit(node.name.fully_qualified_name)
                self._emit('","type":"fixed","size":')
                self._emit(str(node.size))
                self._emit("}")
        elif isinstance(node, RecordType):
            if self._write_full_definition(key.idx, node.name):
                self._emit('{"name":"')
                self._emit(node.name.fully_qualified_name)
                self._emit('","type":"record","fields":[')
                for position, field in enumerate(node.fields):
                    if position:
                        self._emit(",")
                    self._emit('{"name":"')
                    self._emit(field.name)
                    self._emit('","type":')
                    self.write(field.type_)
                    self._emit("}")
                self._emit("]}")
        else:
            raise SchemaError(f"Unexpected schema node: {node!r}")