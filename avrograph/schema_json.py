"""Serialization of an editable schema graph back to Avro schema JSON."""

from __future__ import annotations

import json
from typing import Any, Optional

from .errors import SchemaError
from .names import Name
from .nodes import (
    ArrayType,
    Decimal,
    EnumType,
    FixedType,
    LogicalTypeNode,
    MapType,
    Primitive,
    RecordType,
    SchemaMut,
    UnionType,
)

__all__ = ["schema_to_json", "schema_to_json_value"]

_CYCLE_MESSAGE = "Schema contains a cycle that can't be avoided using named references"


def schema_to_json_value(schema: SchemaMut) -> Any:
    """The schema as JSON-compatible Python values (dicts, lists, strings, ints).

    Named types are written in full the first time they are met and by name
    afterwards. Only the information held in the graph is written, so
    ``doc``, ``aliases``, ``default`` and the like are lost.
    """
    return _JsonBuilder(schema.nodes).build(0, None)


def schema_to_json(schema: SchemaMut) -> str:
    """The schema as compact JSON text."""
    return json.dumps(
        schema_to_json_value(schema), separators=(",", ":"), ensure_ascii=False
    )


class _JsonBuilder:
    def __init__(self, nodes) -> None:
        self._nodes = nodes
        # Per node: generation at which it was entered (0 if not in progress).
        # Named nodes keep their generation once written, marking them as refs.
        self._traversal_state = [0] * len(nodes)
        self._n_written_names = 1

    def _enter(self, idx: int) -> None:
        """Guard against cycles that no named reference can break."""
        previous = self._traversal_state[idx]
        current = self._n_written_names
        self._traversal_state[idx] = current
        # Meeting the same node again without having written a new name in
        # between means the serialization would loop forever.
        if previous >= current:
            raise SchemaError(_CYCLE_MESSAGE)

    def _leave(self, idx: int) -> None:
        self._traversal_state[idx] = 0

    def _should_write_as_ref(self, idx: int) -> bool:
        if self._traversal_state[idx] > 0:
            return True
        generation = self._n_written_names
        self._traversal_state[idx] = generation
        self._n_written_names = generation + 1
        return False

    @staticmethod
    def _ref(name: Name, parent_namespace: Optional[str]) -> str:
        if parent_namespace == name.namespace:
            return name.name
        if name.namespace is None:
            return "." + name.fully_qualified_name
        return name.fully_qualified_name

    @staticmethod
    def _put_name(
        value: dict, name: Name, parent_namespace: Optional[str]
    ) -> None:
        if parent_namespace == name.namespace:
            value["name"] = name.name
        elif name.namespace is None:
            # An empty namespace brings back the null namespace.
            value["namespace"] = ""
            value["name"] = name.name
        else:
            value["name"] = name.fully_qualified_name

    def build(self, idx: int, parent_namespace: Optional[str]) -> Any:
        if idx >= len(self._nodes):
            raise SchemaError("SchemaKey refers to non-existing node")
        node = self._nodes[idx]

        if isinstance(node, Primitive):
            return node.value

        if isinstance(node, LogicalTypeNode):
            self._enter(idx)
            logical_type = node.logical_type
            value: dict[str, Any] = {
                "logicalType": logical_type.as_str(),
                "type": self.build(node.inner.idx, parent_namespace),
            }
            if isinstance(logical_type, Decimal):
                value["scale"] = logical_type.scale
                value["precision"] = logical_type.precision
            self._leave(idx)
            return value

        if isinstance(node, ArrayType):
            self._enter(idx)
            value = {"type": "array", "items": self.build(node.items.idx, parent_namespace)}
            self._leave(idx)
            return value

        if isinstance(node, MapType):
            self._enter(idx)
            value = {"type": "map", "values": self.build(node.values.idx, parent_namespace)}
            self._leave(idx)
            return value

        if isinstance(node, UnionType):
            self._enter(idx)
            variants = [self.build(key.idx, parent_namespace) for key in node.variants]
            self._leave(idx)
            return variants

        if isinstance(node, RecordType):
            if self._should_write_as_ref(idx):
                return self._ref(node.name, parent_namespace)
            value = {"type": "record"}
            self._put_name(value, node.name, parent_namespace)
            namespace = node.name.namespace
            value["fields"] = [
                {"name": field.name, "type": self.build(field.type_.idx, namespace)}
                for field in node.fields
            ]
            return value

        if isinstance(node, EnumType):
            if self._should_write_as_ref(idx):
                return self._ref(node.name, parent_namespace)
            value = {"type": "enum"}
            self._put_name(value, node.name, parent_namespace)
            value["symbols"] = list(node.symbols)
            return value

        if isinstance(node, FixedType):
            if self._should_write_as_ref(idx):
                return self._ref(node.name, parent_namespace)
            value = {"type": "fixed"}
            self._put_name(value, node.name, parent_namespace)
            value["size"] = node.size
            return value

        raise SchemaError(f"Unexpected schema node: {node!r}")