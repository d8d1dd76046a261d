"""Per-type lookup tables that pick a union variant for a value."""

from __future__ import annotations

import enum
from typing import Optional, Sequence

from .frozen_nodes import (
    ArrayNode,
    DecimalNode,
    EnumNode,
    FixedNode,
    MapNode,
    NodeKind,
    RecordNode,
    SimpleNode,
    UnionNode,
)
from .names import Name

__all__ = ["LookupKey", "UnionLookup"]


class LookupKey(enum.Enum):
    """Shapes of values for which a union variant can be chosen without a name."""

    NULL = enum.auto()
    UNIT_STRUCT = enum.auto()
    BOOLEAN = enum.auto()
    INTEGER = enum.auto()
    INTEGER4 = enum.auto()
    INTEGER8 = enum.auto()
    FLOAT4 = enum.auto()
    FLOAT8 = enum.auto()
    STR = enum.auto()
    SLICE_U8 = enum.auto()
    UNIT_VARIANT = enum.auto()
    STRUCT_OR_MAP = enum.auto()
    SEQ_OR_TUPLE_OR_TUPLE_STRUCT = enum.auto()


_K = LookupKey

_INT_LIKE = ((_K.INTEGER, 0), (_K.INTEGER4, 0), (_K.INTEGER8, 1))
_LONG_LIKE = ((_K.INTEGER, 0), (_K.INTEGER4, 1), (_K.INTEGER8, 0))

# For each simple kind: whether it is registered under its type name, and
# the (key, priority) pairs it can serve. Lower priority wins; equal lowest
# priorities are a conflict and leave the key unresolved.
_SIMPLE_RULES: dict[NodeKind, tuple[bool, tuple[tuple[LookupKey, int], ...]]] = {
    NodeKind.NULL: (True, ((_K.NULL, 0), (_K.UNIT_STRUCT, 0), (_K.UNIT_VARIANT, 2))),
    NodeKind.BOOLEAN: (True, ((_K.BOOLEAN, 0),)),
    NodeKind.INT: (True, _INT_LIKE),
    NodeKind.LONG: (True, _LONG_LIKE),
    NodeKind.FLOAT: (True, ((_K.FLOAT4, 0), (_K.FLOAT8, 1))),
    NodeKind.DOUBLE: (True, ((_K.FLOAT8, 0), (_K.FLOAT4, 1))),
    NodeKind.BYTES: (
        True,
        (
            (_K.STR, 10),
            (_K.UNIT_STRUCT, 10),
            (_K.SLICE_U8, 0),
            (_K.SEQ_OR_TUPLE_OR_TUPLE_STRUCT, 2),
            (_K.UNIT_VARIANT, 10),
        ),
    ),
    NodeKind.STRING: (
        True,
        ((_K.STR, 0), (_K.UNIT_STRUCT, 0), (_K.SLICE_U8, 1), (_K.UNIT_VARIANT, 1)),
    ),
    # A uuid is indistinguishable from a string, so a union holding both
    # leaves STR unresolved rather than guessing.
    NodeKind.UUID: (True, ((_K.STR, 0),)),
    NodeKind.DATE: (True, _INT_LIKE),
    NodeKind.TIME_MILLIS: (True, _INT_LIKE),
    NodeKind.TIME_MICROS: (True, _LONG_LIKE),
    NodeKind.TIMESTAMP_MILLIS: (True, _LONG_LIKE),
    NodeKind.TIMESTAMP_MICROS: (True, _LONG_LIKE),
    NodeKind.DURATION: (
        False,
        (
            (_K.STRUCT_OR_MAP, 5),
            (_K.SEQ_OR_TUPLE_OR_TUPLE_STRUCT, 5),
            (_K.SLICE_U8, 5),
        ),
    ),
}

_ENUM_RULES = (
    (_K.INTEGER, 10),
    (_K.INTEGER4, 10),
    (_K.INTEGER8, 10),
    (_K.UNIT_STRUCT, 0),
    (_K.STR, 5),
    (_K.UNIT_VARIANT, 0),
)
_FIXED_RULES = ((_K.STR, 15), (_K.SLICE_U8, 0), (_K.SEQ_OR_TUPLE_OR_TUPLE_STRUCT, 2))
_DECIMAL_RULES = (
    (_K.INTEGER, 5),
    (_K.INTEGER4, 5),
    (_K.INTEGER8, 5),
    (_K.FLOAT8, 2),
    (_K.STR, 20),
)


class UnionLookup:
    """Finds the variant of a union matching a value's shape or a name.

    Results are ``(discriminant, node)`` pairs, the discriminant being the
    variant's position in the union.
    """

    __slots__ = ("_per_name", "_per_key")

    def __init__(self, variants: Sequence) -> None:
        self._per_name: dict[str, tuple[int, object]] = {}
        # key -> (priority, entry), entry None meaning a conflict
        states: dict[LookupKey, tuple[int, Optional[tuple[int, object]]]] = {}

        for discriminant, node in enumerate(variants):
            entry = (discriminant, node)

            def register(key: LookupKey, priority: int) -> None:
                current = states.get(key)
                if current is None or priority < current[0]:
                    states[key] = (priority, entry)
                elif priority == current[0]:
                    states[key] = (priority, None)

            def register_name(name: Name) -> None:
                self._per_name[name.name] = entry
                self._per_name[name.fully_qualified_name] = entry

            def register_type_name() -> None:
                self._per_name[node.kind.value] = entry

            if isinstance(node, SimpleNode):
                has_type_name, rules = _SIMPLE_RULES[node.kind]
                if has_type_name:
                    register_type_name()
            elif isinstance(node, ArrayNode):
                register_type_name()
                rules = ((_K.SEQ_OR_TUPLE_OR_TUPLE_STRUCT, 0),)
            elif isinstance(node, MapNode):
                register_type_name()
                rules = ((_K.STRUCT_OR_MAP, 0),)
            elif isinstance(node, UnionNode):
                # Nested unions are not allowed; only reachable by type name.
                register_type_name()
                rules = ()
            elif isinstance(node, EnumNode):
                register_name(node.name)
                rules = _ENUM_RULES
            elif isinstance(node, RecordNode):
                register_name(node.name)
                rules = ((_K.STRUCT_OR_MAP, 0),)
            elif isinstance(node, FixedNode):
                register_name(node.name)
                rules = _FIXED_RULES
            elif isinstance(node, DecimalNode):
                register_type_name()
                if node.fixed is not None:
                    register_name(node.fixed.name)
                rules = _DECIMAL_RULES
            else:
                raise TypeError(f"Not a frozen schema node: {node!r}")

            for key, priority in rules:
                register(key, priority)

        self._per_key: dict[LookupKey, tuple[int, object]] = {
            key: entry for key, (_, entry) in states.items() if entry is not None
        }

    def unnamed(self, key: LookupKey) -> Optional[tuple[int, object]]:
        """The single best variant for values of shape ``key``, if there is one."""
        return self._per_key.get(key)

    def named(self, name: str) -> Optional[tuple[int, object]]:
        """The variant registered under a type name or a (qualified) name."""
        return self._per_name.get(name)