"""Parsing of Avro schema JSON into an editable :class:`SchemaMut` graph."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from .cycles import check_for_cycles
from .errors import SchemaError
from .names import Name
from .nodes import (
    ArrayType,
    Decimal,
    EnumType,
    FixedType,
    LogicalKind,
    LogicalType,
    LogicalTypeNode,
    MapType,
    Primitive,
    RecordField,
    RecordType,
    SchemaKey,
    SchemaMut,
    SchemaNode,
    UnionType,
    UnknownLogicalType,
)

__all__ = ["parse_schema"]

# Keys pointing at names that were not defined yet carry this bit, and are
# remapped once the whole schema has been read.
_LATE_NAME_LOOKUP_REMAP_BIT = 1 << 64

_U32_MAX = (1 << 32) - 1

_PRIMITIVES = {primitive.value: primitive for primitive in Primitive}
_COMPLEX = ("array", "map", "record", "enum", "fixed")
_TYPE_NAMES = frozenset(_PRIMITIVES) | frozenset(_COMPLEX)

_LOGICAL_KINDS = {kind.value: kind for kind in LogicalKind}

_EXPECTING = "A string (type) or an object with a `type` field or an array (union)"


def _type_debug(type_name: str) -> str:
    return type_name.capitalize()


def _str_debug(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Raw JSON structure
# ---------------------------------------------------------------------------


@dataclass
class _RawType:
    name: str


@dataclass
class _RawRef:
    name: str


@dataclass
class _RawUnion:
    variants: list


@dataclass
class _RawField:
    name: str
    type_: Any


@dataclass
class _RawObject:
    type_: Any
    logical_type: Optional[str]
    name: Optional[str]
    namespace: Optional[str]
    fields: Optional[list]
    symbols: Optional[list]
    items: Any
    values: Any
    size: Optional[int]
    precision: Optional[int]
    scale: Optional[int]

    def has_local_properties(self) -> bool:
        return any(
            prop is not None
            for prop in (
                self.fields,
                self.symbols,
                self.items,
                self.values,
                self.size,
                self.precision,
                self.scale,
            )
        )


_RawNode = Union[_RawType, _RawRef, _RawUnion, _RawObject]


def _opt_str(obj: dict, key: str) -> Optional[str]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SchemaError(f"invalid type for `{key}`: {value!r}, expected a string")
    return value


def _opt_uint(obj: dict, key: str, maximum: Optional[int] = None) -> Optional[int]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise SchemaError(
            f"invalid value for `{key}`: {value!r}, expected a non-negative integer"
        )
    if maximum is not None and value > maximum:
        raise SchemaError(f"invalid value for `{key}`: {value!r} is too large")
    return value


def _opt_node(obj: dict, key: str) -> Optional[_RawNode]:
    value = obj.get(key)
    if value is None:
        return None
    return _to_raw(value)


def _to_raw_field(value: Any) -> _RawField:
    if not isinstance(value, dict):
        raise SchemaError(f"invalid type for record field: {value!r}, expected an object")
    name = _opt_str(value, "name")
    if name is None:
        raise SchemaError("missing field `name` in record field")
    if "type" not in value:
        raise SchemaError("missing field `type` in record field")
    return _RawField(name=name, type_=_to_raw(value["type"]))


def _to_raw_object(obj: dict) -> _RawObject:
    if "type" not in obj:
        raise SchemaError("missing field `type`")
    type_ = _to_raw(obj["type"])

    fields = obj.get("fields")
    if fields is not None:
        if not isinstance(fields, list):
            raise SchemaError(f"invalid type for `fields`: {fields!r}, expected an array")
        fields = [_to_raw_field(field) for field in fields]

    symbols = obj.get("symbols")
    if symbols is not None:
        if not isinstance(symbols, list) or not all(isinstance(s, str) for s in symbols):
            raise SchemaError(
                f"invalid type for `symbols`: {symbols!r}, expected an array of strings"
            )
        symbols = list(symbols)

    return _RawObject(
        type_=type_,
        logical_type=_opt_str(obj, "logicalType"),
        name=_opt_str(obj, "name"),
        namespace=_opt_str(obj, "namespace"),
        fields=fields,
        symbols=symbols,
        items=_opt_node(obj, "items"),
        values=_opt_node(obj, "values"),
        size=_opt_uint(obj, "size"),
        precision=_opt_uint(obj, "precision"),
        scale=_opt_uint(obj, "scale", _U32_MAX),
    )


def _to_raw(value: Any) -> _RawNode:
    if isinstance(value, str):
        # A type name right away, or a reference to a named type.
        if value in _TYPE_NAMES:
            return _RawType(value)
        return _RawRef(value)
    if isinstance(value, list):
        return _RawUnion([_to_raw(variant) for variant in value])
    if isinstance(value, dict):
        return _to_raw_object(value)
    raise SchemaError(f"invalid type: {value!r}, expected {_EXPECTING}")


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------

_NameKey = tuple  # (namespace or None, name)


def _display_name_key(name_key: _NameKey) -> str:
    namespace, name = name_key
    return name if namespace is None else f"{namespace}.{name}"


def _split_dotted(fully_qualified: str) -> _NameKey:
    namespace, name = fully_qualified.rsplit(".", 1)
    return (namespace or None, name)


class _Builder:
    def __init__(self) -> None:
        self.nodes: list[SchemaNode] = []
        self.names: dict[_NameKey, int] = {}
        self.unresolved_names: list[_NameKey] = []

    def register(
        self,
        raw: _RawNode,
        enclosing_namespace: Optional[str],
        will_have_logical_type: Optional[str],
    ) -> SchemaKey:
        if isinstance(raw, _RawType):
            return self._register_type(raw)
        if isinstance(raw, _RawObject):
            return self._register_object(raw, enclosing_namespace, will_have_logical_type)
        if isinstance(raw, _RawUnion):
            idx = len(self.nodes)
            self.nodes.append(Primitive.NULL)  # reserve the spot
            variants = [self.register(v, enclosing_namespace, None) for v in raw.variants]
            self.nodes[idx] = UnionType(variants)
            return SchemaKey(idx)
        return self._register_ref(raw, enclosing_namespace)

    def _register_type(self, raw: _RawType) -> SchemaKey:
        primitive = _PRIMITIVES.get(raw.name)
        if primitive is None:
            raise SchemaError(
                f"Expected primitive type name, but got {_type_debug(raw.name)} as type "
                "which is a complex type, so should be in an object."
            )
        self.nodes.append(primitive)
        return SchemaKey(len(self.nodes) - 1)

    def _register_ref(self, raw: _RawRef, enclosing_namespace: Optional[str]) -> SchemaKey:
        # The referenced definition may come later in the document.
        if "." in raw.name:
            name_key = _split_dotted(raw.name)
        else:
            name_key = (enclosing_namespace, raw.name)
        idx = self.names.get(name_key)
        if idx is not None:
            return SchemaKey(idx)
        pending = len(self.unresolved_names)
        self.unresolved_names.append(name_key)
        return SchemaKey(pending | _LATE_NAME_LOOKUP_REMAP_BIT)

    def _register_object(
        self,
        obj: _RawObject,
        enclosing_namespace: Optional[str],
        will_have_logical_type: Optional[str],
    ) -> SchemaKey:
        idx = len(self.nodes)

        name_key: Optional[_NameKey] = None
        if obj.name is not None:
            if "." in obj.name:
                name_key = _split_dotted(obj.name)
            elif obj.namespace is not None:
                # An explicitly empty namespace means the null namespace.
                name_key = (obj.namespace or None, obj.name)
            else:
                name_key = (enclosing_namespace, obj.name)
            if name_key in self.names:
                raise SchemaError(
                    "The Schema contains duplicate definitions for "
                    f"{_display_name_key(name_key)}"
                )
            self.names[name_key] = idx

        def name_for(type_name: str) -> tuple[Name, _NameKey]:
            if name_key is None:
                raise SchemaError(f"Missing name for type {_type_debug(type_name)}")
            return Name.from_parts(name_key[0], name_key[1]), name_key

        self.nodes.append(Primitive.NULL)  # reserve the spot

        if obj.logical_type is not None:
            logical_type_name = obj.logical_type
            if will_have_logical_type is not None:
                raise SchemaError(
                    "Immediately-nested logical types: "
                    f"{_str_debug(logical_type_name)} in {_str_debug(will_have_logical_type)}"
                )
            logical_type = self._logical_type(obj, logical_type_name)
            inner = self.register(obj.type_, enclosing_namespace, logical_type_name)
            self.nodes[idx] = LogicalTypeNode(inner=inner, logical_type=logical_type)
            return SchemaKey(idx)

        type_ = obj.type_
        if isinstance(type_, _RawType) and type_.name in _COMPLEX:
            type_name = type_.name

            def required(value: Any, field_name: str) -> Any:
                if value is None:
                    raise SchemaError(
                        f"Missing field `{field_name}` on type {_type_debug(type_name)}"
                    )
                return value

            if type_name == "array":
                node: SchemaNode = ArrayType(
                    self.register(required(obj.items, "items"), enclosing_namespace, None)
                )
            elif type_name == "map":
                node = MapType(
                    self.register(required(obj.values, "values"), enclosing_namespace, None)
                )
            elif type_name == "enum":
                name, _ = name_for(type_name)
                node = EnumType(name=name, symbols=list(required(obj.symbols, "symbols")))
            elif type_name == "fixed":
                name, _ = name_for(type_name)
                node = FixedType(name=name, size=required(obj.size, "size"))
            else:
                name, record_key = name_for(type_name)
                fields = [
                    RecordField(
                        name=field.name,
                        type_=self.register(field.type_, record_key[0], None),
                    )
                    for field in required(obj.fields, "fields")
                ]
                node = RecordType(name=name, fields=fields)
            self.nodes[idx] = node
            return SchemaKey(idx)

        # {"type": {"type": "string"}} is a valid, if roundabout, way of
        # writing a type, as long as nothing else is set at this level.
        if obj.has_local_properties():
            raise SchemaError(
                "Got unnecessarily-nested type, but local object properties are set "
                "- those would be ignored"
            )
        self.nodes.pop()
        namespace = (
            name_key[0]
            if name_key is not None and name_key[0] is not None
            else enclosing_namespace
        )
        return self.register(type_, namespace, will_have_logical_type)

    @staticmethod
    def _logical_type(obj: _RawObject, logical_type_name: str) -> LogicalType:
        def required(value: Any, field_name: str) -> Any:
            if value is None:
                raise SchemaError(
                    f"Missing field `{field_name}` on logical type "
                    f"{_str_debug(logical_type_name)}"
                )
            return value

        if logical_type_name == "decimal":
            precision = required(obj.precision, "precision")
            scale = required(obj.scale, "scale")
            return Decimal(scale=scale, precision=precision)
        kind = _LOGICAL_KINDS.get(logical_type_name)
        if kind is not None:
            return kind
        return UnknownLogicalType(logical_type_name)

    def resolve_late_names(self) -> None:
        if not self.unresolved_names:
            return
        resolved: list[SchemaKey] = []
        for name_key in self.unresolved_names:
            idx = self.names.get(name_key)
            if idx is None:
                raise SchemaError(
                    "The Schema contains an unknown reference: "
                    f"{_display_name_key(name_key)}"
                )
            resolved.append(SchemaKey(idx))

        def fix(key: SchemaKey) -> SchemaKey:
            if key.idx & _LATE_NAME_LOOKUP_REMAP_BIT:
                return resolved[key.idx ^ _LATE_NAME_LOOKUP_REMAP_BIT]
            return key

        for node in self.nodes:
            if isinstance(node, ArrayType):
                node.items = fix(node.items)
            elif isinstance(node, MapType):
                node.values = fix(node.values)
            elif isinstance(node, UnionType):
                node.variants = [fix(variant) for variant in node.variants]
            elif isinstance(node, RecordType):
                for field in node.fields:
                    field.type_ = fix(field.type_)
            elif isinstance(node, LogicalTypeNode):
                node.inner = fix(node.inner)


def parse_schema(text: str) -> SchemaMut:
    """Parse Avro schema JSON into a :class:`SchemaMut`.

    Named types may be referenced before they are defined. The original JSON
    is kept, minified, with all of its keys. Raises :class:`SchemaError` on
    invalid schemas, including records that unconditionally contain
    themselves.
    """
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as error:
        raise SchemaError(str(error)) from error

    builder = _Builder()
    builder.register(_to_raw(document), None, None)
    builder.resolve_late_names()

    schema_json = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    schema = SchemaMut(builder.nodes, schema_json)
    check_for_cycles(schema)
    return schema