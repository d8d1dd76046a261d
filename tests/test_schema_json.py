import json

import pytest

from avrograph.errors import SchemaError
from avrograph.names import Name
from avrograph.nodes import (
    ArrayType,
    Decimal,
    EnumType,
    FixedType,
    LogicalTypeNode,
    MapType,
    Primitive,
    RecordField,
    RecordType,
    SchemaKey,
    SchemaMut,
    UnionType,
)
from avrograph.schema_json import schema_to_json, schema_to_json_value


def _pig_value_schema() -> SchemaMut:
    return SchemaMut.from_nodes(
        [
            RecordType(Name("PigValue"), [RecordField("value", SchemaKey(1))]),
            UnionType([SchemaKey(2), SchemaKey(3), SchemaKey(4), SchemaKey(0)]),
            Primitive.NULL,
            Primitive.INT,
            Primitive.LONG,
        ]
    )


@pytest.mark.parametrize("primitive", list(Primitive))
def test_primitive_is_written_as_its_name(primitive):
    schema = SchemaMut.from_nodes([primitive])
    assert schema_to_json_value(schema) == primitive.value
    assert json.loads(schema_to_json(schema)) == primitive.value


def test_array_json_is_compact():
    schema = SchemaMut.from_nodes([ArrayType(SchemaKey(1)), Primitive.INT])
    assert schema_to_json(schema) == '{"type":"array","items":"int"}'


def test_map_holds_values():
    schema = SchemaMut.from_nodes([MapType(SchemaKey(1)), Primitive.STRING])
    value = schema_to_json_value(schema)
    assert list(value) == ["type", "values"]
    assert value["type"] == "map"
    assert value["values"] == "string"


def test_decimal_logical_type():
    schema = SchemaMut.from_nodes(
        [LogicalTypeNode(SchemaKey(1), Decimal(scale=2, precision=10)), Primitive.BYTES]
    )
    assert schema_to_json_value(schema) == {
        "logicalType": "decimal",
        "type": "bytes",
        "scale": 2,
        "precision": 10,
    }


def test_self_referential_record_uses_name():
    assert schema_to_json(_pig_value_schema()) == (
        '{"type":"record","name":"PigValue","fields":'
        '[{"name":"value","type":["null","int","long","PigValue"]}]}'
    )


def test_text_matches_value():
    schema = _pig_value_schema()
    assert json.loads(schema_to_json(schema)) == schema_to_json_value(schema)


def test_record_child_in_same_namespace_uses_short_name():
    schema = SchemaMut.from_nodes(
        [
            RecordType(Name("a.b.R"), [RecordField("f", SchemaKey(1))]),
            FixedType(Name("a.b.F"), 4),
        ]
    )
    value = schema_to_json_value(schema)
    assert value["name"] == "a.b.R"
    inner = value["fields"][0]["type"]
    assert inner["name"] == "F"
    assert inner["size"] == 4
    assert "namespace" not in inner


def test_null_namespace_inside_namespaced_record():
    schema = SchemaMut.from_nodes(
        [
            RecordType(
                Name("a.R"),
                [RecordField("s", SchemaKey(1)), RecordField("t", SchemaKey(1))],
            ),
            RecordType(Name("S"), []),
        ]
    )
    value = schema_to_json_value(schema)
    first = value["fields"][0]["type"]
    assert list(first) == ["type", "namespace", "name", "fields"]
    assert first["namespace"] == ""
    assert first["name"] == "S"
    # Later references to a null-namespace name from a namespace get a dot.
    assert value["fields"][1]["type"] == ".S"


def test_enum_symbols_and_non_ascii_kept():
    schema = SchemaMut.from_nodes([EnumType(Name("E"), ["A", "é"])])
    value = schema_to_json_value(schema)
    assert value["symbols"] == ["A", "é"]
    assert value["type"] == "enum"
    assert "é" in schema_to_json(schema)


def test_unnamed_node_may_appear_twice():
    schema = SchemaMut.from_nodes(
        [UnionType([SchemaKey(1), SchemaKey(1)]), ArrayType(SchemaKey(2)), Primitive.INT]
    )
    value = schema_to_json_value(schema)
    assert len(value) == 2
    assert value[0] == value[1]
    assert value[0]["items"] == "int"


def test_cycle_through_named_record_is_allowed():
    schema = SchemaMut.from_nodes(
        [
            RecordType(Name("R"), [RecordField("children", SchemaKey(1))]),
            ArrayType(SchemaKey(0)),
        ]
    )
    value = schema_to_json_value(schema)
    assert value["fields"][0]["type"]["items"] == "R"


def test_unbreakable_cycle_raises():
    schema = SchemaMut.from_nodes([ArrayType(SchemaKey(0))])
    with pytest.raises(SchemaError, match="cycle"):
        schema_to_json(schema)


def test_missing_node_raises():
    schema = SchemaMut.from_nodes([MapType(SchemaKey(3))])
    with pytest.raises(SchemaError, match="non-existing node"):
        schema_to_json_value(schema)


def test_empty_schema_raises():
    with pytest.raises(SchemaError):
        schema_to_json(SchemaMut.from_nodes([]))