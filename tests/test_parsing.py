import pytest

from avrograph.canonical import canonical_form_rabin_fingerprint
from avrograph.errors import SchemaError, UnconditionalCycle
from avrograph.nodes import (
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
    UnionType,
    UnknownLogicalType,
)
from avrograph.parsing import parse_schema
from avrograph.schema_json import schema_to_json


def test_primitive():
    schema = parse_schema('"int"')
    assert schema.nodes == (Primitive.INT,)
    assert schema.schema_json == '"int"'


def test_record_with_self_reference_through_union():
    schema = parse_schema(
        '{"type":"record","name":"a.b.Rec","fields":['
        '{"name":"x","type":"long"},{"name":"next","type":["null","Rec"]}]}'
    )
    root = schema.root()
    assert isinstance(root, RecordType)
    assert root.name.fully_qualified_name == "a.b.Rec"
    assert root.name.namespace == "a.b"
    assert [f.name for f in root.fields] == ["x", "next"]
    assert schema[root.fields[0].type_] == Primitive.LONG
    union = schema[root.fields[1].type_]
    assert isinstance(union, UnionType)
    assert schema[union.variants[0]] == Primitive.NULL
    assert union.variants[1] == SchemaKey(0)


def test_forward_reference():
    schema = parse_schema('["Foo", {"type":"fixed","name":"Foo","size":4}]')
    union = schema.root()
    assert union.variants == [SchemaKey(1), SchemaKey(1)]
    fixed = schema.nodes[1]
    assert isinstance(fixed, FixedType)
    assert fixed.size == 4


def test_unknown_reference():
    with pytest.raises(SchemaError, match="unknown reference: Missing"):
        parse_schema('["null", "Missing"]')


def test_duplicate_definition():
    with pytest.raises(SchemaError, match="duplicate definitions for F"):
        parse_schema(
            '[{"type":"fixed","name":"F","size":1},{"type":"fixed","name":"F","size":2}]'
        )


def test_complex_type_as_bare_string():
    with pytest.raises(SchemaError, match="complex type"):
        parse_schema('"array"')


def test_missing_items():
    with pytest.raises(SchemaError, match="Missing field `items` on type Array"):
        parse_schema('{"type":"array"}')


def test_missing_record_name():
    with pytest.raises(SchemaError, match="Missing name for type Record"):
        parse_schema('{"type":"record","fields":[]}')


def test_array_and_map():
    schema = parse_schema('{"type":"map","values":{"type":"array","items":"string"}}')
    root = schema.root()
    assert isinstance(root, MapType)
    array = schema[root.values]
    assert isinstance(array, ArrayType)
    assert schema[array.items] == Primitive.STRING


def test_unnecessarily_nested_type():
    schema = parse_schema('{"type":{"type":"string"}}')
    assert schema.nodes == (Primitive.STRING,)


def test_nested_type_with_local_properties():
    with pytest.raises(SchemaError, match="unnecessarily-nested"):
        parse_schema('{"type":"string","size":3}')


def test_logical_date():
    schema = parse_schema('{"type":"int","logicalType":"date"}')
    assert schema.nodes[0] == LogicalTypeNode(SchemaKey(1), LogicalKind.DATE)
    assert schema.nodes[1] == Primitive.INT


def test_decimal():
    schema = parse_schema('{"type":"bytes","logicalType":"decimal","precision":10,"scale":2}')
    node = schema.root()
    assert node.logical_type == Decimal(scale=2, precision=10)
    assert schema[node.inner] == Primitive.BYTES


def test_decimal_missing_precision():
    with pytest.raises(SchemaError, match="Missing field `precision`"):
        parse_schema('{"type":"bytes","logicalType":"decimal","scale":2}')


def test_unknown_logical_type():
    schema = parse_schema('{"type":"string","logicalType":"custom-thing"}')
    assert schema.root().logical_type == UnknownLogicalType("custom-thing")


def test_immediately_nested_logical_types():
    with pytest.raises(SchemaError, match="Immediately-nested logical types"):
        parse_schema('{"type":{"type":"int","logicalType":"date"},"logicalType":"uuid"}')


def test_invalid_json():
    with pytest.raises(SchemaError):
        parse_schema("{not json")


@pytest.mark.parametrize("text", ["42", "true", "null", '{"name":"x"}'])
def test_invalid_node_shapes(text):
    with pytest.raises(SchemaError):
        parse_schema(text)


@pytest.mark.parametrize("size", ["-1", "true", "1.5", '"4"'])
def test_invalid_fixed_size(size):
    with pytest.raises(SchemaError):
        parse_schema('{"type":"fixed","name":"F","size":' + size + "}")


def test_json_is_minified_with_all_keys():
    schema = parse_schema('{ "type" : "string", "doc": "x" }')
    assert schema.schema_json == '{"type":"string","doc":"x"}'


def test_namespace_inherited_by_nested_named_type():
    schema = parse_schema(
        '{"type":"record","name":"R","namespace":"ns","fields":['
        '{"name":"e","type":{"type":"enum","name":"E","symbols":["A","B"]}}]}'
    )
    enum = schema.nodes[1]
    assert isinstance(enum, EnumType)
    assert enum.name.fully_qualified_name == "ns.E"
    assert enum.symbols == ["A", "B"]


def test_empty_namespace_and_leading_dot_reference():
    schema = parse_schema(
        '{"type":"record","name":"n.R","fields":['
        '{"name":"f","type":{"type":"fixed","name":"X","namespace":"","size":2}},'
        '{"name":"g","type":".X"}]}'
    )
    fixed = schema.nodes[1]
    assert fixed.name.namespace is None
    assert schema.root().fields[1].type_ == SchemaKey(1)


def test_unqualified_reference_uses_enclosing_namespace():
    with pytest.raises(SchemaError, match="unknown reference: n.X"):
        parse_schema(
            '{"type":"record","name":"n.R","fields":['
            '{"name":"f","type":{"type":"fixed","name":"X","namespace":"","size":2}},'
            '{"name":"g","type":"X"}]}'
        )


def test_unconditional_cycle():
    with pytest.raises(UnconditionalCycle):
        parse_schema('{"type":"record","name":"R","fields":[{"name":"me","type":"R"}]}')


def test_fingerprint_of_null():
    fp = canonical_form_rabin_fingerprint(parse_schema('"null"'))
    assert fp == (7195948357588979594).to_bytes(8, "little", signed=True)


def test_fingerprint_of_pig_value():
    text = (
        '{"name":"PigValue","type":"record","fields":'
        '[{"name":"value","type":["null","int","long","PigValue"]}]}'
    )
    fp = canonical_form_rabin_fingerprint(parse_schema(text))
    assert fp == (-1759257747318642341).to_bytes(8, "little", signed=True)


@pytest.mark.parametrize(
    "text",
    [
        '{"type":"record","name":"a.b.Rec","fields":['
        '{"name":"x","type":"long"},{"name":"next","type":["null","Rec"]}]}',
        '["Foo", {"type":"fixed","name":"Foo","size":4}]',
        '{"type":"record","name":"R","namespace":"ns","fields":['
        '{"name":"e","type":{"type":"enum","name":"E","symbols":["A","B"]}},'
        '{"name":"d","type":{"type":"bytes","logicalType":"decimal","precision":5,"scale":1}}]}',
    ],
)
def test_round_trip_preserves_fingerprint(text):
    original = parse_schema(text)
    reparsed = parse_schema(schema_to_json(original))
    assert canonical_form_rabin_fingerprint(reparsed) == canonical_form_rabin_fingerprint(
        original
    )
    assert len(reparsed.nodes) == len(original.nodes)