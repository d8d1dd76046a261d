# avrograph

Work with Avro schemas as a graph of nodes. You can parse them, edit them,
check them, write them back to JSON and compute the Rabin fingerprint of
their Parsing Canonical Form.

Avro lets named types refer to each other, so a schema can contain cycles.
`avrograph` keeps an editable schema (`SchemaMut`) as a flat list of nodes.
Nodes point at each other through `SchemaKey` indexes, and the first node is
the root. A frozen `Schema` resolves those indexes into nodes that reference
each other directly.

## Installation

```
pip install avrograph
```

The package has no dependencies outside the standard library.

## Parsing a schema

```python
from avrograph.parsing import parse_schema

schema_mut = parse_schema("""
{
  "type": "record",
  "name": "test",
  "fields": [
    {"name": "a", "type": "long"},
    {"name": "b", "type": "string"}
  ]
}
""")

print(schema_mut.root())        # RecordType(name='test', fields=[...])
print(schema_mut.schema_json)   # the original JSON, minified, all keys kept
```

`parse_schema` resolves a named reference even when it comes before the
definition it points to. It raises `avrograph.errors.SchemaError` in these
cases:

- the JSON is invalid
- a reference points at a name that is never defined
- a name is defined twice
- a named type has no name
- a required field such as `items`, `size` or `precision` is missing
- logical types are nested directly inside each other
- a record always contains itself, with no union or collection in between.
  This case raises `avrograph.errors.UnconditionalCycle`, a subclass of
  `SchemaError`.

## The node types

`avrograph.nodes` defines the node types:

- `Primitive`: `NULL`, `BOOLEAN`, `INT`, `LONG`, `FLOAT`, `DOUBLE`, `BYTES`, `STRING`
- `ArrayType(items)` and `MapType(values)`
- `UnionType(variants)`
- `RecordType(name, fields)`, whose fields are `RecordField(name, type_)`
- `EnumType(name, symbols)` and `FixedType(name, size)`
- `LogicalTypeNode(inner, logical_type)`

The `logical_type` of a `LogicalTypeNode` is one of these:

- a `LogicalKind`, for `uuid`, `date`, `time-millis`, `time-micros`,
  `timestamp-millis`, `timestamp-micros` or `duration`
- a `Decimal(scale, precision)`
- an `UnknownLogicalType(logical_type_name)`

All three have an `as_str()` method, which returns the name used in JSON.

Named types carry an `avrograph.names.Name`. It has the properties `name`,
`namespace` and `fully_qualified_name`. You build one with
`Name.from_fully_qualified_name("a.b.c")` or `Name.from_parts("a.b", "c")`.

## Building and editing a schema

```python
from avrograph.nodes import ArrayType, Primitive, SchemaKey, SchemaMut
from avrograph.schema_json import schema_to_json

schema_mut = SchemaMut.from_nodes([ArrayType(SchemaKey(1)), Primitive.INT])
print(schema_to_json(schema_mut))  # {"type":"array","items":"int"}

nodes = schema_mut.edit_nodes()    # a mutable list; the stored JSON is dropped
nodes[1] = Primitive.STRING
print(schema_to_json(schema_mut))  # {"type":"array","items":"string"}
```

There are three ways to read a node:

- `schema_mut.get(key)` returns the node, or `None` if the key is out of range.
- `schema_mut[key]` raises `IndexError` if the key is out of range.
- `SchemaKey.root()` is the key of the first node.

`schema_to_json` writes compact JSON. `schema_to_json_value` returns the same
data as Python dicts and lists. A named type is written in full the first time
it appears and by name after that. Only what the graph holds is written, so
`doc`, `aliases`, `default` and the like are lost.

`avrograph.cycles.check_for_cycles(schema_mut)` runs the self-containment
check on a schema you have edited by hand.

## Fingerprints

```python
from avrograph.canonical import canonical_form_rabin_fingerprint
from avrograph.rabin import rabin_fingerprint

canonical_form_rabin_fingerprint(schema_mut)  # 8 bytes, little-endian
rabin_fingerprint(b'"null"')                  # fingerprint of arbitrary data
```

The canonical form ignores logical types. For incremental hashing, use
`avrograph.rabin.Rabin` with `update()` and `digest()`.

## Frozen schemas

```python
from avrograph.frozen import Schema, freeze
from avrograph.lookup import LookupKey

schema = Schema.parse('["null", "string"]')
print(schema.json)                     # ["null","string"]
print(schema.rabin_fingerprint.hex())
print(schema)                          # Union(Union { variants: [Null, String] })

lookup = schema.root.per_type_lookup
lookup.unnamed(LookupKey.STR)          # (1, <the String node>)
lookup.named("Null")                   # (0, <the Null node>)
```

`Schema.from_mut(schema_mut)` and `freeze(schema_mut)` turn a `SchemaMut`
into a `Schema`. Freezing does three things:

- It resolves the logical types it understands into their own node kinds,
  such as `Uuid`, `Date` or `Decimal`. Any other logical type is replaced by
  the type it annotates.
- It links each decimal stored in a fixed type to that fixed node.
- It gives every union a `UnionLookup`. `UnionLookup` picks a variant either
  by the shape of a value (`LookupKey`) or by a type name or a qualified name.
  If two variants fit a shape equally well, no variant is chosen for it.

The frozen node classes live in `avrograph.frozen_nodes`. Their text form,
also available from `render_node`, stops two levels down, so a cyclic graph
still prints in finite space.

## What it does not do

`avrograph` handles schemas only. It does not encode or decode Avro data, and
it does not read or write object container files.

## Running the tests

```
pip install -e ".[test]"
pytest
```