"""Parse, edit, canonicalise, fingerprint and freeze Avro schemas as a graph of nodes."""

__version__ = "0.1.0"
__all__ = [
    "canonical",
    "cycles",
    "errors",
    "frozen",
    "frozen_nodes",
    "lookup",
    "names",
    "nodes",
    "parsing",
    "rabin",
    "schema_json",
]