"""Errors raised while building, checking or converting Avro schemas."""

from __future__ import annotations

__all__ = ["SchemaError", "UnconditionalCycle"]


class SchemaError(Exception):
    """Any error that may happen while parsing, checking or converting a schema."""


class UnconditionalCycle(SchemaError):
    """The schema contains a record that ends up always containing itself."""

    MESSAGE = "The schema contains a record that ends up always containing itself"

    def __init__(self) -> None:
        super().__init__(self.MESSAGE)