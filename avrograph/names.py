"""Fully qualified names of named Avro types."""

from __future__ import annotations

__all__ = ["Name"]


class Name:
    """The name of a named schema node, holding both name and namespace."""

    __slots__ = ("_fully_qualified_name", "_delimiter")

    def __init__(self, fully_qualified_name: str) -> None:
        delimiter = fully_qualified_name.rfind(".")
        if delimiter == 0:
            # ".x" is read as {namespace: None, name: "x"}
            fully_qualified_name = fully_qualified_name[1:]
            delimiter = -1
        self._fully_qualified_name = fully_qualified_name
        self._delimiter = delimiter if delimiter >= 0 else None

    @classmethod
    def from_fully_qualified_name(cls, fully_qualified_name: str) -> Name:
        """Build a name from a dotted fully qualified name.

        A single leading dot is stripped, giving a name without namespace.
        """
        return cls(fully_qualified_name)

    @classmethod
    def from_parts(cls, namespace: str | None, name: str) -> Name:
        """Build a name from an optional namespace and a simple name."""
        instance = cls.__new__(cls)
        if namespace is None:
            instance._fully_qualified_name = name
            instance._delimiter = None
        else:
            instance._fully_qualified_name = f"{namespace}.{name}"
            instance._delimiter = len(namespace)
        return instance

    @property
    def name(self) -> str:
        """The rightmost component, e.g. ``c`` in ``a.b.c``."""
        if self._delimiter is None:
            return self._fully_qualified_name
        return self._fully_qualified_name[self._delimiter + 1 :]

    @property
    def namespace(self) -> str | None:
        """The namespace component, e.g. ``a.b`` in ``a.b.c``."""
        if self._delimiter is None:
            return None
        return self._fully_qualified_name[: self._delimiter]

    @property
    def fully_qualified_name(self) -> str:
        """The whole dotted name."""
        return self._fully_qualified_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return (
            self._fully_qualified_name == other._fully_qualified_name
            and self._delimiter == other._delimiter
        )

    def __hash__(self) -> int:
        return hash((self._fully_qualified_name, self._delimiter))

    def __repr__(self) -> str:
        return repr(self._fully_qualified_name)