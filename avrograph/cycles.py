"""Detection of records that unconditionally contain themselves."""

from __future__ import annotations

from .errors import SchemaError, UnconditionalCycle
from .nodes import RecordType, SchemaMut

__all__ = ["check_for_cycles"]


def check_for_cycles(schema: SchemaMut) -> None:
    """Raise :class:`UnconditionalCycle` on zero-sized record cycles.

    Such cycles can only arise through record fields whose type is directly
    another record: any other path consumes input (a union discriminant, a
    block length...), so self-references through them are allowed.
    """
    nodes = schema.nodes
    checked = [False] * len(nodes)
    for idx, node in enumerate(nodes):
        if isinstance(node, RecordType) and not checked[idx]:
            _check_from(nodes, idx, checked)


def _node_at(nodes, idx: int):
    if idx >= len(nodes):
        raise SchemaError("SchemaKey refers to non-existing node")
    return nodes[idx]


def _check_from(nodes, start: int, checked: list[bool]) -> None:
    visiting = {start}
    stack = [(start, iter(nodes[start].fields))]
    while stack:
        idx, fields = stack[-1]
        for field in fields:
            target = field.type_.idx
            node = _node_at(nodes, target)
            if isinstance(node, RecordType):
                if target in visiting:
                    raise UnconditionalCycle()
                visiting.add(target)
                stack.append((target, iter(node.fields)))
                break
        else:
            stack.pop()
            visiting.discard(idx)
            # Once a record checked out fine, it needs no separate visit.
            checked[idx] = True