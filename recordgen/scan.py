"""Record scanning: find every record-shaped declaration in a forest.

Conceptually a descendant-or-self axis over lexical nesting. Supertypes are
never followed, only enclosed declarations.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from .decl import DeclarationNode, Kind


def is_record(node: DeclarationNode) -> bool:
    """Classification predicate: is this node record-shaped?"""
    return node.kind is Kind.RECORD


def record_stream(node: DeclarationNode) -> Iterator[DeclarationNode]:
    """Yield node if it is a record, then the records of every child, in pre-order.

    Matching and descending are independent: a record nested in a record is
    yielded after its parent.
    """
    if is_record(node):
        yield node
    for child in node.children:
        yield from record_stream(child)


def _root_stream(root: DeclarationNode) -> Iterator[DeclarationNode]:
    match root.kind:
        case Kind.PACKAGE:
            for child in root.children:
                yield from record_stream(child)
        case Kind.TYPE | Kind.RECORD:
            yield from record_stream(root)
        case _:
            # Not a package and not a type: contributes nothing.
            return


def find_records(roots: Sequence[DeclarationNode]) -> list[DeclarationNode]:
    """Return all records reachable from roots, first occurrence order, no duplicates."""
    seen: set[int] = set()
    result: list[DeclarationNode] = []
    for root in roots:
        for node in _root_stream(root):
            if id(node) in seen:
                continue
            seen.add(id(node))
            result.append(node)
    return result
