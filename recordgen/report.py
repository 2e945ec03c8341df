"""Diagnostic-only tools: describe records instead of generating a program."""

from __future__ import annotations

from collections.abc import Sequence

from .decl import DeclarationNode, walk
from .diagnostics import NOTE, WARNING, Diagnostic
from .scan import find_records, is_record

NO_ENCLOSING = "<no enclosing element>"


def _component_notes(node: DeclarationNode, prefix: str) -> list[Diagnostic]:
    parent = node.enclosing_name if node.enclosing_name is not None else NO_ENCLOSING
    notes: list[Diagnostic] = []
    for comp in node.components:
        message = (
            f"{prefix} {node.name} (parent {parent}); "
            f"component found: {comp.name} (type {comp.signature})"
        )
        notes.append(Diagnostic.at(NOTE, message, comp))
    return notes


def report_records(roots: Sequence[DeclarationNode]) -> list[Diagnostic]:
    """One note per record found, then one per component."""
    diags: list[Diagnostic] = []
    for node in find_records(roots):
        diags.append(Diagnostic.at(NOTE, f"Record type found: {node.display_name()}", node))
        diags.extend(_component_notes(node, "Record"))
    return diags


def marked_declarations(roots: Sequence[DeclarationNode], marker: str) -> list[DeclarationNode]:
    """Every declaration under roots carrying marker, pre-order, no duplicates."""
    seen: set[int] = set()
    result: list[DeclarationNode] = []
    for root in roots:
        for node in walk(root):
            if marker in node.markers and id(node) not in seen:
                seen.add(id(node))
                result.append(node)
    return result


def report_marked(roots: Sequence[DeclarationNode], marker: str) -> list[Diagnostic]:
    """Describe marked records; warn about marked declarations that are not records."""
    diags: list[Diagnostic] = []
    for node in marked_declarations(roots, marker):
        if is_record(node):
            diags.append(
                Diagnostic.at(NOTE, f"Type marked as {marker}: {node.display_name()}", node)
            )
            diags.extend(_component_notes(node, "Marked record"))
        else:
            diags.append(
                Diagnostic.at(
                    WARNING, f"Non-record type marked as {marker}: {node.display_name()}", node
                )
            )
    return diags
