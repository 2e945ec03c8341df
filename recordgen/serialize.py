"""Serialization of declarations and record metadata to JSON-compatible dicts."""

from __future__ import annotations

from collections.abc import Sequence

from .decl import DeclarationNode, Kind
from .extract import RecordComponentInfo, RecordInfo


def decl_to_dict(node: DeclarationNode) -> dict[str, object]:
    d: dict[str, object] = {"kind": node.kind.value, "name": node.name}
    if node.qualname:
        d["qualname"] = node.qualname
    if node.enclosing_name is not None:
        d["enclosing"] = node.enclosing_name
    if node.kind is Kind.COMPONENT:
        d["type"] = node.signature
    if node.markers:
        d["markers"] = list(node.markers)
    if node.loc.line:
        d["line"] = node.loc.line
    if node.children:
        d["children"] = [decl_to_dict(c) for c in node.children]
    return d


def forest_to_dict(roots: Sequence[DeclarationNode]) -> dict[str, object]:
    return {"roots": [decl_to_dict(r) for r in roots]}


def component_info_to_dict(info: RecordComponentInfo) -> dict[str, object]:
    return {"name": info.simple_name, "type": info.type}


def record_info_to_dict(info: RecordInfo) -> dict[str, object]:
    return {
        "name": info.record_simple_name,
        "parent": info.record_parent_simple_name,
        "components": [component_info_to_dict(c) for c in info.record_components],
    }


def records_to_dict(records: Sequence[RecordInfo]) -> dict[str, object]:
    return {"records": [record_info_to_dict(r) for r in records]}


def scan_to_dict(nodes: Sequence[DeclarationNode]) -> dict[str, object]:
    """Scanner output: names and qualified names, in scan order."""
    return {
        "records": [
            {"name": n.name, "qualname": n.display_name(), "enclosing": n.enclosing_name}
            for n in nodes
        ]
    }
