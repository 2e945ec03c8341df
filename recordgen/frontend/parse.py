"""Python source -> declaration tree.

Modules become PACKAGE nodes, classes TYPE or RECORD nodes, functions
FUNCTION nodes. A class is record-shaped when it is a dataclass or a
NamedTuple subclass; its annotated class-level names are its components.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator

from ..decl import (
    DeclarationNode,
    Loc,
    component,
    function,
    package,
    record,
    type_decl,
)


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, lineno: int, col: int):
        self.msg: str = msg
        self.lineno: int = lineno
        self.col: int = col
        super().__init__(msg)


DefNode = ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef

_BLOCK_FIELDS = ("body", "handlers", "orelse", "finalbody", "cases")

_RECORD_DECORATORS = frozenset({"dataclass"})
_RECORD_BASES = frozenset({"NamedTuple"})
# Annotated names that dataclasses do not turn into fields.
_PSEUDO_FIELD_HEADS = frozenset({"ClassVar", "InitVar", "KW_ONLY"})


def _loc(node: ast.AST) -> Loc:
    return Loc(getattr(node, "lineno", 0), getattr(node, "col_offset", 0))


def _simple_name(node: ast.expr) -> str | None:
    """Last dotted component of a Name/Attribute, looking through calls."""
    if isinstance(node, ast.Call):
        return _simple_name(node.func)
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _markers(node: DefNode) -> tuple[str, ...]:
    names: list[str] = []
    for dec in node.decorator_list:
        name = _simple_name(dec)
        if name is not None:
            names.append(name)
    return tuple(names)


def _is_record_class(node: ast.ClassDef) -> bool:
    """Check for @dataclass (any spelling) or a NamedTuple base."""
    for dec in node.decorator_list:
        if _simple_name(dec) in _RECORD_DECORATORS:
            return True
    for base in node.bases:
        if _simple_name(base) in _RECORD_BASES:
            return True
    return False


def _string_annotation(value: str) -> ast.expr | None:
    """Parse a forward-reference annotation. None if it is not an expression."""
    try:
        return ast.parse(value.strip(), mode="eval").body
    except SyntaxError:
        return None


def _annotation_head(node: ast.expr) -> str | None:
    """Outermost name of an annotation: ClassVar[int] -> ClassVar."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        inner = _string_annotation(node.value)
        return _annotation_head(inner) if inner is not None else None
    if isinstance(node, ast.Subscript):
        return _annotation_head(node.value)
    return _simple_name(node)


def annotation_to_str(node: ast.expr) -> str:
    """Canonical text of a type annotation.

    String annotations are unquoted and re-rendered, so "list[ int ]" and
    list[int] read the same.
    """
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        inner = _string_annotation(node.value)
        if inner is None:
            return " ".join(node.value.split())
        return ast.unparse(inner)
    return ast.unparse(node)


def _component_name(stmt: ast.stmt) -> str | None:
    """Field name if stmt declares a record component."""
    if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
        return None
    if _annotation_head(stmt.annotation) in _PSEUDO_FIELD_HEADS:
        return None
    return stmt.target.id


def iter_defs(stmts: list[ast.stmt]) -> Iterator[DefNode]:
    """Class and function definitions in a block, looking inside if/try/with/loops."""
    for stmt in stmts:
        if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
            yield stmt
            continue
        for name in _BLOCK_FIELDS:
            block = getattr(stmt, name, None)
            if isinstance(block, list):
                yield from iter_defs(block)


class _TreeBuilder:
    """Builds DeclarationNodes for one module."""

    def __init__(self, module_name: str) -> None:
        self.module_name = module_name

    def build(self, tree: ast.Module) -> DeclarationNode:
        simple = self.module_name.rsplit(".", 1)[-1]
        children = [self._def(d, self.module_name) for d in iter_defs(tree.body)]
        return package(simple, *children, qualname=self.module_name, loc=Loc(1, 0))

    def _def(self, node: DefNode, scope: str) -> DeclarationNode:
        qualname = scope + "." + node.name
        if isinstance(node, ast.ClassDef):
            return self._class(node, qualname)
        children = [self._def(d, qualname) for d in iter_defs(node.body)]
        return function(
            node.name, *children, markers=_markers(node), qualname=qualname, loc=_loc(node)
        )

    def _class(self, node: ast.ClassDef, qualname: str) -> DeclarationNode:
        is_record = _is_record_class(node)
        children: list[DeclarationNode] = []
        for stmt in node.body:
            name = _component_name(stmt) if is_record else None
            if name is not None and isinstance(stmt, ast.AnnAssign):
                children.append(component(name, annotation_to_str(stmt.annotation), loc=_loc(stmt)))
                continue
            for d in iter_defs([stmt]):
                children.append(self._def(d, qualname))
        build = record if is_record else type_decl
        return build(
            node.name, *children, markers=_markers(node), qualname=qualname, loc=_loc(node)
        )


def parse_module(source: str, module_name: str) -> DeclarationNode:
    """Parse one module's source into a PACKAGE node."""
    try:
        tree = ast.parse(source, filename=module_name)
    except SyntaxError as e:
        col = (e.offset or 1) - 1
        raise ParseError(e.msg or "invalid syntax", e.lineno or 0, col) from e
    except ValueError as e:
        raise ParseError(str(e), 0, 0) from e
    return _TreeBuilder(module_name).build(tree)
