"""Declaration tree - the host's view of a program's named declarations.

Architecture:
    Source -> Frontend -> [DeclarationNode forest] -> scan -> extract -> synth -> emit

Nodes form a closed tagged variant discriminated by `kind`. The scanner
classifies by matching on the kind, never by inspecting Python types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Kind(Enum):
    """Declaration kinds.

    | Kind      | Python source                          | Scanner      |
    |-----------|----------------------------------------|--------------|
    | PACKAGE   | module                                 | descend only |
    | TYPE      | class that is not record-shaped        | candidate    |
    | RECORD    | @dataclass class, NamedTuple subclass  | match        |
    | COMPONENT | annotated field of a record            | leaf         |
    | FUNCTION  | def / async def                        | descend only |
    """

    PACKAGE = "package"
    TYPE = "type"
    RECORD = "record"
    COMPONENT = "component"
    FUNCTION = "function"


@dataclass(unsafe_hash=True)
class Loc:
    """Source location for diagnostics. line 0 means unknown."""

    line: int
    col: int


def loc_unknown() -> Loc:
    return Loc(0, 0)


@dataclass(eq=False)
class DeclarationNode:
    """One node in the declaration tree.

    Invariants:
    - children are in source order
    - enclosing_name is the simple name of the immediately enclosing
      declaration, captured when the parent is built; there is no reference
      back to the parent object
    - signature is set for COMPONENT nodes only
    - equality and hashing are by identity
    """

    kind: Kind
    name: str
    children: tuple[DeclarationNode, ...] = ()
    enclosing_name: str | None = None
    signature: str | None = None
    markers: tuple[str, ...] = ()
    qualname: str = ""
    loc: Loc = field(default_factory=loc_unknown)

    @property
    def components(self) -> list[DeclarationNode]:
        """Component children in declaration order."""
        return [c for c in self.children if c.kind is Kind.COMPONENT]

    def display_name(self) -> str:
        return self.qualname or self.name

    def __repr__(self) -> str:
        return f"<{self.kind.value} {self.display_name()}>"


def _adopt(name: str, children: tuple[DeclarationNode, ...]) -> tuple[DeclarationNode, ...]:
    """Stamp enclosing_name on freshly built children. First parent wins."""
    for child in children:
        if child.enclosing_name is None:
            child.enclosing_name = name
    return children


def package(
    name: str, *children: DeclarationNode, qualname: str = "", loc: Loc | None = None
) -> DeclarationNode:
    return DeclarationNode(
        Kind.PACKAGE,
        name,
        _adopt(name, children),
        qualname=qualname or name,
        loc=loc or loc_unknown(),
    )


def type_decl(
    name: str,
    *children: DeclarationNode,
    markers: tuple[str, ...] = (),
    qualname: str = "",
    loc: Loc | None = None,
) -> DeclarationNode:
    return DeclarationNode(
        Kind.TYPE,
        name,
        _adopt(name, children),
        markers=markers,
        qualname=qualname,
        loc=loc or loc_unknown(),
    )


def record(
    name: str,
    *children: DeclarationNode,
    markers: tuple[str, ...] = (),
    qualname: str = "",
    loc: Loc | None = None,
) -> DeclarationNode:
    """Build a record node. Components and nested declarations share children."""
    return DeclarationNode(
        Kind.RECORD,
        name,
        _adopt(name, children),
        markers=markers,
        qualname=qualname,
        loc=loc or loc_unknown(),
    )


def component(name: str, signature: str, loc: Loc | None = None) -> DeclarationNode:
    return DeclarationNode(
        Kind.COMPONENT,
        name,
        signature=signature,
        loc=loc or loc_unknown(),
    )


def function(
    name: str,
    *children: DeclarationNode,
    markers: tuple[str, ...] = (),
    qualname: str = "",
    loc: Loc | None = None,
) -> DeclarationNode:
    return DeclarationNode(
        Kind.FUNCTION,
        name,
        _adopt(name, children),
        markers=markers,
        qualname=qualname,
        loc=loc or loc_unknown(),
    )


def walk(node: DeclarationNode) -> list[DeclarationNode]:
    """All nodes of the subtree in pre-order, node first."""
    result: list[DeclarationNode] = [node]
    for child in node.children:
        result.extend(walk(child))
    return result
