"""Leveled diagnostics attached to declarations."""

from __future__ import annotations

from .decl import DeclarationNode

NOTE = "note"
WARNING = "warning"


class Diagnostic:
    """A note or warning about a declaration."""

    def __init__(self, kind: str, message: str, lineno: int = 0, col: int = 0) -> None:
        self.kind: str = kind
        self.message: str = message
        self.lineno: int = lineno
        self.col: int = col

    @classmethod
    def at(cls, kind: str, message: str, node: DeclarationNode) -> Diagnostic:
        return cls(kind, message, node.loc.line, node.loc.col)

    def __str__(self) -> str:
        return self.kind + ":" + str(self.lineno) + ":" + str(self.col) + ": " + self.message

    def __repr__(self) -> str:
        return "Diagnostic(" + repr(self.kind) + ", " + repr(self.message) + ")"
