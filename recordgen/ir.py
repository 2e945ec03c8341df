"""Generated-program IR.

A small, target-neutral description of the program recordgen writes:
data-holder declarations, a construction function and a printing entry
point. Backends render it to text; nothing here knows about syntax.

Architecture:
    RecordInfo list -> synth.build_program -> [IR] -> backend.<target> -> source text

The IR lives only for the duration of one synthesis call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


# ============================================================
# TYPES
#
# Frozen and hashable so backends can use them as dict keys.
# ============================================================


@dataclass(frozen=True)
class Type:
    """Base for all types. Abstract."""


@dataclass(frozen=True)
class Primitive(Type):
    """Primitive types.

    | Kind   | Java   | Python |
    |--------|--------|--------|
    | string | String | str    |
    | void   | void   | None   |
    """

    kind: Literal["string", "void"]


@dataclass(frozen=True)
class Optional(Type):
    """Value that may be absent.

    | Java        | Python       |
    |-------------|--------------|
    | Optional<T> | T | None     |
    """

    inner: Type


@dataclass(frozen=True)
class ListOf(Type):
    """Growable list, used for scratch accumulation.

    | Java    | Python  |
    |---------|---------|
    | List<T> | list[T] |
    """

    element: Type


@dataclass(frozen=True)
class FrozenList(Type):
    """Immutable snapshot of a list, used for data-holder fields.

    | Java                      | Python         |
    |---------------------------|----------------|
    | List<T> (List.copyOf)     | tuple[T, ...]  |
    """

    element: Type


@dataclass(frozen=True)
class StructRef(Type):
    """Reference to a Struct declared in the same Module."""

    name: str


STRING = Primitive("string")
VOID = Primitive("void")


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass
class Module:
    """One output unit: a single generated source file.

    Invariants:
    - All StructRef names resolve to entries in structs
    - entrypoint, if set, names a function in functions with no parameters
    """

    package: str
    name: str
    doc: str | None = None
    structs: list[Struct] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    entrypoint: str | None = None


@dataclass
class Struct:
    """Immutable data holder.

    Backends emit a constructor taking every field in order and one read
    accessor per field. FrozenList fields are defensively copied on the way in.
    """

    name: str
    fields: list[Field] = field(default_factory=list)
    private: bool = True
    doc: str | None = None


@dataclass
class Field:
    name: str
    typ: Type


@dataclass
class Function:
    """Module-level function with no parameters."""

    name: str
    ret: Type
    body: list[Stmt]
    doc: str | None = None


# ============================================================
# STATEMENTS
# ============================================================


@dataclass
class Stmt:
    """Base for all statements. Abstract."""


@dataclass
class VarDecl(Stmt):
    """Declare and initialize a local."""

    name: str
    typ: Type
    value: Expr


@dataclass
class Append(Stmt):
    """Append value to the list held in local `target`."""

    target: str
    value: Expr


@dataclass
class Clear(Stmt):
    """Empty the list held in local `target`."""

    target: str


@dataclass
class ForEach(Stmt):
    """Iterate a list in order, binding each element to `var`."""

    var: str
    typ: Type
    iterable: Expr
    body: list[Stmt]


@dataclass
class PrintLine(Stmt):
    """Write value and a newline to standard output. None prints an empty line."""

    value: Expr | None = None


@dataclass
class Return(Stmt):
    value: Expr


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass
class Expr:
    """Base for all expressions. Abstract."""


@dataclass
class StringLit(Expr):
    """String literal. Backends escape the value."""

    value: str


@dataclass
class OptionalLit(Expr):
    """Optional string literal: present with value, or absent when None."""

    value: str | None


@dataclass
class Var(Expr):
    name: str


@dataclass
class Construct(Expr):
    """Instantiate a Struct with positional arguments in field order."""

    struct: str
    args: list[Expr]


@dataclass
class Snapshot(Expr):
    """Immutable copy of a list-valued expression."""

    expr: Expr


@dataclass
class FieldGet(Expr):
    """Read a Struct field through its accessor."""

    obj: Expr
    field: str


@dataclass
class OrEmpty(Expr):
    """Value of an Optional string, or "" when absent."""

    expr: Expr


@dataclass
class Concat(Expr):
    """String concatenation, left to right."""

    left: Expr
    right: Expr


@dataclass
class Call(Expr):
    """Call a module-level function with no arguments."""

    func: str


@dataclass
class NewList(Expr):
    """Fresh empty list of the declared element type."""
