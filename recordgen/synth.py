"""Program synthesis: RecordInfo list -> IR Module -> source text.

Every fact the generated program reports is embedded as a literal here, at
generation time. The generated program never inspects any other program.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from .backend.java import emit_java, output_path as java_output_path
from .backend.python import emit_python, output_path as python_output_path
from .extract import MalformedRecordError, RecordComponentInfo, RecordInfo
from .ir import (
    Append,
    Call,
    Clear,
    Concat,
    Construct,
    Field,
    FieldGet,
    ForEach,
    FrozenList,
    Function,
    ListOf,
    Module,
    NewList,
    Optional,
    OptionalLit,
    OrEmpty,
    PrintLine,
    Return,
    Snapshot,
    Stmt,
    STRING,
    StringLit,
    Struct,
    StructRef,
    Var,
    VarDecl,
    VOID,
)

PROGRAM_NAME = "ShowRecordInformation"

COMPONENT_STRUCT = "RecordComponentInfo"
RECORD_STRUCT = "RecordInfo"
BUILD_FUNC = "build_record_infos"
MAIN_FUNC = "main"

_PACKAGE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9_]*$")

EMITTERS: dict[str, Callable[[Module], str]] = {
    "java": emit_java,
    "python": emit_python,
}

OUTPUT_PATHS: dict[str, Callable[[Module], str]] = {
    "java": java_output_path,
    "python": python_output_path,
}


def check_names(package: str, name: str) -> None:
    if package and not _PACKAGE_RE.match(package):
        raise ValueError(f"invalid package name: {package!r}")
    if not _NAME_RE.match(name):
        raise ValueError(f"invalid program name: {name!r}")


def _check_record(info: object) -> RecordInfo:
    """Reject duck-typed or half-built records before any text is produced."""
    if not isinstance(info, RecordInfo):
        raise MalformedRecordError("record", type(info).__name__)
    if not isinstance(info.record_simple_name, str):
        raise MalformedRecordError("record", "record_simple_name")
    parent = info.record_parent_simple_name
    if parent is not None and not isinstance(parent, str):
        raise MalformedRecordError("record", "record_parent_simple_name")
    for comp in info.record_components:
        if not isinstance(comp, RecordComponentInfo):
            raise MalformedRecordError("record", "record_components")
        if not isinstance(comp.simple_name, str):
            raise MalformedRecordError("record component", "simple_name")
        if not isinstance(comp.type, str):
            raise MalformedRecordError("record component", "type")
    return info


def _component_struct() -> Struct:
    return Struct(
        COMPONENT_STRUCT,
        [Field("simple_name", STRING), Field("type", STRING)],
        doc="One record component: simple name and type.",
    )


def _record_struct() -> Struct:
    return Struct(
        RECORD_STRUCT,
        [
            Field("record_simple_name", STRING),
            Field("record_parent_simple_name", Optional(STRING)),
            Field("record_components", FrozenList(StructRef(COMPONENT_STRUCT))),
        ],
        doc="One record: simple name, enclosing name and components.",
    )


def _build_function(records: Sequence[RecordInfo]) -> Function:
    """Construction routine: one block of literal-carrying statements per record."""
    body: list[Stmt] = [
        VarDecl("record_infos", ListOf(StructRef(RECORD_STRUCT)), NewList()),
        VarDecl("record_component_infos", ListOf(StructRef(COMPONENT_STRUCT)), NewList()),
    ]
    for info in records:
        body.append(Clear("record_component_infos"))
        for comp in info.record_components:
            body.append(
                Append(
                    "record_component_infos",
                    Construct(
                        COMPONENT_STRUCT,
                        [StringLit(comp.simple_name), StringLit(comp.type)],
                    ),
                )
            )
        body.append(
            Append(
                "record_infos",
                Construct(
                    RECORD_STRUCT,
                    [
                        StringLit(info.record_simple_name),
                        OptionalLit(info.record_parent_simple_name),
                        Snapshot(Var("record_component_infos")),
                    ],
                ),
            )
        )
    body.append(Return(Var("record_infos")))
    return Function(
        BUILD_FUNC,
        ListOf(StructRef(RECORD_STRUCT)),
        body,
        doc="Record metadata captured at generation time.",
    )


def _main_function() -> Function:
    """Reporting routine: four lines per record, two per component."""
    record = Var("record_info")
    comp = Var("component_info")
    component_loop = ForEach(
        "component_info",
        StructRef(COMPONENT_STRUCT),
        FieldGet(record, "record_components"),
        [
            PrintLine(Concat(StringLit("Simple name: "), FieldGet(comp, "simple_name"))),
            PrintLine(Concat(StringLit("Type:        "), FieldGet(comp, "type"))),
        ],
    )
    record_loop = ForEach(
        "record_info",
        StructRef(RECORD_STRUCT),
        Call(BUILD_FUNC),
        [
            PrintLine(),
            PrintLine(Concat(StringLit("Record simple name: "), FieldGet(record, "record_simple_name"))),
            PrintLine(
                Concat(
                    StringLit("Record parent simple name: "),
                    OrEmpty(FieldGet(record, "record_parent_simple_name")),
                )
            ),
            PrintLine(StringLit("Components:")),
            component_loop,
        ],
    )
    return Function(MAIN_FUNC, VOID, [record_loop])


def build_program(
    package: str, records: Sequence[RecordInfo], name: str = PROGRAM_NAME
) -> Module:
    """Build the IR of the generated program. Input order is preserved."""
    check_names(package, name)
    checked = [_check_record(r) for r in records]
    return Module(
        package=package,
        name=name,
        doc="Generated by recordgen. Do not edit.",
        structs=[_component_struct(), _record_struct()],
        functions=[_build_function(checked), _main_function()],
        entrypoint=MAIN_FUNC,
    )


def render(module: Module, target: str = "python") -> str:
    if target not in EMITTERS:
        raise ValueError(f"unknown target: {target!r}")
    return EMITTERS[target](module)


def output_path(module: Module, target: str = "python") -> str:
    """Relative path of the single output file for module on target."""
    if target not in OUTPUT_PATHS:
        raise ValueError(f"unknown target: {target!r}")
    return OUTPUT_PATHS[target](module)


def synthesize(
    package: str,
    records: Sequence[RecordInfo],
    target: str = "python",
    name: str = PROGRAM_NAME,
) -> str:
    """Render the generated program for records. Same input, same bytes."""
    return render(build_program(package, records, name), target)
