"""Java backend: IR → Java code.

The module becomes one public class named after Module.name. Structs become
static nested classes with final fields, a positional constructor and get*
accessors. Functions become static methods; the entrypoint becomes
main(String[] args).
"""

from __future__ import annotations

from ..ir import (
    Append,
    Call,
    Clear,
    Concat,
    Construct,
    Expr,
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
    Primitive,
    PrintLine,
    Return,
    Snapshot,
    Stmt,
    StringLit,
    Struct,
    StructRef,
    Type,
    Var,
    VarDecl,
)
from .util import Emitter, escape_string, package_path, to_camel, to_pascal


def _getter(field_name: str) -> str:
    return "get" + to_pascal(field_name)


class JavaBackend(Emitter):
    """Emit Java code from IR."""

    def __init__(self) -> None:
        super().__init__("    ")
        self.entrypoint: str | None = None

    def emit(self, module: Module) -> str:
        """Emit Java code from IR Module."""
        self.indent = 0
        self.lines = []
        self.entrypoint = module.entrypoint
        self._emit_module(module)
        return self.output()

    def _emit_module(self, module: Module) -> None:
        if module.package:
            self.line(f"package {module.package};")
            self.line()
        for imp in self._imports(module):
            self.line(f"import {imp};")
        self.line()
        if module.doc:
            self.line("/**")
            self.line(f" * {module.doc}")
            self.line(" */")
        self.line(f"public class {module.name} {{")
        self.indent += 1
        for struct in module.structs:
            self.line()
            self._emit_struct(struct)
        for func in module.functions:
            self.line()
            self._emit_function(func)
        self.indent -= 1
        self.line("}")

    def _imports(self, module: Module) -> list[str]:
        used: set[str] = set()
        for struct in module.structs:
            for fld in struct.fields:
                _collect_type_imports(fld.typ, used)
        for func in module.functions:
            _collect_type_imports(func.ret, used)
            for stmt in func.body:
                _collect_stmt_imports(stmt, used)
        return sorted(used)

    def _emit_struct(self, struct: Struct) -> None:
        visibility = "private " if struct.private else ""
        self.line(f"{visibility}static final class {struct.name} {{")
        self.indent += 1
        for fld in struct.fields:
            self.line(f"private final {self._type(fld.typ)} {to_camel(fld.name)};")
        if struct.fields:
            self.line()
        self._emit_constructor(struct)
        for fld in struct.fields:
            self.line()
            self._emit_getter(fld)
        self.indent -= 1
        self.line("}")

    def _emit_constructor(self, struct: Struct) -> None:
        params = ", ".join(f"{self._type(f.typ)} {to_camel(f.name)}" for f in struct.fields)
        self.line(f"{struct.name}({params}) {{")
        self.indent += 1
        for fld in struct.fields:
            name = to_camel(fld.name)
            if isinstance(fld.typ, FrozenList):
                self.line(f"this.{name} = List.copyOf({name});")
            else:
                self.line(f"this.{name} = {name};")
        self.indent -= 1
        self.line("}")

    def _emit_getter(self, fld: Field) -> None:
        self.line(f"{self._type(fld.typ)} {_getter(fld.name)}() {{")
        self.indent += 1
        self.line(f"return {to_camel(fld.name)};")
        self.indent -= 1
        self.line("}")

    def _emit_function(self, func: Function) -> None:
        if func.doc:
            self.line("/**")
            self.line(f" * {func.doc}")
            self.line(" */")
        if func.name == self.entrypoint:
            self.line("public static void main(String[] args) {")
        else:
            ret = self._type(func.ret)
            self.line(f"private static {ret} {to_camel(func.name)}() {{")
        self.indent += 1
        for stmt in func.body:
            self._emit_stmt(stmt)
        self.indent -= 1
        self.line("}")

    def _emit_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case VarDecl(name=name, typ=typ, value=value):
                self.line(f"{self._type(typ)} {to_camel(name)} = {self._expr(value)};")
            case Append(target=target, value=value):
                self.line(f"{to_camel(target)}.add({self._expr(value)});")
            case Clear(target=target):
                self.line(f"{to_camel(target)}.clear();")
            case ForEach(var=var, typ=typ, iterable=iterable, body=body):
                self.line(f"for ({self._type(typ)} {to_camel(var)} : {self._expr(iterable)}) {{")
                self.indent += 1
                for s in body:
                    self._emit_stmt(s)
                self.indent -= 1
                self.line("}")
            case PrintLine(value=None):
                self.line("System.out.println();")
            case PrintLine(value=value):
                self.line(f"System.out.println({self._expr(value)});")
            case Return(value=value):
                self.line(f"return {self._expr(value)};")
            case _:
                raise NotImplementedError(f"java: unhandled statement {type(stmt).__name__}")

    def _expr(self, expr: Expr) -> str:
        match expr:
            case StringLit(value=value):
                return _string_literal(value)
            case OptionalLit(value=None):
                return "Optional.empty()"
            case OptionalLit(value=value):
                return f"Optional.of({_string_literal(value)})"
            case Var(name=name):
                return to_camel(name)
            case NewList():
                return "new ArrayList<>()"
            case Construct(struct=struct, args=args):
                rendered = ", ".join(self._expr(a) for a in args)
                return f"new {struct}({rendered})"
            case Snapshot(expr=inner):
                return f"List.copyOf({self._expr(inner)})"
            case FieldGet(obj=obj, field=name):
                return f"{self._expr(obj)}.{_getter(name)}()"
            case OrEmpty(expr=inner):
                return f'{self._expr(inner)}.orElse("")'
            case Concat(left=left, right=right):
                return f"{self._expr(left)} + {self._expr(right)}"
            case Call(func=func):
                return f"{to_camel(func)}()"
            case _:
                raise NotImplementedError(f"java: unhandled expression {type(expr).__name__}")

    def _type(self, typ: Type) -> str:
        match typ:
            case Primitive(kind="string"):
                return "String"
            case Primitive(kind="void"):
                return "void"
            case Optional(inner=inner):
                return f"Optional<{self._type(inner)}>"
            case ListOf(element=element) | FrozenList(element=element):
                return f"List<{self._type(element)}>"
            case StructRef(name=name):
                return name
            case _:
                raise NotImplementedError(f"java: unhandled type {typ!r}")


def _collect_type_imports(typ: Type, used: set[str]) -> None:
    match typ:
        case Optional(inner=inner):
            used.add("java.util.Optional")
            _collect_type_imports(inner, used)
        case ListOf(element=element) | FrozenList(element=element):
            used.add("java.util.List")
            _collect_type_imports(element, used)


def _collect_stmt_imports(stmt: Stmt, used: set[str]) -> None:
    match stmt:
        case VarDecl(typ=typ, value=value):
            _collect_type_imports(typ, used)
            if isinstance(value, NewList):
                used.add("java.util.ArrayList")
        case ForEach(typ=typ, body=body):
            _collect_type_imports(typ, used)
            for s in body:
                _collect_stmt_imports(s, used)


def _string_literal(value: str) -> str:
    return f'"{escape_string(value)}"'


def output_path(module: Module) -> str:
    """Relative path of the generated class file."""
    directory = package_path(module.package)
    file_name = module.name + ".java"
    return f"{directory}/{file_name}" if directory else file_name


def emit_java(module: Module) -> str:
    return JavaBackend().emit(module)
