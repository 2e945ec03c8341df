"""Python backend: IR → Python code.

Data holders become frozen dataclasses. Private structs get a leading
underscore so the generated module exports nothing but main().
"""

from __future__ import annotations

from ..ir import (
    Append,
    Call,
    Clear,
    Concat,
    Construct,
    Expr,
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
from .util import Emitter, escape_string, package_path, to_snake


class PythonBackend(Emitter):
    """Emit Python code from IR."""

    def __init__(self) -> None:
        super().__init__("    ")
        self.struct_names: dict[str, str] = {}

    def emit(self, module: Module) -> str:
        """Emit Python code from IR Module."""
        self.indent = 0
        self.lines = []
        self.struct_names = {
            s.name: ("_" + s.name if s.private else s.name) for s in module.structs
        }
        self._emit_module(module)
        return self.output()

    def _emit_module(self, module: Module) -> None:
        doc = module.doc or "Generated Python code."
        self.line(f'"""{doc}"""')
        self.line()
        self.line("from __future__ import annotations")
        self.line()
        if module.structs:
            self.line("from dataclasses import dataclass")
            self.line()
        # Two blank lines before the first top-level definition.
        self.line()
        need_blank = False
        for struct in module.structs:
            if need_blank:
                self.line()
                self.line()
            self._emit_struct(struct)
            need_blank = True
        for func in module.functions:
            if need_blank:
                self.line()
                self.line()
            self._emit_function(func)
            need_blank = True
        if module.entrypoint is not None:
            self.line()
            self.line()
            self.line('if __name__ == "__main__":')
            self.indent += 1
            self.line(f"{module.entrypoint}()")
            self.indent -= 1

    def _emit_struct(self, struct: Struct) -> None:
        self.line("@dataclass(frozen=True)")
        self.line(f"class {self.struct_names[struct.name]}:")
        self.indent += 1
        if struct.doc:
            self.line(f'"""{struct.doc}"""')
            if struct.fields:
                self.line()
        if not struct.fields and not struct.doc:
            self.line("pass")
        for fld in struct.fields:
            self.line(f"{fld.name}: {self._type(fld.typ)}")
        self.indent -= 1

    def _emit_function(self, func: Function) -> None:
        self.line(f"def {func.name}() -> {self._type(func.ret)}:")
        self.indent += 1
        if func.doc:
            self.line(f'"""{func.doc}"""')
        if not func.body:
            self.line("pass")
        for stmt in func.body:
            self._emit_stmt(stmt)
        self.indent -= 1

    def _emit_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case VarDecl(name=name, typ=typ, value=value):
                self.line(f"{name}: {self._type(typ)} = {self._expr(value)}")
            case Append(target=target, value=value):
                self.line(f"{target}.append({self._expr(value)})")
            case Clear(target=target):
                self.line(f"{target}.clear()")
            case ForEach(var=var, iterable=iterable, body=body):
                self.line(f"for {var} in {self._expr(iterable)}:")
                self.indent += 1
                if not body:
                    self.line("pass")
                for s in body:
                    self._emit_stmt(s)
                self.indent -= 1
            case PrintLine(value=None):
                self.line("print()")
            case PrintLine(value=value):
                self.line(f"print({self._expr(value)})")
            case Return(value=value):
                self.line(f"return {self._expr(value)}")
            case _:
                raise NotImplementedError(f"python: unhandled statement {type(stmt).__name__}")

    def _expr(self, expr: Expr) -> str:
        match expr:
            case StringLit(value=value):
                return _string_literal(value)
            case OptionalLit(value=None):
                return "None"
            case OptionalLit(value=value):
                return _string_literal(value)
            case Var(name=name):
                return name
            case NewList():
                return "[]"
            case Construct(struct=struct, args=args):
                rendered = ", ".join(self._expr(a) for a in args)
                return f"{self.struct_names[struct]}({rendered})"
            case Snapshot(expr=inner):
                return f"tuple({self._expr(inner)})"
            case FieldGet(obj=obj, field=name):
                return f"{self._expr(obj)}.{name}"
            case OrEmpty(expr=inner):
                return f'({self._expr(inner)} or "")'
            case Concat(left=left, right=right):
                return f"{self._expr(left)} + {self._expr(right)}"
            case Call(func=func):
                return f"{func}()"
            case _:
                raise NotImplementedError(f"python: unhandled expression {type(expr).__name__}")

    def _type(self, typ: Type) -> str:
        match typ:
            case Primitive(kind="string"):
                return "str"
            case Primitive(kind="void"):
                return "None"
            case Optional(inner=inner):
                return f"{self._type(inner)} | None"
            case ListOf(element=element):
                return f"list[{self._type(element)}]"
            case FrozenList(element=element):
                return f"tuple[{self._type(element)}, ...]"
            case StructRef(name=name):
                return self.struct_names.get(name, name)
            case _:
                raise NotImplementedError(f"python: unhandled type {typ!r}")


def _string_literal(value: str) -> str:
    return f'"{escape_string(value)}"'


def output_path(module: Module) -> str:
    """Relative path of the generated module."""
    directory = package_path(module.package)
    file_name = to_snake(module.name) + ".py"
    return f"{directory}/{file_name}" if directory else file_name


def emit_python(module: Module) -> str:
    return PythonBackend().emit(module)
