"""Locate and read Python modules given on the command line."""

from __future__ import annotations

from pathlib import Path

from ..decl import DeclarationNode
from .parse import parse_module


def module_name_for(path: Path, root: Path | None = None) -> str:
    """Dotted module name of path, relative to root when path lies inside it."""
    if root is None:
        return path.stem
    rel = path.relative_to(root).with_suffix("")
    parts = list(rel.parts)
    if parts and parts[-1] == "__init__":
        parts = parts[:-1]
    if not parts:
        return root.name or "__init__"
    return ".".join(parts)


def discover(paths: list[str]) -> list[tuple[Path, Path | None]]:
    """Expand directories into their *.py files, sorted. Files pass through.

    A file reached by more than one path is kept once, at its first occurrence.
    """
    found: list[tuple[Path, Path | None]] = []
    seen: set[Path] = set()

    def add(f: Path, root: Path | None) -> None:
        key = f.resolve()
        if key not in seen:
            seen.add(key)
            found.append((f, root))

    for raw in paths:
        p = Path(raw)
        if p.is_dir():
            for f in sorted(p.rglob("*.py")):
                add(f, p)
        else:
            add(p, None)
    return found


def load_sources(paths: list[str]) -> list[tuple[str, str]]:
    """Read (module_name, source) pairs. Raises OSError / UnicodeDecodeError."""
    result: list[tuple[str, str]] = []
    for path, root in discover(paths):
        source = path.read_bytes().decode("utf-8")
        result.append((module_name_for(path, root), source))
    return result


def parse_sources(sources: list[tuple[str, str]]) -> list[DeclarationNode]:
    """One PACKAGE root per module, in input order."""
    return [parse_module(source, name) for name, source in sources]
