"""Record metadata extraction: DeclarationNode -> RecordInfo."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .decl import DeclarationNode
from .scan import is_record


class MalformedRecordError(ValueError):
    """A required metadata string is missing. Programming error, not I/O."""

    def __init__(self, what: str, field_name: str) -> None:
        self.what = what
        self.field_name = field_name
        super().__init__(f"malformed {what}: {field_name} must be a string")


def _require_str(what: str, field_name: str, value: object) -> None:
    if not isinstance(value, str):
        raise MalformedRecordError(what, field_name)


@dataclass(frozen=True)
class RecordComponentInfo:
    """One component of a record: simple name and rendered type."""

    simple_name: str
    type: str

    def __post_init__(self) -> None:
        _require_str("record component", "simple_name", self.simple_name)
        _require_str("record component", "type", self.type)


@dataclass(frozen=True)
class RecordInfo:
    """Immutable description of one record.

    Invariants:
    - record_components keeps declaration order and is a tuple copy of
      whatever sequence was passed in
    - record_parent_simple_name is None for a record with no enclosing
      declaration, otherwise the immediately enclosing simple name
    """

    record_simple_name: str
    record_parent_simple_name: str | None
    record_components: tuple[RecordComponentInfo, ...] = ()

    def __post_init__(self) -> None:
        _require_str("record", "record_simple_name", self.record_simple_name)
        if self.record_parent_simple_name is not None:
            _require_str("record", "record_parent_simple_name", self.record_parent_simple_name)
        components = tuple(self.record_components)
        for comp in components:
            if not isinstance(comp, RecordComponentInfo):
                raise MalformedRecordError("record", "record_components")
        object.__setattr__(self, "record_components", components)


def extract_record(node: DeclarationNode) -> RecordInfo:
    """Describe a record node. Callers must only pass record-shaped nodes."""
    if not is_record(node):
        raise ValueError(f"not a record: {node!r}")
    components = [
        RecordComponentInfo(c.name, c.signature) for c in node.components
    ]
    return RecordInfo(node.name, node.enclosing_name, components)


def extract_records(nodes: Iterable[DeclarationNode]) -> list[RecordInfo]:
    return [extract_record(n) for n in nodes]


def component_pairs(info: RecordInfo) -> Sequence[tuple[str, str]]:
    """(name, type) pairs, handy for comparisons."""
    return [(c.simple_name, c.type) for c in info.record_components]
