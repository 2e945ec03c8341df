"""Generation sessions: scan -> extract -> synthesize -> guarded emit, per round.

The host may call process_round several times as more declarations become
visible. Every round recomputes everything from the forest it is given; only
the first round's text is ever written. Records that first appear in a later
round are synthesized but never reach the sink.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .decl import DeclarationNode
from .emission import EmissionGuard, EmissionOutcome, OutputSink, OutputUnit
from .extract import RecordInfo, extract_records
from .scan import find_records
from .synth import PROGRAM_NAME, build_program, output_path, render

DEFAULT_PACKAGE = "generated.console"


@dataclass
class RoundResult:
    """What one round saw, what it rendered, and whether it was written."""

    records: list[RecordInfo]
    text: str
    unit: OutputUnit
    outcome: EmissionOutcome

    @property
    def written(self) -> bool:
        return self.outcome is EmissionOutcome.WRITTEN


class GenerationSession:
    """One emission session. Owns its guard; a new session starts PENDING."""

    def __init__(
        self,
        sink: OutputSink,
        package: str = DEFAULT_PACKAGE,
        name: str = PROGRAM_NAME,
        target: str = "python",
    ) -> None:
        self.sink = sink
        self.package = package
        self.name = name
        self.target = target
        self.guard = EmissionGuard()
        self.rounds = 0

    def process_round(self, roots: Sequence[DeclarationNode]) -> RoundResult:
        self.rounds += 1
        records = extract_records(find_records(roots))
        module = build_program(self.package, records, self.name)
        text = render(module, self.target)
        unit = OutputUnit(output_path(module, self.target))
        outcome = self.guard.try_emit(unit, text, self.sink)
        return RoundResult(records, text, unit, outcome)


def run_rounds(
    session: GenerationSession, rounds: Iterable[Sequence[DeclarationNode]]
) -> list[RoundResult]:
    """Feed each forest to the session in order."""
    return [session.process_round(roots) for roots in rounds]
