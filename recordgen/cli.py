"""Command-line entry point."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field

from .decl import DeclarationNode
from .diagnostics import Diagnostic
from .emission import EmitError, FileSink, OutputSink, StreamSink
from .extract import extract_records
from .frontend import ParseError, load_sources, parse_module
from .report import report_marked, report_records
from .scan import find_records
from .serialize import forest_to_dict, records_to_dict, scan_to_dict
from .session import DEFAULT_PACKAGE, GenerationSession, RoundResult
from .synth import PROGRAM_NAME, check_names, synthesize

TARGETS: list[str] = [
    "java",
    "python",
]

PHASES: list[str] = [
    "parse",
    "scan",
    "extract",
    "synthesize",
]

STDIN_MODULE = "stdin"

USAGE: str = """\
recordgen [OPTIONS] [INPUT...] [-o OUTPUT]

Find every record (dataclass or NamedTuple) in the INPUT modules and generate
a standalone program that prints their names, parents and components.
INPUT may be files or directories; with no INPUT one module is read from stdin.

Options:
  --target TARGET     Output language: java, python (default python)
  --package NAME      Package of the generated program (default generated.console)
  --name NAME         Class name of the generated program (default ShowRecordInformation)
  --stop-at PHASE     Stop after phase: parse, scan, extract, synthesize
  --report            Print a note per record and component instead of generating
  --marker NAME       With --report: only declarations decorated with NAME
  --rounds            Feed inputs one more per round; only the first round is written
  -o, --output DIR    Write the generated file under DIR instead of stdout
  --help              Show this help message
"""


@dataclass
class Options:
    target: str = "python"
    package: str = DEFAULT_PACKAGE
    name: str = PROGRAM_NAME
    stop_at: str | None = None
    report: bool = False
    marker: str | None = None
    rounds: bool = False
    output_dir: str | None = None
    inputs: list[str] = field(default_factory=list)


def _usage_error(message: str) -> None:
    print("error: " + message, file=sys.stderr)
    sys.exit(2)


def parse_args(args: list[str]) -> Options:
    """Parse command-line arguments. Exits with status 2 on usage errors."""
    opts = Options()
    value_flags = {"--target", "--package", "--name", "--stop-at", "--marker", "-o", "--output"}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg in value_flags:
            if i + 1 >= len(args):
                _usage_error(arg + " requires an argument")
            value = args[i + 1]
            if arg == "--target":
                opts.target = value
            elif arg == "--package":
                opts.package = value
            elif arg == "--name":
                opts.name = value
            elif arg == "--stop-at":
                opts.stop_at = value
            elif arg == "--marker":
                opts.marker = value
                opts.report = True
            else:
                opts.output_dir = value
            i += 2
        elif arg == "--report":
            opts.report = True
            i += 1
        elif arg == "--rounds":
            opts.rounds = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            _usage_error("unknown flag '" + arg + "'")
        else:
            opts.inputs.append(arg)
            i += 1
    if opts.stop_at is not None and opts.stop_at not in PHASES:
        _usage_error("unknown phase '" + opts.stop_at + "'")
    if opts.target not in TARGETS:
        _usage_error("unknown target '" + opts.target + "'")
    try:
        check_names(opts.package, opts.name)
    except ValueError as e:
        _usage_error(str(e))
    return opts


def read_stdin() -> tuple[str, int]:
    """Read one module from stdin. Returns (source, exit_code) where 0 means OK."""
    raw = sys.stdin.buffer.read()
    if len(raw) == 0:
        print("error: no input provided", file=sys.stderr)
        return ("", 2)
    try:
        return (raw.decode("utf-8"), 0)
    except ValueError:
        print("error: invalid utf-8 in input", file=sys.stderr)
        return ("", 1)


def read_forest(inputs: list[str]) -> tuple[list[DeclarationNode], int]:
    """Parse all inputs into PACKAGE roots. Returns (roots, exit_code)."""
    if not inputs or inputs == ["-"]:
        source, err = read_stdin()
        if err != 0:
            return ([], err)
        sources = [(STDIN_MODULE, source)]
    else:
        try:
            sources = load_sources(inputs)
        except OSError as e:
            print("error: cannot open '" + str(e.filename) + "'", file=sys.stderr)
            return ([], 1)
        except UnicodeDecodeError:
            print("error: invalid utf-8 in input", file=sys.stderr)
            return ([], 1)
    roots: list[DeclarationNode] = []
    for module_name, source in sources:
        try:
            roots.append(parse_module(source, module_name))
        except ParseError as e:
            print(
                "error:" + str(e.lineno) + ":" + str(e.col) + ": " + e.msg + " (" + module_name + ")",
                file=sys.stderr,
            )
            return ([], 1)
    return (roots, 0)


def _print_diagnostics(diags: list[Diagnostic]) -> None:
    for d in diags:
        print(str(d), file=sys.stderr)


def run_phases(roots: list[DeclarationNode], opts: Options) -> str:
    """Run up to --stop-at without emitting. Returns text for stdout."""
    if opts.stop_at == "parse":
        return json.dumps(forest_to_dict(roots), indent=2) + "\n"
    nodes = find_records(roots)
    if opts.stop_at == "scan":
        return json.dumps(scan_to_dict(nodes), indent=2) + "\n"
    records = extract_records(nodes)
    if opts.stop_at == "extract":
        return json.dumps(records_to_dict(records), indent=2) + "\n"
    return synthesize(opts.package, records, opts.target, opts.name)


def round_forests(roots: list[DeclarationNode], rounds: bool) -> list[list[DeclarationNode]]:
    """Each round sees one more module than the last when rounds is set."""
    if not rounds:
        return [roots]
    return [roots[: i + 1] for i in range(len(roots))]


def _warn_late_records(results: list[RoundResult]) -> None:
    written = [r for r in results if r.written]
    if not written:
        return
    emitted = {(r.record_simple_name, r.record_parent_simple_name) for r in written[0].records}
    for index, result in enumerate(results):
        if result.written:
            continue
        late = [
            r.record_simple_name
            for r in result.records
            if (r.record_simple_name, r.record_parent_simple_name) not in emitted
        ]
        if late:
            print(
                "warning: round " + str(index + 1) + " found records not in "
                + written[0].unit.path + ": " + ", ".join(late),
                file=sys.stderr,
            )


def generate(roots: list[DeclarationNode], opts: Options) -> int:
    sink: OutputSink
    if opts.output_dir is not None:
        sink = FileSink(opts.output_dir)
    else:
        sink = StreamSink(sys.stdout)
    session = GenerationSession(sink, opts.package, opts.name, opts.target)
    results: list[RoundResult] = []
    for forest in round_forests(roots, opts.rounds):
        try:
            result = session.process_round(forest)
        except EmitError as e:
            print("error: " + str(e), file=sys.stderr)
            return 1
        results.append(result)
        if opts.output_dir is not None:
            verb = "wrote " if result.written else "skipped "
            print(verb + result.unit.path, file=sys.stderr)
    _warn_late_records(results)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    opts = parse_args(argv if argv is not None else sys.argv[1:])
    roots, err = read_forest(opts.inputs)
    if err != 0:
        return err
    if opts.report:
        if opts.marker is not None:
            _print_diagnostics(report_marked(roots, opts.marker))
        else:
            _print_diagnostics(report_records(roots))
        return 0
    if opts.stop_at is not None:
        sys.stdout.write(run_phases(roots, opts))
        return 0
    return generate(roots, opts)


if __name__ == "__main__":
    sys.exit(main())
