"""Run generated programs and compare their output with the scanned records.

Every module in app/ is run through the full pipeline for each target; the
generated program is then compiled (java) and executed, and its stdout must
describe exactly the records recordgen extracted, in order.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from recordgen.decl import component, record
from recordgen.emission import FileSink
from recordgen.extract import RecordInfo, extract_records
from recordgen.frontend import load_sources, parse_sources
from recordgen.scan import find_records
from recordgen.session import DEFAULT_PACKAGE, GenerationSession
from recordgen.synth import PROGRAM_NAME

APP_DIR = Path(__file__).parent / "app"
TARGETS = ["java", "python"]


def expected_output(records: list[RecordInfo]) -> str:
    lines: list[str] = []
    for info in records:
        lines.append("")
        lines.append("Record simple name: " + info.record_simple_name)
        lines.append("Record parent simple name: " + (info.record_parent_simple_name or ""))
        lines.append("Components:")
        for comp in info.record_components:
            lines.append("Simple name: " + comp.simple_name)
            lines.append("Type:        " + comp.type)
    return "".join(line + "\n" for line in lines)


def pytest_generate_tests(metafunc):
    """Parametrize over app modules x selected targets."""
    if "apptest" in metafunc.fixturenames:
        selected = metafunc.config.getoption("target") or TARGETS
        params = [
            pytest.param(path, target, id=f"{target}/{path.stem}")
            for target in TARGETS
            if target in selected
            for path in sorted(APP_DIR.glob("*.py"))
        ]
        metafunc.parametrize("apptest,target", params)


def _generate(apptest: Path, target: str, out: Path) -> tuple[Path, list[RecordInfo]]:
    session = GenerationSession(FileSink(out), DEFAULT_PACKAGE, PROGRAM_NAME, target)
    result = session.process_round(parse_sources(load_sources([str(apptest)])))
    assert result.written
    return out / result.unit.path, result.records


def _run_python(program: Path) -> subprocess.CompletedProcess[str]:
    env = {**os.environ, "PYTHONIOENCODING": "utf-8"}
    return subprocess.run(
        [sys.executable, str(program)],
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=10,
        env=env,
    )


def _run_java(program: Path, out: Path, tools: tuple[str, str]) -> subprocess.CompletedProcess[str]:
    javac, java = tools
    classes = out / "classes"
    compiled = subprocess.run(
        [javac, "-encoding", "UTF-8", "-d", str(classes), str(program)],
        capture_output=True,
        text=True,
        timeout=60,
    )
    if compiled.returncode != 0:
        pytest.fail(f"javac failed:\n{compiled.stderr}")
    main_class = DEFAULT_PACKAGE + "." + PROGRAM_NAME
    return subprocess.run(
        [java, "-Dfile.encoding=UTF-8", "-Dstdout.encoding=UTF-8", "-cp", str(classes), main_class],
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=30,
    )


def test_apptest(apptest: Path, target: str, tmp_path: Path, request):
    """Generated program prints exactly the extracted records."""
    tools = request.getfixturevalue("java_tools") if target == "java" else None
    program, records = _generate(apptest, target, tmp_path)
    try:
        if target == "java":
            result = _run_java(program, tmp_path, tools)
        else:
            result = _run_python(program)
    except subprocess.TimeoutExpired:
        pytest.fail("Generated program timed out")
    if result.returncode != 0:
        output = (result.stdout + result.stderr).strip()
        pytest.fail(f"Generated program failed with exit code {result.returncode}:\n{output}")
    assert result.stdout == expected_output(records)


def test_shapes_records():
    """The shapes app yields its records in pre-order with their parents."""
    roots = parse_sources(load_sources([str(APP_DIR / "shapes.py")]))
    records = extract_records(find_records(roots))
    assert [(r.record_simple_name, r.record_parent_simple_name) for r in records] == [
        ("Point", "shapes"),
        ("Size", "shapes"),
        ("Pixel", "Canvas"),
        ("Frame", "render"),
    ]
    assert [c.type for c in records[2].record_components] == ["Point", "tuple[int, int, int]"]


def test_record_without_parent_prints_empty_parent(tmp_path: Path):
    """A bare record root has no enclosing name; the program prints it empty."""
    point = record("Point", component("x", "int"), component("y", "int"))
    result = GenerationSession(FileSink(tmp_path)).process_round([point])
    assert result.written
    assert result.records[0].record_parent_simple_name is None
    run = _run_python(tmp_path / result.unit.path)
    assert run.returncode == 0, run.stderr
    assert run.stdout == (
        "\n"
        "Record simple name: Point\n"
        "Record parent simple name: \n"
        "Components:\n"
        "Simple name: x\n"
        "Type:        int\n"
        "Simple name: y\n"
        "Type:        int\n"
    )
