"""Pytest-based frontend tests: Python source -> declaration tree.

Test cases live in 02_parse/*.tests files. The input is module source,
parsed as module "models". The expected section is one of:

    ok                     parsing succeeds
    error: <substring>     ParseError whose message contains substring
    path = value           dot-path assertions against the serialized tree
"""

from pathlib import Path

import pytest

from recordgen.frontend import ParseError, load_sources, module_name_for, parse_module, parse_sources
from recordgen.serialize import decl_to_dict

PARSE_DIR = Path(__file__).parent / "02_parse"

MODULE_NAME = "models"


def parse_test_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            test_input = "\n".join(input_lines)
            expected = "\n".join(expected_lines).strip()
            result.append((test_name, test_input, expected))
        else:
            i += 1
    return result


def discover_tests(directory: Path) -> list[tuple[str, str, str]]:
    """Find all tests in directory, returns (test_id, input, expected)."""
    results = []
    for test_file in sorted(directory.glob("*.tests")):
        for name, input_code, expected in parse_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_code, expected))
    return results


def resolve_dotpath(obj: object, path: str) -> object:
    """Resolve a dot-separated path against a nested dict/list structure."""
    current = obj
    for part in path.split("."):
        if part == "length":
            return len(current)
        if isinstance(current, list):
            current = current[int(part)]
        elif isinstance(current, dict):
            current = current[part]
        else:
            raise KeyError(
                f"cannot traverse {type(current).__name__} with key {part!r}"
            )
    return current


def to_comparable(value: object) -> str:
    """Convert a value to its string form for comparison."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(to_comparable(v) for v in value)
    return str(value)


def check_dotpaths(result: dict[str, object], expected: str) -> None:
    """Check `path = value` lines against result."""
    for line in expected.split("\n"):
        line = line.strip()
        if not line:
            continue
        if "=" not in line:
            pytest.fail(f"Bad assertion (no '='): {line}")
        path, expected_val = line.split("=", 1)
        path = path.strip()
        expected_val = expected_val.strip()
        try:
            actual = resolve_dotpath(result, path)
        except (KeyError, IndexError, TypeError) as e:
            pytest.fail(f"Path '{path}' not found in result: {e}")
        actual_str = to_comparable(actual)
        if actual_str != expected_val:
            pytest.fail(
                f"Assertion failed: {path}\n"
                f"  expected: {expected_val!r}\n"
                f"  actual:   {actual_str!r}"
            )


def pytest_generate_tests(metafunc):
    """Parametrize tests over parse test files."""
    if "parse_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_code, expected, id=test_id)
            for test_id, input_code, expected in discover_tests(PARSE_DIR)
        ]
        metafunc.parametrize("parse_input,parse_expected", params)


def test_parse(parse_input: str, parse_expected: str):
    """Verify the frontend produces the expected declaration tree."""
    if parse_expected.startswith("error:"):
        expected_msg = parse_expected[6:].strip()
        with pytest.raises(ParseError) as info:
            parse_module(parse_input, MODULE_NAME)
        assert expected_msg.lower() in info.value.msg.lower()
        return
    try:
        root = parse_module(parse_input, MODULE_NAME)
    except ParseError as e:
        pytest.fail(f"Expected ok, got parse error: {e.lineno}:{e.col}: {e.msg}")
    if parse_expected == "ok":
        return
    check_dotpaths(decl_to_dict(root), parse_expected)


def test_parse_error_location():
    with pytest.raises(ParseError) as info:
        parse_module("x = 1\ndef f(:\n    pass\n", MODULE_NAME)
    assert info.value.lineno == 2
    assert info.value.col >= 0


def test_dotted_module_name():
    root = parse_module("class A:\n    pass\n", "app.models")
    assert root.name == "models"
    assert root.qualname == "app.models"
    assert root.children[0].qualname == "app.models.A"
    assert root.children[0].enclosing_name == "models"


def test_module_names_from_directory(tmp_path: Path):
    pkg = tmp_path / "app"
    (pkg / "sub").mkdir(parents=True)
    (pkg / "__init__.py").write_text("")
    (pkg / "sub" / "models.py").write_text("class A:\n    pass\n")
    (pkg / "notes.txt").write_text("ignored")
    sources = load_sources([str(tmp_path)])
    assert [name for name, _ in sources] == ["app", "app.sub.models"]
    roots = parse_sources(sources)
    assert [r.qualname for r in roots] == ["app", "app.sub.models"]


def test_single_file_uses_stem(tmp_path: Path):
    path = tmp_path / "shapes.py"
    path.write_text("")
    assert module_name_for(path) == "shapes"
    assert load_sources([str(path)]) == [("shapes", "")]


def test_invalid_utf8_source(tmp_path: Path):
    path = tmp_path / "bad.py"
    path.write_bytes(b"\xff\xfe")
    with pytest.raises(UnicodeDecodeError):
        load_sources([str(path)])


def test_same_file_through_two_paths_loaded_once(tmp_path: Path):
    path = tmp_path / "models.py"
    path.write_text("")
    sources = load_sources([str(tmp_path), str(path), str(tmp_path / "." / "models.py")])
    assert sources == [("models", "")]
