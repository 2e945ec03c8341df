"""Pytest-based emission guard and sink tests."""

import io
import os
import threading
from pathlib import Path

import pytest

from recordgen.decl import record
from recordgen.emission import (
    EmissionGuard,
    EmissionOutcome,
    EmissionState,
    EmitError,
    FileSink,
    OutputUnit,
    StreamSink,
)
from recordgen.session import GenerationSession

UNIT = OutputUnit("generated/console/show_record_information.py")


class RecordingSink:
    """Remembers every write."""

    def __init__(self) -> None:
        self.writes: list[tuple[OutputUnit, str]] = []
        self._lock = threading.Lock()

    def write(self, unit: OutputUnit, text: str) -> None:
        with self._lock:
            self.writes.append((unit, text))


class FailingSink:
    def __init__(self) -> None:
        self.calls = 0

    def write(self, unit: OutputUnit, text: str) -> None:
        self.calls += 1
        raise PermissionError(13, "Permission denied")


def test_new_guard_is_pending():
    assert EmissionGuard().state is EmissionState.PENDING


def test_first_call_writes_later_calls_skip():
    guard = EmissionGuard()
    sink = RecordingSink()
    assert guard.try_emit(UNIT, "first", sink) is EmissionOutcome.WRITTEN
    assert guard.try_emit(UNIT, "second", sink) is EmissionOutcome.SKIPPED
    assert guard.try_emit(UNIT, "third", sink) is EmissionOutcome.SKIPPED
    assert sink.writes == [(UNIT, "first")]
    assert guard.state is EmissionState.EMITTED


def test_concurrent_callers_write_once():
    guard = EmissionGuard()
    sink = RecordingSink()
    barrier = threading.Barrier(16)
    outcomes: list[EmissionOutcome] = []
    outcomes_lock = threading.Lock()

    def worker(i: int) -> None:
        barrier.wait()
        outcome = guard.try_emit(UNIT, f"text {i}", sink)
        with outcomes_lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(sink.writes) == 1
    assert outcomes.count(EmissionOutcome.WRITTEN) == 1
    assert outcomes.count(EmissionOutcome.SKIPPED) == 15


def test_failed_write_raises_and_is_not_retried():
    guard = EmissionGuard()
    sink = FailingSink()
    with pytest.raises(EmitError) as info:
        guard.try_emit(UNIT, "text", sink)
    assert info.value.path == UNIT.path
    assert info.value.reason == "Permission denied"
    assert isinstance(info.value.__cause__, PermissionError)
    assert str(info.value) == f"cannot write '{UNIT.path}': Permission denied"
    assert guard.state is EmissionState.EMITTED
    assert guard.try_emit(UNIT, "text", sink) is EmissionOutcome.SKIPPED
    assert sink.calls == 1


def test_stream_sink():
    stream = io.StringIO()
    guard = EmissionGuard()
    guard.try_emit(UNIT, "print('hi')\n", StreamSink(stream))
    assert stream.getvalue() == "print('hi')\n"


def test_file_sink_creates_directories(tmp_path: Path):
    sink = FileSink(tmp_path)
    sink.write(UNIT, "content\n")
    target = tmp_path / "generated" / "console" / "show_record_information.py"
    assert target.read_text() == "content\n"
    assert sink.target(UNIT) == target


def test_file_sink_replaces_without_leftovers(tmp_path: Path):
    sink = FileSink(tmp_path)
    sink.write(UNIT, "old\n")
    sink.write(UNIT, "new\n")
    directory = tmp_path / "generated" / "console"
    assert sorted(os.listdir(directory)) == ["show_record_information.py"]
    assert (directory / "show_record_information.py").read_text() == "new\n"


def test_file_sink_failure_leaves_no_file(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    guard = EmissionGuard()
    with pytest.raises(EmitError):
        guard.try_emit(OutputUnit("pkg/Out.java"), "x", FileSink(blocker))
    assert blocker.read_text() == ""


def test_each_guard_is_independent():
    sink = RecordingSink()
    EmissionGuard().try_emit(UNIT, "a", sink)
    EmissionGuard().try_emit(UNIT, "b", sink)
    assert [text for _, text in sink.writes] == ["a", "b"]


class EncodingFailureSink:
    def write(self, unit: OutputUnit, text: str) -> None:
        text.encode("utf-8")


def test_encoding_failure_is_wrapped():
    guard = EmissionGuard()
    with pytest.raises(EmitError) as info:
        guard.try_emit(UNIT, "lone \ud800", EncodingFailureSink())
    assert isinstance(info.value.__cause__, UnicodeEncodeError)
    assert guard.state is EmissionState.EMITTED


@pytest.mark.parametrize("target", ["python", "java"])
def test_lone_surrogate_in_record_name_is_written_escaped(tmp_path: Path, target: str):
    session = GenerationSession(FileSink(tmp_path), target=target)
    result = session.process_round([record("R\ud800")])
    assert result.written
    assert '"R\\ud800"' in (tmp_path / result.unit.path).read_text(encoding="utf-8")
