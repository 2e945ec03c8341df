"""Guarded emission: the generated program reaches its sink at most once.

| State   | try_emit                          |
|---------|-----------------------------------|
| PENDING | claim -> EMITTED, write, WRITTEN  |
| EMITTED | no write, SKIPPED                 |

The claim is a compare-and-set under a lock, so concurrent callers agree on
a single writer. A failed write is not retried: the guard stays EMITTED and
the failure surfaces as EmitError.
"""

from __future__ import annotations

import os
import tempfile
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, TextIO


class EmissionState(Enum):
    PENDING = "pending"
    EMITTED = "emitted"


class EmissionOutcome(Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"


class EmitError(Exception):
    """Writing generated source failed. Fatal for the session."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"cannot write '{path}': {reason}")


@dataclass(frozen=True)
class OutputUnit:
    """The single named output file of a session, relative to the sink root."""

    path: str


class OutputSink(Protocol):
    def write(self, unit: OutputUnit, text: str) -> None:
        ...


class FileSink:
    """Write units below a root directory. Replaces files atomically."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def target(self, unit: OutputUnit) -> Path:
        return self.root / unit.path

    def write(self, unit: OutputUnit, text: str) -> None:
        dest = self.target(unit)
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=dest.parent, prefix="." + dest.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp, dest)
        except Exception:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class StreamSink:
    """Write unit text to an open text stream (stdout in the CLI)."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write(self, unit: OutputUnit, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()


class EmissionGuard:
    """One-shot latch owned by a single generation session."""

    def __init__(self) -> None:
        self._state = EmissionState.PENDING
        self._lock = threading.Lock()

    @property
    def state(self) -> EmissionState:
        return self._state

    def _claim(self) -> bool:
        """Compare-and-set PENDING -> EMITTED. True for exactly one caller."""
        with self._lock:
            if self._state is not EmissionState.PENDING:
                return False
            self._state = EmissionState.EMITTED
            return True

    def try_emit(self, unit: OutputUnit, text: str, sink: OutputSink) -> EmissionOutcome:
        if not self._claim():
            return EmissionOutcome.SKIPPED
        try:
            sink.write(unit, text)
        except OSError as e:
            raise EmitError(unit.path, e.strerror or str(e)) from e
        except UnicodeError as e:
            raise EmitError(unit.path, str(e)) from e
        return EmissionOutcome.WRITTEN
