"""recordgen - generate a program that reports the records of Python modules."""

from .decl import DeclarationNode, Kind, component, function, package, record, type_decl
from .emission import (
    EmissionGuard,
    EmissionOutcome,
    EmissionState,
    EmitError,
    FileSink,
    OutputUnit,
    StreamSink,
)
from .extract import MalformedRecordError, RecordComponentInfo, RecordInfo, extract_record
from .scan import find_records, is_record
from .session import GenerationSession, RoundResult, run_rounds
from .synth import build_program, synthesize

__all__ = [
    "DeclarationNode",
    "EmissionGuard",
    "EmissionOutcome",
    "EmissionState",
    "EmitError",
    "FileSink",
    "GenerationSession",
    "Kind",
    "MalformedRecordError",
    "OutputUnit",
    "RecordComponentInfo",
    "RecordInfo",
    "RoundResult",
    "StreamSink",
    "build_program",
    "component",
    "extract_record",
    "find_records",
    "function",
    "is_record",
    "package",
    "record",
    "run_rounds",
    "synthesize",
    "type_decl",
]
