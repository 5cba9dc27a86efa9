"""Classifier for structured backup log lines.

Each line of a run log has the shape ``<KIND> <program> <text>``, for
example::

    START taper datestamp 20230101 label TAPE01 tape 1
    SUCCESS taper host1 /disk1 20230101 0 [sec 1.2 kb 1024 kps 853.3]
    PART taper TAPE01 2 host1 /disk1 20230101 1/-1 0 [sec 0.4 kb 512 kps 1280.0]

Lines starting with two spaces continue the previous line's program.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, TextIO

from .quoting import split_quoted_strings

logger = logging.getLogger(__name__)


class LogType(Enum):
    """Record kinds that can open a log line."""

    BOGUS = "BOGUS"
    FATAL = "FATAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    SUMMARY = "SUMMARY"
    START = "START"
    FINISH = "FINISH"
    DISK = "DISK"
    DONE = "DONE"
    PART = "PART"
    PARTPARTIAL = "PARTPARTIAL"
    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    FAIL = "FAIL"
    STRANGE = "STRANGE"
    CHUNK = "CHUNK"
    CHUNKSUCCESS = "CHUNKSUCCESS"
    STATS = "STATS"
    MARKER = "MARKER"
    CONT = "CONT"


class Program(Enum):
    """Programs that write to the run log."""

    UNKNOWN = "UNKNOWN"
    PLANNER = "planner"
    DRIVER = "driver"
    REPORTER = "reporter"
    DUMPER = "dumper"
    CHUNKER = "chunker"
    TAPER = "taper"
    AMFLUSH = "amflush"


_LOGTYPES = {t.value: t for t in LogType if t is not LogType.CONT}
_PROGRAMS = {p.value: p for p in Program}


@dataclass(frozen=True)
class LogLine:
    """One classified log line."""

    kind: LogType
    program: Program
    text: str
    """Remainder of the line after the kind and program tokens."""

    lineno: int = 0


def parse_logline(line: str, previous: Program = Program.UNKNOWN, lineno: int = 0) -> LogLine:
    """Classify a single log line.

    Args:
        line: Raw line (trailing newline allowed)
        previous: Program of the preceding line, inherited by continuation lines
        lineno: 1-based line number, kept for diagnostics

    Returns:
        LogLine; unknown kinds classify as BOGUS and unknown programs as UNKNOWN
    """
    line = line.rstrip("\n")

    if line.startswith("  "):
        return LogLine(LogType.CONT, previous, line.strip(), lineno)

    tokens = split_quoted_strings(line)
    kind_span = next(tokens, None)
    if kind_span is None:
        return LogLine(LogType.BOGUS, Program.UNKNOWN, "", lineno)
    prog_span = next(tokens, None)

    kind = _LOGTYPES.get(line[kind_span[0]:kind_span[1]], LogType.BOGUS)
    if prog_span is None:
        return LogLine(kind, Program.UNKNOWN, "", lineno)

    program = _PROGRAMS.get(line[prog_span[0]:prog_span[1]], Program.UNKNOWN)
    text = line[prog_span[1]:].strip()
    return LogLine(kind, program, text, lineno)


def iter_loglines(handle: TextIO) -> Iterator[LogLine]:
    """Yield classified lines from an open log file."""
    previous = Program.UNKNOWN
    for lineno, raw in enumerate(handle, start=1):
        record = parse_logline(raw, previous, lineno)
        previous = record.program
        yield record


def parse_taper_start(text: str) -> tuple[str, str] | None:
    """Extract (datestamp, label) from the body of a ``START taper`` line.

    Args:
        text: Line body, e.g. ``datestamp 20230101 label TAPE01 tape 1``

    Returns:
        (datestamp, label), or None if the body does not have that shape
    """
    words = text.split()
    if len(words) < 4 or words[0] != "datestamp" or words[2] != "label":
        return None
    return words[1], words[3]
