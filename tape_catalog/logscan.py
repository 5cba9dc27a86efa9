"""Reconstruction of dump records from one run log.

A run log is only relevant to a tape if it contains a ``START taper`` line
naming that tape's datestamp and label. After that line, taper records are
turned into FindResult entries:

- SUCCESS: a whole dump written to one tape file.
- CHUNK / PART: one piece of a dump split across several tape files. Pieces
  are held in a pending list until the line that settles the dump's outcome.
- PARTPARTIAL: a piece that was cut short; it also closes the pending list.
- CHUNKSUCCESS / DONE / PARTIAL / FAIL: the outcome of a split dump. PARTIAL
  and FAIL overwrite the status of every pending piece before the list is
  moved into the catalog.

FAIL lines from other programs (dumper, chunker, ...) are recorded as
``FAILED (<program>) <reason>``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .catalog import Catalog, FindResult, STATUS_OK, STATUS_PARTIAL, WHOLE_DUMP
from .errors import LogFileOpenError
from .inventory import DiskList
from .logfile import LogLine, LogType, Program, iter_loglines, parse_taper_start
from .quoting import split_quoted_strings, unquote_string
from .utils import atoi, leading_int

logger = logging.getLogger(__name__)

# Taper lines that occupy a tape file and advance the file counter.
TAPE_FILE_KINDS = frozenset({
    LogType.SUCCESS, LogType.CHUNK, LogType.PART, LogType.PARTPARTIAL,
})

RECORD_KINDS = frozenset({
    LogType.SUCCESS, LogType.CHUNKSUCCESS, LogType.DONE, LogType.FAIL,
    LogType.CHUNK, LogType.PART, LogType.PARTIAL, LogType.PARTPARTIAL,
})

# Kinds whose current-format lines carry a partnum after the datestamp.
PARTNUM_KINDS = frozenset({
    LogType.CHUNK, LogType.PART, LogType.PARTPARTIAL, LogType.DONE,
})

# Kinds that settle the outcome of the pending parts.
TERMINATOR_KINDS = frozenset({
    LogType.CHUNKSUCCESS, LogType.DONE, LogType.PARTIAL, LogType.FAIL,
})

# Oldest logs put the level where the datestamp now is; a "date" shorter
# than this is really a level.
MIN_DATESTAMP_LEN = 3


class _StrangeLine(Exception):
    """Internal signal: the record line does not have the expected shape."""


class _Tokens:
    """Cursor over the whitespace/quoted tokens of a record body."""

    def __init__(self, text: str):
        self.text = text
        self._spans = list(split_quoted_strings(text))
        self._pos = 0

    def next(self) -> str:
        if self._pos >= len(self._spans):
            raise _StrangeLine()
        start, end = self._spans[self._pos]
        self._pos += 1
        return self.text[start:end]

    def rest(self) -> str:
        """Untokenized remainder of the line; must not be empty."""
        if self._pos >= len(self._spans):
            raise _StrangeLine()
        return self.text[self._spans[self._pos][0]:].strip()


@dataclass
class LogScan:
    """Outcome of scanning one log file for one tape."""

    matched: bool
    """The log contains the START taper line of the tape."""

    added: int = 0
    """Records moved into the catalog."""


class DumpRecordReconstructor:
    """State machine turning the record lines of one tape into FindResults.

    Feed it the lines that follow the tape's ``START taper`` line, then call
    finish().
    """

    def __init__(
        self,
        catalog: Catalog,
        label: str,
        datestamp: str,
        disklist: DiskList,
        dynamic_disklist: bool = False,
        logfile: str | Path = "",
    ):
        self.catalog = catalog
        self.label = label
        self.datestamp = datestamp
        self.disklist = disklist
        self.dynamic_disklist = dynamic_disklist
        self.logfile = logfile

        self.filenum = 0
        self.within_label = True
        self.parts: list[FindResult] = []
        self.added = 0

    def feed(self, line: LogLine) -> None:
        if line.program is Program.TAPER and self.within_label and line.kind in TAPE_FILE_KINDS:
            self.filenum += 1

        if line.kind is LogType.START and line.program is Program.TAPER:
            self._tape_start(line)
            return

        if not self.within_label or line.kind not in RECORD_KINDS:
            return

        try:
            self._record(line)
        except _StrangeLine:
            logger.warning(f'strange log line in {self.logfile} "{line.text}"')

    def finish(self) -> int:
        """Close the scan; returns the number of records added."""
        if self.parts:
            logger.warning(
                f"part list not empty {self.logfile} {self.label}: "
                f"{len(self.parts)} unterminated parts discarded"
            )
            self.parts = []
        return self.added

    def _tape_start(self, line: LogLine) -> None:
        parsed = parse_taper_start(line.text)
        if parsed is None:
            logger.warning(f'strange log line in {self.logfile} "start taper {line.text}"')
            return
        # another tape was started in the same run; only collect while ours is loaded
        self.within_label = parsed[1] == self.label

    def _record(self, line: LogLine) -> None:
        kind = line.kind
        tokens = _Tokens(line.text)
        partnum = WHOLE_DUMP

        if kind in (LogType.PART, LogType.PARTPARTIAL):
            part_label = tokens.next()
            if part_label != self.label:
                logger.warning(f"label doesn't match {part_label} {self.label}")
                return
            self.filenum = atoi(tokens.next())

        host = tokens.next()
        disk = unquote_string(tokens.next())
        date = tokens.next()

        if len(date) < MIN_DATESTAMP_LEN:
            level = atoi(date)
            date = self.datestamp
        else:
            if kind in PARTNUM_KINDS:
                partnum = tokens.next()
            level = leading_int(tokens.next())
            if level is None:
                raise _StrangeLine()

        rest = tokens.rest()

        if not self._resolve_disk(host, disk):
            return

        if line.program is Program.TAPER:
            self._taper_record(kind, FindResult(
                timestamp=date,
                hostname=host,
                diskname=disk,
                level=level,
                label=self.label,
                filenum=self.filenum,
                partnum=partnum,
            ), rest)
        elif kind is LogType.FAIL:
            self.catalog.prepend(FindResult(
                timestamp=date,
                hostname=host,
                diskname=disk,
                level=level,
                label=self.label,
                filenum=0,
                partnum=partnum,
                status=f"FAILED ({line.program.value}) {rest}",
            ))
            self.added += 1

    def _resolve_disk(self, host: str, disk: str) -> bool:
        """Look the disk up, adding it in dynamic mode; True if it is scheduled."""
        entry = self.disklist.lookup_disk(host, disk)
        if entry is None:
            if not self.dynamic_disklist:
                logger.debug(f"Skipping {host}:{disk}, not in disklist")
                return False
            entry = self.disklist.add_disk(host, disk)
            self.disklist.enqueue_disk(entry)
        return self.disklist.find_match(host, disk)

    def _taper_record(self, kind: LogType, result: FindResult, rest: str) -> None:
        if kind is LogType.SUCCESS:
            result.status = STATUS_OK
            self.catalog.prepend(result)
            self.added += 1
        elif kind in TERMINATOR_KINDS:
            if kind is LogType.PARTIAL:
                for part in self.parts:
                    part.status = STATUS_PARTIAL
            elif kind is LogType.FAIL:
                for part in self.parts:
                    part.status = rest
            self._splice_parts()
        else:
            result.status = STATUS_PARTIAL if kind is LogType.PARTPARTIAL else STATUS_OK
            self.parts.append(result)
            if kind is LogType.PARTPARTIAL:
                self._splice_parts()

    def _splice_parts(self) -> None:
        self.added += len(self.parts)
        self.catalog.splice(self.parts)


def _confirm_tape(lines: Iterator[LogLine], label: str, datestamp: str, logfile) -> bool:
    """Consume lines up to and including the START taper line of the tape."""
    for line in lines:
        if line.kind is not LogType.START or line.program is not Program.TAPER:
            continue
        parsed = parse_taper_start(line.text)
        if parsed is None:
            logger.warning(f'strange log line "start taper {logfile}" curstr=\'{line.text}\'')
        elif parsed == (datestamp, label):
            return True
    return False


def scan_logfile(
    catalog: Catalog | None,
    label: str,
    datestamp: str,
    logfile: str | Path,
    disklist: DiskList | None = None,
    dynamic_disklist: bool = False,
) -> LogScan:
    """Scan one log file for the dumps written to one tape.

    Args:
        catalog: Catalog to add to, or None to only check the tape identity
        label: Tape label
        datestamp: Datestamp the tape was written with
        logfile: Path of the log file; its existence has been checked
        disklist: Disk inventory (required unless catalog is None)
        dynamic_disklist: Add disks missing from the inventory instead of
            skipping their records

    Returns:
        LogScan with the match flag and the number of records added

    Raises:
        LogFileOpenError: If the file cannot be opened
    """
    try:
        fh = open(logfile, encoding="utf-8", errors="replace")
    except OSError as e:
        raise LogFileOpenError(logfile, e.strerror) from e

    with fh:
        lines = iter_loglines(fh)
        if not _confirm_tape(lines, label, datestamp, logfile):
            return LogScan(matched=False)
        if catalog is None:
            return LogScan(matched=True)

        logger.info(f"Scanning log {logfile} for tape {label}")
        reconstructor = DumpRecordReconstructor(
            catalog, label, datestamp,
            disklist if disklist is not None else DiskList(),
            dynamic_disklist, logfile,
        )
        for line in lines:
            reconstructor.feed(line)
        return LogScan(matched=True, added=reconstructor.finish())


def search_logfile(
    catalog: Catalog | None,
    label: str,
    datestamp: str,
    logfile: str | Path,
    disklist: DiskList | None = None,
    dynamic_disklist: bool = False,
) -> bool | int:
    """Probe or collect from one log file.

    With ``catalog`` None, returns whether the log belongs to the tape.
    Otherwise returns the number of records added to ``catalog``.
    """
    scan = scan_logfile(catalog, label, datestamp, logfile, disklist, dynamic_disklist)
    if catalog is None:
        return scan.matched
    return scan.added
