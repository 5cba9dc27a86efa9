"""Catalog build driver: tapes -> run logs -> FindResult catalog.

For every tape in the position table, the run logs of the tape's datestamp
are searched in this order:

1. ``log.<datestamp>.<seq>`` for seq = 0, 1, 2, ... while the file exists
2. ``log.<datestamp>.amflush``
3. ``log.<datestamp>`` (oldest naming)
"""

import logging
import os
from pathlib import Path
from typing import Iterator

from .catalog import Catalog
from .holding import HoldingStore, search_holding_disk
from .inventory import DiskList, TapeEntry, TapeList
from .logscan import scan_logfile
from .utils import atoi

logger = logging.getLogger(__name__)

# datestamp of a labelled tape that has never been written
NEVER_WRITTEN = "0"


def find_nicedate(datestamp: str) -> str:
    """Render a datestamp for people.

    Examples:
        >>> find_nicedate("20230101")
        '2023-01-01'
        >>> find_nicedate("20230101123045")
        '2023-01-01 12:30:45'
    """
    numdate = atoi(datestamp[:8])
    year, month, day = numdate // 10000, (numdate // 100) % 100, numdate % 100

    if len(datestamp) <= 8:
        return f"{year:4d}-{month:02d}-{day:02d}"

    numtime = atoi(datestamp[8:14])
    hours, minutes, seconds = numtime // 10000, (numtime // 100) % 100, numtime % 100
    return f"{year:4d}-{month:02d}-{day:02d} {hours:02d}:{minutes:02d}:{seconds:02d}"


def _readable(path: Path) -> bool:
    return os.access(path, os.R_OK)


def get_log_candidates(log_dir: Path, datestamp: str) -> Iterator[tuple[str, Path, bool]]:
    """Yield the existing run logs for a datestamp, in search order.

    Yields:
        (name, path, is_sequenced) for every readable log file
    """
    seq = 0
    while True:
        name = f"log.{datestamp}.{seq}"
        path = log_dir / name
        if not _readable(path):
            break
        yield name, path, True
        seq += 1

    for name in (f"log.{datestamp}.amflush", f"log.{datestamp}"):
        path = log_dir / name
        if _readable(path):
            yield name, path, False


def _warn_no_logs(tape: TapeEntry) -> None:
    if tape.datestamp != NEVER_WRITTEN:
        logger.warning(
            f"no log files found for tape {tape.label} written {find_nicedate(tape.datestamp)}"
        )


def find_dump(
    log_dir: str | Path,
    tapelist: TapeList,
    disklist: DiskList,
    holding: HoldingStore | None = None,
    dynamic_disklist: bool = False,
) -> Catalog:
    """Rebuild the catalog of every dump on the tapes and on holding disk.

    Args:
        log_dir: Directory holding the run logs
        tapelist: Tape position table
        disklist: Disk inventory; records are kept only for scheduled disks
        holding: Holding directories, or None to skip holding disk
        dynamic_disklist: Add disks found in the logs to the inventory

    Returns:
        Unsorted Catalog

    Raises:
        LogFileOpenError: If an existing log file cannot be opened
    """
    log_dir = Path(log_dir)
    catalog = Catalog()

    for position in range(1, tapelist.lookup_nb_tape() + 1):
        tape = tapelist.lookup_tapepos(position)
        if tape is None:
            continue

        logs = 0
        for name, path, _ in get_log_candidates(log_dir, tape.datestamp):
            scan = scan_logfile(catalog, tape.label, tape.datestamp, path, disklist, dynamic_disklist)
            if scan.matched:
                logs += 1
                logger.debug(f"{name}: {scan.added} records for {tape.label}")
        if logs == 0:
            _warn_no_logs(tape)

    if holding is not None:
        added = search_holding_disk(catalog, holding, disklist)
        logger.debug(f"{added} records from holding disk")

    return catalog


def find_log(log_dir: str | Path, tapelist: TapeList) -> list[str]:
    """List the run log names that describe the tapes of the position table.

    Only the first sequenced log that belongs to a tape is reported for it;
    the amflush and unsequenced logs are reported whenever they belong.
    """
    log_dir = Path(log_dir)
    found = []

    for position in range(1, tapelist.lookup_nb_tape() + 1):
        tape = tapelist.lookup_tapepos(position)
        if tape is None:
            continue

        logs = 0
        sequenced_found = False
        for name, path, is_sequenced in get_log_candidates(log_dir, tape.datestamp):
            if is_sequenced and sequenced_found:
                continue
            if scan_logfile(None, tape.label, tape.datestamp, path).matched:
                found.append(name)
                logs += 1
                sequenced_found = sequenced_found or is_sequenced
        if logs == 0:
            _warn_no_logs(tape)

    return found
