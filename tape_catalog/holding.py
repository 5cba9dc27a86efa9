"""Holding-disk enumeration and dump header parsing.

Dumps waiting to be flushed to tape live under each holding directory as
``<holding-dir>/<datestamp>/<host>.<disk>.<level>`` files. Every file starts
with a text header such as::

    AMANDA: FILE 20230101 host1 /disk1 lev 0 comp .gz program /bin/tar

Large dumps are split into chunks; continuation chunks carry a
``CONT_FILE`` header and are never listed on their own.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .catalog import Catalog, FindResult, STATUS_OK, WHOLE_DUMP
from .inventory import DiskList
from .quoting import split_quoted_strings, unquote_string

logger = logging.getLogger(__name__)

HEADER_SIZE = 32 * 1024

FILE_UNKNOWN = "FILE_UNKNOWN"
FILE_TAPESTART = "FILE_TAPESTART"
FILE_DUMPFILE = "FILE_DUMPFILE"
FILE_CONT_DUMPFILE = "FILE_CONT_DUMPFILE"

_HEADER_TYPES = {
    "FILE": FILE_DUMPFILE,
    "CONT_FILE": FILE_CONT_DUMPFILE,
    "TAPESTART": FILE_TAPESTART,
}

MIN_LEVEL = 0
MAX_LEVEL = 9


@dataclass
class HoldingHeader:
    """Fields of a holding file header that the catalog needs."""

    type: str
    host: str = ""
    disk: str = ""
    datestamp: str = ""
    level: int = -1
    cont_filename: str = ""


def parse_holding_header(text: str) -> HoldingHeader:
    """Parse the text of a dump header.

    Args:
        text: Beginning of the holding file, decoded

    Returns:
        HoldingHeader; type is FILE_UNKNOWN if the first line is not a
        recognised header
    """
    lines = text.splitlines()
    if not lines:
        return HoldingHeader(FILE_UNKNOWN)

    first = lines[0]
    tokens = [first[a:b] for a, b in split_quoted_strings(first)]
    if len(tokens) < 2 or tokens[0] != "AMANDA:":
        return HoldingHeader(FILE_UNKNOWN)

    file_type = _HEADER_TYPES.get(tokens[1], FILE_UNKNOWN)
    if file_type == FILE_TAPESTART:
        # AMANDA: TAPESTART DATE <datestamp> TAPE <label>
        datestamp = tokens[3] if len(tokens) > 3 and tokens[2] == "DATE" else ""
        return HoldingHeader(file_type, datestamp=datestamp)

    if file_type == FILE_UNKNOWN:
        return HoldingHeader(FILE_UNKNOWN)

    # AMANDA: FILE <datestamp> <host> <disk> lev <level> ...
    if len(tokens) < 7 or tokens[5] != "lev":
        logger.warning(f"Malformed dump header: {first!r}")
        return HoldingHeader(FILE_UNKNOWN)
    try:
        level = int(tokens[6])
    except ValueError:
        logger.warning(f"Bad dump level in header: {first!r}")
        return HoldingHeader(FILE_UNKNOWN)

    header = HoldingHeader(
        type=file_type,
        datestamp=tokens[2],
        host=tokens[3],
        disk=unquote_string(tokens[4]),
        level=level,
    )
    for line in lines[1:]:
        if line.startswith("CONT_FILENAME="):
            header.cont_filename = line[len("CONT_FILENAME="):].strip()
            break
    return header


def read_holding_header(path: str | Path) -> HoldingHeader | None:
    """Read and parse the header of a holding file.

    Returns:
        HoldingHeader, or None if the file cannot be read
    """
    try:
        with open(path, "rb") as fh:
            data = fh.read(HEADER_SIZE)
    except OSError as e:
        logger.warning(f"Could not read holding file {path}: {e.strerror}")
        return None
    return parse_holding_header(data.decode("utf-8", errors="replace"))


class HoldingStore:
    """The set of holding directories of a configuration."""

    def __init__(self, dirs: list[str | Path] | None = None):
        self.dirs = [Path(d) for d in dirs or []]

    def iter_holding_dumps(self) -> Iterator[tuple[str, HoldingHeader]]:
        """Yield (path, header) for every first-chunk dump file, in directory order.

        Each header is read once; continuation chunks, temp files and files
        without a dump header are left out.
        """
        for holding_dir in self.dirs:
            if not holding_dir.is_dir():
                logger.debug(f"Holding directory {holding_dir} does not exist")
                continue
            for date_dir in sorted(p for p in holding_dir.iterdir() if p.is_dir()):
                for path in sorted(date_dir.iterdir()):
                    if not path.is_file() or path.suffix == ".tmp":
                        continue
                    header = read_holding_header(path)
                    if header is None or header.type != FILE_DUMPFILE:
                        continue
                    yield os.fspath(path), header

    def list_holding_files(self) -> list[str]:
        """Return the paths of all first-chunk dump files, in directory order."""
        return [path for path, _ in self.iter_holding_dumps()]


def search_holding_disk(catalog: Catalog, store: HoldingStore, disklist: DiskList) -> int:
    """Add a record for every scheduled dump still sitting on holding disk.

    Chunked holding files from older releases carry a suffix on the host
    component; trailing ``.``-separated pieces are stripped from the host
    until the disk inventory knows the pair.

    Args:
        catalog: Catalog to prepend to
        store: Holding directories to enumerate
        disklist: Disk inventory

    Returns:
        Number of records added
    """
    added = 0
    for holding_file, header in store.iter_holding_dumps():
        if not MIN_LEVEL <= header.level <= MAX_LEVEL:
            continue

        host = header.host
        disk = disklist.lookup_disk(host, header.disk)
        while disk is None and "." in host:
            host = host.rsplit(".", 1)[0]
            disk = disklist.lookup_disk(host, header.disk)
        if disk is None:
            logger.debug(f"No disk for holding file {holding_file}")
            continue

        if disklist.find_match(host, header.disk):
            catalog.prepend(FindResult(
                timestamp=header.datestamp,
                hostname=host,
                diskname=header.disk,
                level=header.level,
                label=holding_file,
                filenum=0,
                partnum=WHOLE_DUMP,
                status=STATUS_OK,
            ))
            added += 1
    return added
