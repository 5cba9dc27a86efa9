"""Tape position table and disk inventory.

Both are read from plain text files kept next to the run logs:

- ``tapelist``: one ``<datestamp> <label> [reuse|no-reuse]`` line per tape,
  most recently written first.
- ``disklist``: one ``<host> <disk> [dumptype ...]`` line per disk; the disk
  name may be double-quoted.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .errors import InventoryError
from .match import match_disk, match_host
from .quoting import split_quoted_strings, unquote_string

logger = logging.getLogger(__name__)


def _content_lines(path: Path) -> Iterator[tuple[int, str]]:
    try:
        with open(path, encoding="utf-8", errors="replace") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                yield lineno, line
    except OSError as e:
        raise InventoryError(f"could not read {path}: {e.strerror}") from e


@dataclass
class TapeEntry:
    """One slot of the tape position table."""

    position: int
    datestamp: str
    """Run datestamp the tape was written with, "0" if never written."""

    label: str
    reuse: bool = True


class TapeList:
    """Tape position table, slot 1 being the most recently written tape."""

    def __init__(self, tapes: list[TapeEntry] | None = None):
        self._tapes = list(tapes or [])

    @classmethod
    def from_file(cls, path: str | Path) -> "TapeList":
        """Load a tapelist file.

        Raises:
            InventoryError: If the file cannot be read or a line is malformed
        """
        tapes = []
        for lineno, line in _content_lines(Path(path)):
            words = line.split()
            if len(words) < 2:
                raise InventoryError(f"{path}:{lineno}: malformed tapelist line {line!r}")
            reuse = len(words) < 3 or words[2] != "no-reuse"
            tapes.append(TapeEntry(len(tapes) + 1, words[0], words[1], reuse))
        logger.debug(f"Loaded {len(tapes)} tapes from {path}")
        return cls(tapes)

    @classmethod
    def from_pairs(cls, pairs) -> "TapeList":
        """Build a table from (datestamp, label) pairs in slot order."""
        return cls([TapeEntry(i, d, l) for i, (d, l) in enumerate(pairs, start=1)])

    def lookup_nb_tape(self) -> int:
        return len(self._tapes)

    def lookup_tapepos(self, position: int) -> TapeEntry | None:
        """Return the tape in a 1-based slot, or None."""
        if 1 <= position <= len(self._tapes):
            return self._tapes[position - 1]
        return None

    def lookup_tapelabel(self, label: str) -> TapeEntry | None:
        for tape in self._tapes:
            if tape.label == label:
                return tape
        return None

    def __iter__(self) -> Iterator[TapeEntry]:
        return iter(self._tapes)

    def __len__(self) -> int:
        return len(self._tapes)


@dataclass
class Disk:
    """A (host, disk) pair known to the backup configuration."""

    host: str
    name: str
    todo: bool = False
    """True if the disk is scheduled, i.e. selected for this run."""


class DiskList:
    """Disk inventory keyed by (host, disk)."""

    def __init__(self, disks: list[Disk] | None = None):
        self._disks: dict[tuple[str, str], Disk] = {}
        for disk in disks or []:
            self._disks[(disk.host, disk.name)] = disk

    @classmethod
    def from_file(cls, path: str | Path) -> "DiskList":
        """Load a disklist file; every disk in it is scheduled.

        Raises:
            InventoryError: If the file cannot be read or a line is malformed
        """
        disks = []
        for lineno, line in _content_lines(Path(path)):
            spans = list(split_quoted_strings(line))
            if len(spans) < 2:
                raise InventoryError(f"{path}:{lineno}: malformed disklist line {line!r}")
            host = line[spans[0][0]:spans[0][1]]
            name = unquote_string(line[spans[1][0]:spans[1][1]])
            disks.append(Disk(host, name, todo=True))
        logger.debug(f"Loaded {len(disks)} disks from {path}")
        return cls(disks)

    def lookup_disk(self, host: str, disk: str) -> Disk | None:
        return self._disks.get((host, disk))

    def add_disk(self, host: str, disk: str) -> Disk:
        """Create an unscheduled entry for a disk discovered in the logs."""
        entry = self._disks.get((host, disk))
        if entry is None:
            entry = Disk(host, disk)
            self._disks[(host, disk)] = entry
            logger.debug(f"Added disk {host}:{disk} to inventory")
        return entry

    def enqueue_disk(self, disk: Disk) -> None:
        """Mark a disk as scheduled."""
        disk.todo = True

    def find_match(self, host: str, disk: str) -> bool:
        """True if the disk is in the inventory and scheduled."""
        entry = self.lookup_disk(host, disk)
        return entry is not None and entry.todo

    def match_disklist(self, dumpspecs) -> int:
        """Schedule only the disks selected by a dumpspec list.

        A dumpspec selects a disk when its non-empty host and disk patterns
        both match; the datestamp component is not relevant here.

        Args:
            dumpspecs: List of Dumpspec

        Returns:
            Number of disks left scheduled
        """
        for disk in self._disks.values():
            disk.todo = False

        for ds in dumpspecs:
            matched = 0
            for disk in self._disks.values():
                if ds.host and not match_host(ds.host, disk.host):
                    continue
                if ds.disk and not match_disk(ds.disk, disk.name):
                    continue
                disk.todo = True
                matched += 1
            if matched == 0:
                logger.warning(f"Argument '{ds.host} {ds.disk}' matches no disk")

        return sum(1 for d in self._disks.values() if d.todo)

    def __iter__(self) -> Iterator[Disk]:
        return iter(self._disks.values())

    def __len__(self) -> int:
        return len(self._disks)
