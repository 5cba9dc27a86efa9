"""In-memory catalog of reconstructed dump attempts.

A Catalog is the single owning collection of one catalog-build run. Records
are added at the head, so until the catalog is sorted the most recently
scanned dumps come first.
"""

from collections import deque
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable, Iterator

from .match import match_datestamp, match_disk, match_host, match_level
from .utils import atoi

# partnum of a dump that was written as a single piece
WHOLE_DUMP = "--"

STATUS_OK = "OK"
STATUS_PARTIAL = "PARTIAL"


@dataclass
class FindResult:
    """One dump (or one part of a dump) found in the logs or on holding disk."""

    timestamp: str
    """Datestamp of the run, YYYYMMDD or YYYYMMDDHHMMSS."""

    hostname: str
    diskname: str
    level: int
    label: str
    """Tape label, or holding-disk file path for dumps not yet on tape."""

    filenum: int = 0
    """Position of the file on the tape; 0 for holding files and non-taper failures."""

    partnum: str = WHOLE_DUMP
    status: str = STATUS_OK
    """OK, PARTIAL, "FAILED (<program>) <reason>", or a failure text from the log."""


class Catalog:
    """Owning collection of FindResult records."""

    def __init__(self, results: Iterable[FindResult] = ()):
        self._results: deque[FindResult] = deque(results)

    def prepend(self, result: FindResult) -> None:
        """Add one record at the head."""
        self._results.appendleft(result)

    def prepend_many(self, results: Iterable[FindResult]) -> None:
        """Add records at the head, each ahead of the one before it."""
        self._results.extendleft(results)

    def splice(self, parts: list[FindResult]) -> None:
        """Move a pending part list onto the head.

        ``parts`` is in arrival order; the last part received ends up first,
        ahead of every record already in the catalog.
        """
        self._results.extendleft(parts)
        parts.clear()

    def __iter__(self) -> Iterator[FindResult]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __getitem__(self, index: int) -> FindResult:
        return self._results[index]

    def __bool__(self) -> bool:
        return bool(self._results)

    def __repr__(self) -> str:
        return f"Catalog({len(self._results)} results)"

    def sort(self, sort_order: str) -> None:
        """Reorder in place; see sort_find_result()."""
        key = cmp_to_key(FindSortOrder(sort_order).compare)
        self._results = deque(sorted(self._results, key=key))

    def match(self, hostname=None, diskname=None, datestamp=None, level=None, ok=False) -> "Catalog":
        return dumps_match(self, hostname, diskname, datestamp, level, ok)

    def exists(self, hostname: str, diskname: str, datestamp: str, level: int) -> FindResult | None:
        return dump_exist(self, hostname, diskname, datestamp, level)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _compare_partnum(a: str, b: str) -> int:
    if a != WHOLE_DUMP and b != WHOLE_DUMP:
        return _cmp(atoi(a), atoi(b))
    return _cmp(a, b)


# Lowercase is ascending for every key except level, where "l" puts the
# highest level first and "L" the lowest.
_COMPARATORS = {
    "h": lambda i, j: _cmp(i.hostname, j.hostname),
    "k": lambda i, j: _cmp(i.diskname, j.diskname),
    "d": lambda i, j: _cmp(i.timestamp, j.timestamp),
    "l": lambda i, j: j.level - i.level,
    "b": lambda i, j: _cmp(i.label, j.label),
    "f": lambda i, j: _cmp(i.filenum, j.filenum),
    "p": lambda i, j: _compare_partnum(i.partnum, j.partnum),
}


class FindSortOrder:
    """Composite comparator built from an order string such as ``"hkdlpbf"``.

    Each letter selects a key; upper case reverses that key's direction.
    Keys are tried left to right and the first non-zero comparison wins.
    Unknown letters are ignored.
    """

    def __init__(self, order: str):
        self.order = order
        self._keys = []
        for letter in order:
            cmp = _COMPARATORS.get(letter.lower())
            if cmp is None:
                continue
            self._keys.append((cmp, letter.isupper()))

    def compare(self, i: FindResult, j: FindResult) -> int:
        for cmp, reverse in self._keys:
            result = cmp(j, i) if reverse else cmp(i, j)
            if result != 0:
                return result
        return 0


def sort_find_result(sort_order: str, catalog: Catalog) -> None:
    """Stable multi-key sort of a catalog.

    Args:
        sort_order: Key letters, leftmost has the highest priority:
            h/H host, k/K disk, d/D datestamp, l/L level (l is descending),
            b/B label, f/F filenum, p/P partnum
        catalog: Catalog to reorder in place; an empty catalog is left alone
    """
    if not catalog:
        return
    catalog.sort(sort_order)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def _result_matches(result: FindResult, hostname, diskname, datestamp, level, ok) -> bool:
    if hostname and not match_host(hostname, result.hostname):
        return False
    if diskname and not match_disk(diskname, result.diskname):
        return False
    if datestamp and not match_datestamp(datestamp, result.timestamp):
        return False
    if level and not match_level(level, str(result.level)):
        return False
    if ok and result.status != STATUS_OK:
        return False
    return True


def dumps_match(
    catalog: Iterable[FindResult],
    hostname: str | None = None,
    diskname: str | None = None,
    datestamp: str | None = None,
    level: str | None = None,
    ok: bool = False,
) -> Catalog:
    """Return the records matching every given pattern.

    Empty or None patterns match anything. The returned catalog has its own
    ordering but shares the FindResult objects with the source.

    Args:
        catalog: Records to filter
        hostname: Host pattern
        diskname: Disk pattern
        datestamp: Datestamp pattern
        level: Level pattern, matched against the decimal level
        ok: Only keep records whose status is exactly "OK"

    Returns:
        New Catalog in source order
    """
    return Catalog(
        r for r in catalog
        if _result_matches(r, hostname, diskname, datestamp, level, ok)
    )


def dumps_match_dumpspec(catalog: Iterable[FindResult], dumpspecs, ok: bool = False) -> Catalog:
    """Return the records selected by any dumpspec of a list."""
    return Catalog(
        r for r in catalog
        if any(_result_matches(r, ds.host, ds.disk, ds.datestamp, None, ok) for ds in dumpspecs)
    )


def dump_exist(
    catalog: Iterable[FindResult],
    hostname: str,
    diskname: str,
    datestamp: str,
    level: int,
) -> FindResult | None:
    """Return the first record with exactly these host, disk, datestamp and level."""
    for result in catalog:
        if (result.hostname == hostname
                and result.diskname == diskname
                and result.timestamp == datestamp
                and result.level == level):
            return result
    return None
