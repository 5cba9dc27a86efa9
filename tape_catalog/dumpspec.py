"""Dumpspecs: (host, disk, datestamp) pattern triples from the command line.

Command arguments are read in groups of three::

    [host [disk [datestamp [host [disk [datestamp ...]]]]]]

An empty component matches anything. With no arguments at all the result is
the wildcard list, a single dumpspec whose components are all empty.
"""

import logging
import string
from dataclasses import dataclass
from typing import Sequence

from .errors import DumpspecParseError
from .holding import HoldingStore
from .match import match_datestamp, match_disk, match_host, validate_pattern

logger = logging.getLogger(__name__)

_FIELDS = ("hostname", "diskname", "datestamp")

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "./")


@dataclass(frozen=True)
class Dumpspec:
    """Selects the dumps whose host, disk and datestamp match the patterns."""

    host: str = ""
    disk: str = ""
    datestamp: str = ""

    def __str__(self) -> str:
        return format_dumpspec(self) or ""


def parse_dumpspecs(args: Sequence[str]) -> list[Dumpspec]:
    """Parse a flat argument list into dumpspecs.

    Args:
        args: Arguments in host, disk, datestamp order, repeating

    Returns:
        List of Dumpspec; the wildcard list if ``args`` is empty

    Raises:
        DumpspecParseError: If a non-empty argument is not a valid pattern
    """
    specs = []
    for start in range(0, len(args), 3):
        group = list(args[start:start + 3])
        for field, token in zip(_FIELDS, group):
            if token == "":
                continue
            error = validate_pattern(token)
            if error is not None:
                raise DumpspecParseError(field, token, error)
        group += [""] * (3 - len(group))
        specs.append(Dumpspec(*group))

    if not specs:
        specs.append(Dumpspec("", "", ""))
    return specs


def quote_dumpspec_string(s: str) -> str:
    """Quote a component for the shell, conservatively.

    Anything but letters, digits, ``.`` and ``/`` triggers single quotes;
    single quotes and backslashes inside are backslash-escaped.
    """
    escaped = s.replace("\\", "\\\\").replace("'", "\\'")
    if all(ch in _SAFE_CHARS for ch in s):
        return escaped
    return f"'{escaped}'"


def format_dumpspec_components(host: str | None, disk: str | None, datestamp: str | None) -> str | None:
    """Render components as a shell-safe string.

    A component is only shown if every component before it is present:
    without a host nothing is shown, and without a disk the datestamp is
    dropped.

    Returns:
        The quoted components joined by spaces, or None if host is None
    """
    if host is None:
        return None
    parts = [quote_dumpspec_string(host)]
    if disk is not None:
        parts.append(quote_dumpspec_string(disk))
        if datestamp is not None:
            parts.append(quote_dumpspec_string(datestamp))
    return " ".join(parts)


def format_dumpspec(dumpspec: Dumpspec | None) -> str | None:
    if dumpspec is None:
        return None
    return format_dumpspec_components(dumpspec.host, dumpspec.disk, dumpspec.datestamp)


def is_wildcard(dumpspecs: Sequence[Dumpspec] | None) -> bool:
    """True for the list parse_dumpspecs() returns when given no arguments."""
    if not dumpspecs or len(dumpspecs) != 1:
        return False
    ds = dumpspecs[0]
    return ds.host == "" and ds.disk == "" and ds.datestamp == ""


def match_holding(dumpspecs: Sequence[Dumpspec], store: HoldingStore) -> list[str]:
    """Find the holding files selected by any dumpspec.

    Args:
        dumpspecs: Dumpspec list; the wildcard list selects every file
        store: Holding directories to enumerate

    Returns:
        Matching holding file paths, in enumeration order
    """
    matching = []
    for path, header in store.iter_holding_dumps():
        for ds in dumpspecs:
            if ds.host and not match_host(ds.host, header.host):
                continue
            if ds.disk and not match_disk(ds.disk, header.disk):
                continue
            if ds.datestamp and not match_datestamp(ds.datestamp, header.datestamp):
                continue
            matching.append(path)
            break
    logger.debug(f"{len(matching)} holding files match")
    return matching
