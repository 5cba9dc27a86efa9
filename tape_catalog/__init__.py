"""tape_catalog - rebuild the catalog of backup dumps from run logs."""

from .catalog import (
    Catalog,
    FindResult,
    FindSortOrder,
    dump_exist,
    dumps_match,
    dumps_match_dumpspec,
    sort_find_result,
)
from .config import CatalogConfig
from .dumpspec import (
    Dumpspec,
    format_dumpspec,
    format_dumpspec_components,
    is_wildcard,
    match_holding,
    parse_dumpspecs,
)
from .errors import CatalogError, DumpspecParseError, InventoryError, LogFileOpenError
from .find import find_dump, find_log, find_nicedate
from .holding import HoldingStore, search_holding_disk
from .inventory import Disk, DiskList, TapeEntry, TapeList
from .logscan import DumpRecordReconstructor, scan_logfile, search_logfile

__all__ = [
    "Catalog",
    "CatalogConfig",
    "CatalogError",
    "Disk",
    "DiskList",
    "DumpRecordReconstructor",
    "Dumpspec",
    "DumpspecParseError",
    "FindResult",
    "FindSortOrder",
    "HoldingStore",
    "InventoryError",
    "LogFileOpenError",
    "TapeEntry",
    "TapeList",
    "dump_exist",
    "dumps_match",
    "dumps_match_dumpspec",
    "find_dump",
    "find_log",
    "find_nicedate",
    "format_dumpspec",
    "format_dumpspec_components",
    "is_wildcard",
    "match_holding",
    "parse_dumpspecs",
    "scan_logfile",
    "search_holding_disk",
    "search_logfile",
    "sort_find_result",
]
