"""Tests for catalog listing output."""

import io

from rich.console import Console

from tape_catalog.catalog import Catalog, FindResult
from tape_catalog.display import (
    NO_DUMP_MESSAGE,
    format_find_result,
    print_find_result,
    print_find_table,
)


def make_catalog(*results):
    catalog = Catalog()
    for result in reversed(results):
        catalog.prepend(result)
    return catalog


class TestFormatFindResult:
    """Tests for the fixed-width listing."""

    def test_empty(self):
        assert format_find_result(Catalog()) == "\nNo dump to list\n"
        assert NO_DUMP_MESSAGE == "\nNo dump to list\n"

    def test_single_record(self):
        """Columns are padded to their header or floor width."""
        catalog = make_catalog(FindResult("20230101", "host1", "/disk1", 0, "TAPE01", 1))
        header = "date" + " " * 7 + "host" + " " * 2 + "disk" + " " * 3 + "lv tape or file file part status"
        row = "2023-01-01 host1 /disk1  0 TAPE01" + " " * 10 + "1" + " " * 3 + "-- OK"
        assert format_find_result(catalog) == f"\n{header}\n{row}\n"

    def test_columns_aligned(self):
        """The status column starts at the same offset on every line."""
        catalog = make_catalog(
            FindResult("20230101", "host1", "/disk1", 0, "TAPE01", 1),
            FindResult("20230102123000", "longhostname", "/my disk", 1, "TAPE02", 12, "2", "PARTIAL"),
        )
        lines = format_find_result(catalog).splitlines()
        assert lines[0] == ""
        offset = lines[1].index("status")
        assert lines[2][offset:] == "OK"
        assert lines[3][offset:] == "PARTIAL"

    def test_disk_quoted(self):
        """Disk names with spaces are quoted."""
        catalog = make_catalog(FindResult("20230101", "host1", "/my disk", 0, "TAPE01", 1))
        assert '"/my disk"' in format_find_result(catalog)

    def test_failure_message_is_status(self):
        catalog = make_catalog(
            FindResult("20230101", "host1", "/disk1", 0, "TAPE01", 0, status="FAILED (dumper) [disk offline]"),
        )
        assert format_find_result(catalog).splitlines()[2].endswith(" FAILED (dumper) [disk offline]")


def test_print_find_result(capsys):
    print_find_result(Catalog())
    assert capsys.readouterr().out == NO_DUMP_MESSAGE


def test_print_find_table():
    """The Rich table shows every record."""
    out = io.StringIO()
    catalog = make_catalog(
        FindResult("20230101", "host1", "/disk1", 0, "TAPE01", 1),
        FindResult("20230101", "host2", "/home", 0, "TAPE01", 2, status="PARTIAL"),
    )
    print_find_table(catalog, Console(file=out, width=200))
    text = out.getvalue()
    assert "host1" in text
    assert "host2" in text
    assert "PARTIAL" in text
    assert "2 results" in text


def test_print_find_table_empty():
    out = io.StringIO()
    print_find_table(Catalog(), Console(file=out, width=200))
    assert "No dump to list" in out.getvalue()
