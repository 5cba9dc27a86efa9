"""Display and output formatting for catalog results.

The plain listing keeps the classic column layout so scripts can parse it;
the Rich table is for interactive use.
"""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .catalog import STATUS_OK, STATUS_PARTIAL, Catalog
from .find import find_nicedate
from .quoting import quote_string

NO_DUMP_MESSAGE = "\nNo dump to list\n"

# (header, minimum width) per column; status is last and never padded
_COLUMNS = (
    ("date", 4),
    ("host", 4),
    ("disk", 4),
    ("lv", 2),
    ("tape or file", 12),
    ("file", 4),
    ("part", 4),
)


def _rows(catalog: Catalog) -> list[tuple[str, ...]]:
    return [
        (
            find_nicedate(r.timestamp),
            r.hostname,
            quote_string(r.diskname),
            str(r.level),
            r.label,
            str(r.filenum),
            r.partnum,
            r.status,
        )
        for r in catalog
    ]


def format_find_result(catalog: Catalog) -> str:
    """Render a catalog as a fixed-width listing, one line per record."""
    if not catalog:
        return NO_DUMP_MESSAGE

    rows = _rows(catalog)
    widths = [
        max([floor, len(header)] + [len(row[i]) for row in rows])
        for i, (header, floor) in enumerate(_COLUMNS)
    ]

    header = " ".join(h.ljust(w) for (h, _), w in zip(_COLUMNS, widths)) + " status"
    lines = ["", header]
    for row in rows:
        date, host, disk, level, label, filenum, part, status = row
        lines.append(" ".join([
            date.ljust(widths[0]),
            host.ljust(widths[1]),
            disk.ljust(widths[2]),
            level.rjust(widths[3]),
            label.ljust(widths[4]),
            filenum.rjust(widths[5]),
            part.rjust(widths[6]),
            status,
        ]))
    return "\n".join(lines) + "\n"


def print_find_result(catalog: Catalog) -> None:
    """Print the fixed-width listing to standard output."""
    click.echo(format_find_result(catalog), nl=False)


def _status_markup(status: str) -> str:
    if status == STATUS_OK:
        return f"[green]{status}[/green]"
    if status == STATUS_PARTIAL:
        return f"[yellow]{status}[/yellow]"
    return f"[red]{escape(status)}[/red]"


def print_find_table(catalog: Catalog, console: Console | None = None) -> None:
    """Print the catalog as a Rich table."""
    console = console or Console()
    if not catalog:
        console.print("[yellow]No dump to list[/yellow]")
        return

    table = Table(title=f"Dumps ({len(catalog)} results)")
    table.add_column("Date", no_wrap=True)
    table.add_column("Host", style="cyan")
    table.add_column("Disk", style="cyan")
    table.add_column("Lv", justify="right")
    table.add_column("Tape or file")
    table.add_column("File", justify="right")
    table.add_column("Part", justify="right")
    table.add_column("Status")

    for date, host, disk, level, label, filenum, part, status in _rows(catalog):
        table.add_row(
            date, escape(host), escape(disk), level, escape(label), filenum, part,
            _status_markup(status),
        )

    console.print(table)
