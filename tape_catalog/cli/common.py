"""Shared CLI utilities for tape-catalog commands.

Provides:
- Console output and logging setup
- Common CLI option decorators
- Loading of the tape and disk inventories from configuration
"""

import logging
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.logging import RichHandler

from ..config import CatalogConfig
from ..dumpspec import Dumpspec, parse_dumpspecs
from ..errors import CatalogError
from ..holding import HoldingStore
from ..inventory import DiskList, TapeList

# Shared console instance for all CLI output
console = Console()

# Diagnostics go to standard error so listings stay parseable
err_console = Console(stderr=True)

SORT_LETTERS = frozenset("hkdlpbfHKDLPBF")


def setup_logging(verbosity: int) -> None:
    """Route library diagnostics through Rich on standard error."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )


def fail(ctx: click.Context, error: Exception) -> None:
    """Report an error prefixed with the program name and exit non-zero."""
    click.echo(f"{ctx.find_root().info_name}: {error}", err=True)
    ctx.exit(1)


def validate_sort_order(ctx, param, value: str) -> str:
    """Click callback: every letter must select a sort key."""
    bad = sorted(set(value) - SORT_LETTERS)
    if bad:
        raise click.BadParameter(
            f"invalid sort key(s) {''.join(bad)!r}; use letters from hkdlpbf (upper case reverses)"
        )
    return value


def config_options() -> Callable:
    """Decorator that adds the configuration location options."""
    def decorator(func):
        func = click.option(
            "--config-dir",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Configuration directory (or set TAPE_CATALOG_CONFIG_DIR)",
        )(func)
        func = click.option(
            "--logdir",
            type=str,
            default=None,
            help="Run log directory, relative to the config dir unless absolute",
        )(func)
        func = click.option(
            "--tapelist",
            type=str,
            default=None,
            help="Tapelist file, relative to the config dir unless absolute",
        )(func)
        func = click.option(
            "--disklist",
            type=str,
            default=None,
            help="Disklist file, relative to the config dir unless absolute",
        )(func)
        func = click.option(
            "--holding-dir",
            "holding_dirs",
            multiple=True,
            type=click.Path(path_type=Path),
            help="Holding directory (can be repeated)",
        )(func)
        func = click.option(
            "-v", "--verbose",
            count=True,
            help="Show progress (-v) or debugging (-vv) diagnostics",
        )(func)
        return func
    return decorator


class Settings:
    """Configuration values after command-line overrides."""

    def __init__(self, config_dir=None, logdir=None, tapelist=None, disklist=None, holding_dirs=()):
        base = config_dir if config_dir is not None else CatalogConfig.CONFIG_DIR
        self.log_dir = CatalogConfig.resolve_path(logdir or CatalogConfig.LOG_DIR, base)
        self.tapelist = CatalogConfig.resolve_path(tapelist or CatalogConfig.TAPELIST, base)
        self.disklist = CatalogConfig.resolve_path(disklist or CatalogConfig.DISKLIST, base)
        dirs = list(holding_dirs) or CatalogConfig.HOLDING_DIRS
        self.holding_dirs = [CatalogConfig.resolve_path(d, base) for d in dirs]

    def load_tapelist(self) -> TapeList:
        return TapeList.from_file(self.tapelist)

    def load_disklist(self, dynamic: bool = False) -> DiskList:
        """Load the disklist; in dynamic mode a missing file means an empty inventory."""
        if dynamic and not self.disklist.exists():
            return DiskList()
        return DiskList.from_file(self.disklist)

    def holding_store(self) -> HoldingStore:
        return HoldingStore(self.holding_dirs)


def parse_dumpspec_args(ctx: click.Context, args) -> list[Dumpspec]:
    try:
        return parse_dumpspecs(list(args))
    except CatalogError as e:
        fail(ctx, e)
