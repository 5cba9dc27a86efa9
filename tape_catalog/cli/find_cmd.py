"""Find subcommand: list the dumps recorded in the run logs."""

import click

from ..catalog import dumps_match, dumps_match_dumpspec, sort_find_result
from ..config import CatalogConfig
from ..display import print_find_result, print_find_table
from ..dumpspec import is_wildcard
from ..errors import CatalogError
from ..find import find_dump
from .common import (
    Settings,
    config_options,
    console,
    fail,
    parse_dumpspec_args,
    setup_logging,
    validate_sort_order,
)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("dumpspec", nargs=-1)
@click.option(
    "-s", "--sort",
    "sort_order",
    default=CatalogConfig.SORT_ORDER,
    show_default=True,
    callback=validate_sort_order,
    help="Sort keys: h host, k disk, d date, l level, b label, f file, p part; upper case reverses",
)
@click.option("--ok-only", is_flag=True, help="Only list dumps with status OK")
@click.option("--level", "level_pattern", type=str, help="Only list levels matching this pattern (e.g. 0, 1-3, 2+)")
@click.option("--no-holding", is_flag=True, help="Skip dumps still on holding disk")
@click.option(
    "--dynamic-disklist/--no-dynamic-disklist",
    default=CatalogConfig.DYNAMIC_DISKLIST,
    help="Include disks found in the logs but missing from the disklist",
)
@click.option("--rich", "use_rich", is_flag=True, help="Render a Rich table instead of the plain listing")
@config_options()
@click.pass_context
def find_cmd(ctx, dumpspec, sort_order, ok_only, level_pattern, no_holding, dynamic_disklist,
             use_rich, config_dir, logdir, tapelist, disklist, holding_dirs, verbose):
    """List dumps selected by DUMPSPEC ([host [disk [datestamp]]] ...).

    \b
    Examples:
      tape-catalog find                      # every dump
      tape-catalog find host1                # every dump of host1
      tape-catalog find host1 /var 2023      # /var on host1 during 2023
      tape-catalog find -s Dhk --ok-only     # newest first, successful only
    """
    setup_logging(verbose)
    specs = parse_dumpspec_args(ctx, dumpspec)
    settings = Settings(config_dir, logdir, tapelist, disklist, holding_dirs)
    wildcard = is_wildcard(specs)

    try:
        tapes = settings.load_tapelist()
        disks = settings.load_disklist(dynamic=dynamic_disklist)
        if not wildcard:
            disks.match_disklist(specs)

        catalog = find_dump(
            settings.log_dir, tapes, disks,
            holding=None if no_holding else settings.holding_store(),
            dynamic_disklist=dynamic_disklist,
        )
    except CatalogError as e:
        fail(ctx, e)

    if not wildcard:
        catalog = dumps_match_dumpspec(catalog, specs, ok=ok_only)
    elif ok_only:
        catalog = dumps_match(catalog, ok=True)
    if level_pattern:
        catalog = dumps_match(catalog, level=level_pattern)

    sort_find_result(sort_order, catalog)

    if use_rich:
        print_find_table(catalog, console)
    else:
        print_find_result(catalog)
