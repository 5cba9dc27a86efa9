"""Holding subcommand: list holding-disk files selected by dumpspecs."""

import click

from ..dumpspec import format_dumpspec, match_holding
from .common import Settings, config_options, parse_dumpspec_args, setup_logging


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("dumpspec", nargs=-1)
@config_options()
@click.pass_context
def holding_cmd(ctx, dumpspec, config_dir, logdir, tapelist, disklist, holding_dirs, verbose):
    """Print the holding files selected by DUMPSPEC ([host [disk [datestamp]]] ...)."""
    setup_logging(verbose)
    specs = parse_dumpspec_args(ctx, dumpspec)
    settings = Settings(config_dir, logdir, tapelist, disklist, holding_dirs)

    if verbose:
        for ds in specs:
            click.echo(f"selecting: {format_dumpspec(ds)}", err=True)

    for path in match_holding(specs, settings.holding_store()):
        click.echo(path)
