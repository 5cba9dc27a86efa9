"""Logs subcommand: list the run logs describing the tapes in the tapelist."""

import click

from ..errors import CatalogError
from ..find import find_log
from .common import Settings, config_options, fail, setup_logging


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@config_options()
@click.pass_context
def logs_cmd(ctx, config_dir, logdir, tapelist, disklist, holding_dirs, verbose):
    """Print the name of every run log that belongs to a tape."""
    setup_logging(verbose)
    settings = Settings(config_dir, logdir, tapelist, disklist, holding_dirs)
    try:
        names = find_log(settings.log_dir, settings.load_tapelist())
    except CatalogError as e:
        fail(ctx, e)

    for name in names:
        click.echo(name)
