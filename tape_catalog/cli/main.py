"""Unified CLI entry point for the tape-catalog command."""

import click

from .find_cmd import find_cmd
from .holding_cmd import holding_cmd
from .logs_cmd import logs_cmd


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="tape-catalog")
def tape_catalog_cli():
    """Backup catalog toolkit.

    Rebuild the list of dumps from per-tape run logs and the holding disk,
    and select dumps by host, disk and datestamp.

    \b
    Examples:
      tape-catalog find host1 /home          # dumps of /home on host1
      tape-catalog logs                      # run logs of the current tapes
      tape-catalog holding host1             # host1 dumps awaiting a flush

    \b
    For help on a specific command:
      tape-catalog find --help
    """
    pass


# Register subcommands
tape_catalog_cli.add_command(find_cmd, name="find")
tape_catalog_cli.add_command(logs_cmd, name="logs")
tape_catalog_cli.add_command(holding_cmd, name="holding")


if __name__ == "__main__":
    tape_catalog_cli()
