#!/usr/bin/env python3
"""tape-catalog-find: the dump listing on its own.

Equivalent to ``tape-catalog find ARGS...``, for installs that only hand out
the read-only listing to operators.
"""

import sys


def main():
    from tape_catalog.cli.main import tape_catalog_cli

    # usage lines and errors name this tool, not the group
    sys.argv[0] = "tape-catalog-find"
    sys.argv.insert(1, "find")
    tape_catalog_cli()


if __name__ == "__main__":
    main()
