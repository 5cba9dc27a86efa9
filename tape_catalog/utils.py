"""Shared utility functions for tape_catalog."""

import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def atoi(s: str) -> int:
    """Convert the leading integer of a string, 0 if there is none.

    Examples:
        >>> atoi("3/10")
        3
        >>> atoi("--")
        0
    """
    match = _LEADING_INT.match(s)
    return int(match.group(1)) if match else 0


def leading_int(s: str) -> int | None:
    """Like atoi() but None when the string does not start with a number."""
    match = _LEADING_INT.match(s)
    return int(match.group(1)) if match else None
