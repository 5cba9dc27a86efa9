"""Pattern predicates for host, disk, datestamp and level selection.

Host and disk patterns are shell-style globs matched against the words of a
name: hostnames are split on ``.`` and disk names on ``/``. A pattern matches
when it lines up with a run of whole words, so ``host1`` selects
``host1.example.com`` but not ``host10``. A leading ``^`` or trailing ``$``
pins the pattern to the start or end of the name, and a leading ``=``
requires an exact match.

Datestamp and level patterns are prefix matches with range extensions.
"""

import re
from functools import lru_cache


def _glob_to_regex(pattern: str, sep: str) -> str:
    """Translate a glob into a regex body whose wildcards stop at ``sep``."""
    not_sep = f"[^{re.escape(sep)}]"
    out = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            out.append(not_sep + "*")
        elif ch == "?":
            out.append(not_sep)
        elif ch == "[":
            j = pattern.find("]", i + 1)
            if j == -1:
                # left unbalanced so the regex compiler reports it
                out.append("[")
            else:
                body = pattern[i + 1:j]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = j + 1
                continue
        elif ch == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)


def validate_pattern(pattern: str) -> str | None:
    """Check that a pattern is a well-formed glob.

    The pattern is compiled in the form the matchers use, so only glob
    syntax errors count: ``host(`` is a literal and valid, ``h[1`` is not.

    Args:
        pattern: Host, disk or datestamp pattern

    Returns:
        None if the pattern compiles, otherwise the compiler's diagnostic
    """
    try:
        re.compile(_glob_to_regex(pattern, "."))
    except re.error as e:
        return str(e)
    return None


@lru_cache(maxsize=256)
def _compile_word_pattern(pattern: str, sep: str, ignore_case: bool) -> re.Pattern:
    lead = "^"
    trail = "$"
    if pattern.startswith("^"):
        pattern = pattern[1:]
    else:
        lead = f"(?:^|{re.escape(sep)})"
    if pattern.endswith("$") and not pattern.endswith("\\$"):
        pattern = pattern[:-1]
    else:
        trail = f"(?:{re.escape(sep)}|$)"

    flags = re.IGNORECASE if ignore_case else 0
    return re.compile(lead + _glob_to_regex(pattern, sep) + trail, flags)


def _match_word(pattern: str, word: str, sep: str, ignore_case: bool) -> bool:
    if pattern.startswith("="):
        if ignore_case:
            return pattern[1:].lower() == word.lower()
        return pattern[1:] == word

    # a bare separator only selects the root itself
    if pattern == sep:
        return word == sep

    try:
        regex = _compile_word_pattern(pattern, sep, ignore_case)
    except re.error:
        return False
    return regex.search(word) is not None


def match_host(pattern: str, host: str) -> bool:
    """Match a hostname against a host pattern (case-insensitive)."""
    return _match_word(pattern, host, ".", ignore_case=True)


def match_disk(pattern: str, disk: str) -> bool:
    """Match a disk name or mount point against a disk pattern."""
    return _match_word(pattern, disk, "/", ignore_case=False)


def match_datestamp(pattern: str, datestamp: str) -> bool:
    """Match a dump datestamp.

    Examples:
        >>> match_datestamp("202301", "20230115")
        True
        >>> match_datestamp("20230101-05", "20230103")
        True
        >>> match_datestamp("20230101$", "20230101120000")
        False
    """
    if pattern.startswith("^"):
        pattern = pattern[1:]

    if "-" in pattern:
        first, last = pattern.split("-", 1)
        # "20230101-05" is shorthand for "20230101-20230105"
        if len(last) < len(first):
            last = first[:len(first) - len(last)] + last
        return (datestamp[:len(first)] >= first
                and datestamp[:len(last)] <= last)

    if pattern.endswith("$"):
        return datestamp == pattern[:-1]
    return datestamp.startswith(pattern)


def match_level(pattern: str, level: str) -> bool:
    """Match a dump level rendered as a decimal string.

    Supports ``N`` (prefix), ``N$`` (exact), ``N-M`` (inclusive range) and
    ``N+`` (N or higher).
    """
    try:
        if pattern.endswith("+"):
            return int(level) >= int(pattern[:-1])
        if "-" in pattern:
            low, high = pattern.split("-", 1)
            return int(low) <= int(level) <= int(high)
    except ValueError:
        return False

    if pattern.endswith("$"):
        return level == pattern[:-1]
    return level.startswith(pattern)
