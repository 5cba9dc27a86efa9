"""Quoted-string primitives for log and disklist lines.

Disk names are written to log files double-quoted whenever they contain
whitespace or other characters that would break whitespace tokenization.
These helpers split such lines into tokens and undo the quoting.
"""

from typing import Iterator

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
}

_UNESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "f": "\f",
}


def _needs_quotes(s: str) -> bool:
    if not s:
        return True
    for ch in s:
        if ch.isspace() or ch in '"\\' or not ch.isprintable():
            return True
    return False


def quote_string(s: str) -> str:
    """Double-quote a string if it would not survive whitespace tokenization.

    Examples:
        >>> quote_string("/usr")
        '/usr'
        >>> quote_string("/my disk")
        '"/my disk"'
        >>> quote_string("")
        '""'
    """
    if not _needs_quotes(s):
        return s
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in s) + '"'


def unquote_string(s: str) -> str:
    """Undo quote_string().

    Strings without double quotes are returned unchanged. Backslash escapes
    are decoded, including three-digit octal escapes (``\\040``).
    """
    if '"' not in s and "\\" not in s:
        return s

    out = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        if ch == '"':
            i += 1
            continue
        if ch == "\\" and i + 1 < n:
            nxt = s[i + 1]
            octal = s[i + 1:i + 4]
            if len(octal) == 3 and all(c in "01234567" for c in octal):
                out.append(chr(int(octal, 8)))
                i += 4
                continue
            out.append(_UNESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def split_quoted_strings(line: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) slices of the whitespace-separated tokens of a line.

    A double quote opens a run in which whitespace does not end the token;
    a backslash inside quotes escapes the next character. Tokens are returned
    as slice bounds so callers can take both the token and the remainder of
    the line without copying.
    """
    i = 0
    n = len(line)
    while i < n:
        while i < n and line[i].isspace():
            i += 1
        if i >= n:
            return
        start = i
        in_quote = False
        while i < n:
            ch = line[i]
            if in_quote:
                if ch == "\\" and i + 1 < n:
                    i += 2
                    continue
                if ch == '"':
                    in_quote = False
            elif ch == '"':
                in_quote = True
            elif ch.isspace():
                break
            i += 1
        yield start, i
