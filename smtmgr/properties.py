"""Reader and writer for Java ``.properties`` files.

KeY keeps its settings in this format. Only what Java's
``Properties.load``/``Properties.store`` round-trip is supported: comments,
``=``/``:``/whitespace separators, backslash line continuations and the
``\\t \\n \\r \\f \\uXXXX`` escapes.
"""

import time

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_UNESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_SEPARATORS = "=:"
_WHITESPACE = " \t\f"
_HEX_DIGITS = "0123456789abcdefABCDEF"


def _logical_lines(text: str):
    """Yield logical lines, joining backslash-continued natural lines."""
    pending = None
    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE) if pending is not None else raw
        if pending is None:
            stripped = line.lstrip(_WHITESPACE)
            if not stripped or stripped[0] in "#!":
                continue
            line = stripped

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue
        yield (pending or "") + line
        pending = None
    if pending is not None:
        yield pending


def _unescape(text: str) -> str:
    result = []
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if char != "\\" or i + 1 >= n:
            result.append(char)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u":
            digits = text[i + 2:i + 6]
            if len(digits) != 4 or any(c not in _HEX_DIGITS for c in digits):
                raise ValueError(f"Malformed \\uxxxx encoding in {text!r}")
            result.append(chr(int(digits, 16)))
            i += 6
            continue
        result.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(result)


def _split_pair(line: str) -> tuple[str, str]:
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        i += 1
    key = line[:i]

    # whitespace, at most one separator, whitespace
    while i < n and line[i] in _WHITESPACE:
        i += 1
    if i < n and line[i] in _SEPARATORS:
        i += 1
    while i < n and line[i] in _WHITESPACE:
        i += 1
    return _unescape(key), _unescape(line[i:])


def loads(text: str) -> dict[str, str]:
    """Parse properties text into an ordered dict."""
    props = {}
    for line in _logical_lines(text):
        key, value = _split_pair(line)
        props[key] = value
    return props


def _escape(text: str, is_key: bool) -> str:
    out = []
    for i, char in enumerate(text):
        if char == " ":
            out.append("\\ " if is_key or i == 0 else " ")
        elif char == "\\":
            out.append("\\\\")
        elif char in _UNESCAPES:
            out.append(_UNESCAPES[char])
        elif char in "=:#!":
            out.append("\\" + char)
        elif ord(char) < 0x20 or ord(char) > 0x7E:
            out.append(f"\\u{ord(char):04X}")
        else:
            out.append(char)
    return "".join(out)


def dumps(props: dict[str, str], comment: str | None = None) -> str:
    """Serialize properties the way ``Properties.store`` does."""
    lines = []
    if comment is not None:
        lines.append(f"#{comment}")
    lines.append("#" + time.strftime("%a %b %d %H:%M:%S %Z %Y"))
    for key, value in props.items():
        lines.append(f"{_escape(key, True)}={_escape(value, False)}")
    return "\n".join(lines) + "\n"


__all__ = ["loads", "dumps"]
