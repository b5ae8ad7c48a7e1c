from __future__ import annotations

from itertools import zip_longest

_REGEXP_DOUBLE_ESCAPED = frozenset("*?.()^$|")
_UNESCAPES = {"n": "\n", "t": "\t", "\\": "\\", "'": "'", '"': '"'}


def _quote_char(value: str) -> str:
    if "'" not in value:
        return "'"
    if '"' not in value:
        return '"'
    # Both quote characters present: single quotes, escaped.
    return "'"


def quote(value: str | None) -> str | None:
    """Quote a value for use in a path expression or as a ``set`` argument."""
    if value is None:
        return None
    quote_char = _quote_char(value)
    parts = [quote_char]
    for char in value:
        if char == quote_char:
            parts.append("\\" + quote_char)
        elif char == "\n":
            parts.append("\\n")
        elif char == "\t":
            parts.append("\\t")
        elif char == "\\":
            parts.append("\\\\")
        else:
            parts.append(char)
    parts.append(quote_char)
    return "".join(parts)


def unquote(text: str | None) -> str | None:
    if text is None:
        return None
    if len(text) < 2 or text[0] not in "'\"" or text[-1] != text[0]:
        raise ValueError(f"not a quoted value: {text!r}")
    body = text[1:-1]
    parts: list[str] = []
    idx = 0
    while idx < len(body):
        char = body[idx]
        if char == "\\" and idx + 1 < len(body):
            escaped = body[idx + 1]
            parts.append(_UNESCAPES.get(escaped, "\\" + escaped))
            idx += 2
            continue
        parts.append(char)
        idx += 1
    return "".join(parts)


def regexp(value: str | None, min_len: int) -> str | None:
    """Build a quoted regexp matching ``value``.

    The literal is cut after the character at index ``min_len`` and followed
    by ``.*``, unless fewer than three characters would be dropped. ``]`` and
    backslash become ``.`` because a label cannot hold a literal ``]``.
    """
    if value is None:
        return None
    quote_char = _quote_char(value)
    length = len(value)
    parts = [quote_char]
    for idx, char in enumerate(value):
        if char == quote_char:
            parts.append("\\" + quote_char)
            continue
        if char == "\n":
            parts.append("\\n")
            continue
        if char == "\t":
            parts.append("\\t")
            continue
        if char in "\\]":
            parts.append(".")
            continue
        if char == "[":
            parts.append("\\[")
        elif char in _REGEXP_DOUBLE_ESCAPED:
            parts.append("\\\\" + char)
        else:
            parts.append(char)
        if idx >= min_len and idx + 3 < length:
            parts.append(".*")
            break
    parts.append(quote_char)
    return "".join(parts)


def value_cmp(
    left: str | None,
    right: str | None,
    use_regexp: bool = False,
) -> tuple[bool, int]:
    """Compare two values, returning (equal, length of the common run).

    In regexp mode a ``]`` on either side matches any character, since it is
    rendered as ``.`` by :func:`regexp`.
    """
    if left is None and right is None:
        return True, 0
    if left is None or right is None:
        return False, 0
    matched = 0
    if use_regexp:
        for left_char, right_char in zip_longest(left, right):
            if left_char != right_char:
                if left_char is None or right_char is None:
                    return False, matched
                if left_char != "]" and right_char != "]":
                    return False, matched
            matched += 1
        return True, matched
    for left_char, right_char in zip(left, right):
        if left_char != right_char:
            return False, matched
        matched += 1
    return len(left) == len(right), matched
