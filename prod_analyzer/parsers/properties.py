"""Java ``.properties`` normalizer."""

from __future__ import annotations

from typing import List, Tuple

from ..entry import ConfigEntry

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "f": "\f"}
_SEPARATORS = "=:"
_COMMENT_PREFIXES = "#!"


def parse_properties(content: str, source_file: str) -> List[ConfigEntry]:
    """Parse ``key=value`` / ``key: value`` lines into lower-case entries.

    A trailing unescaped backslash joins the next line; the entry keeps the
    line number where it started.
    """

    entries: List[ConfigEntry] = []
    lines = content.splitlines()
    index = 0
    while index < len(lines):
        line_number = index + 1
        logical = lines[index].lstrip()
        index += 1
        if not logical or logical[0] in _COMMENT_PREFIXES:
            continue
        while _continues(logical):
            logical = logical[:-1]
            if index >= len(lines):
                break
            logical += lines[index].lstrip()
            index += 1

        raw_key, raw_value = _split_line(logical)
        key = unescape(raw_key.strip()).lower()
        if not key:
            continue
        entries.append(ConfigEntry(key, unescape(raw_value.strip()), source_file, line_number))
    return entries


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_line(line: str) -> Tuple[str, str]:
    escaped = False
    for position, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _SEPARATORS:
            return line[:position], line[position + 1 :]
    return line, ""


def unescape(text: str) -> str:
    """Resolve ``\\n``-style escapes, ``\\uXXXX`` and escaped literals."""

    if "\\" not in text:
        return text
    result: List[str] = []
    position = 0
    while position < len(text):
        char = text[position]
        if char != "\\" or position + 1 >= len(text):
            result.append(char)
            position += 1
            continue
        nxt = text[position + 1]
        if nxt == "u":
            digits = text[position + 2 : position + 6]
            if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                result.append(chr(int(digits, 16)))
                position += 6
                continue
        result.append(_ESCAPES.get(nxt, nxt))
        position += 2
    return "".join(result)
