"""Shared helpers for turning nested data into dot-notation entries."""

from __future__ import annotations

from typing import Any, List, Optional

from ..entry import ConfigEntry


def stringify_value(value: Any) -> str:
    """Render a scalar the way configuration files spell it."""

    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def join_key(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def flatten_tree(
    data: Any,
    source_file: str,
    prefix: str = "",
    lowercase_keys: bool = True,
    line_number: Optional[int] = None,
) -> List[ConfigEntry]:
    """Flatten dicts and lists into entries; ``None`` leaves are dropped."""

    entries: List[ConfigEntry] = []
    _flatten_into(entries, data, source_file, prefix, lowercase_keys, line_number)
    return entries


def _flatten_into(
    entries: List[ConfigEntry],
    data: Any,
    source_file: str,
    prefix: str,
    lowercase_keys: bool,
    line_number: Optional[int],
) -> None:
    if data is None:
        return
    if isinstance(data, dict):
        for key, value in data.items():
            part = stringify_value(key)
            if lowercase_keys:
                part = part.lower()
            _flatten_into(entries, value, source_file, join_key(prefix, part), lowercase_keys, line_number)
    elif isinstance(data, list):
        for index, item in enumerate(data):
            _flatten_into(entries, item, source_file, f"{prefix}[{index}]", lowercase_keys, line_number)
    elif prefix:
        entries.append(ConfigEntry(prefix, stringify_value(data), source_file, line_number))
