"""Shell-style ``.env`` normalizer."""

from __future__ import annotations

from typing import List

from ..entry import ConfigEntry

_QUOTES = ("'", '"')


def normalize_env_key(key: str) -> str:
    """``NODE_TLS_REJECT_UNAUTHORIZED`` -> ``node.tls.reject.unauthorized``."""

    return key.strip().lower().replace("_", ".")


def strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_env(content: str, source_file: str) -> List[ConfigEntry]:
    entries: List[ConfigEntry] = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].lstrip()
        if "=" not in stripped:
            continue
        raw_key, _, raw_value = stripped.partition("=")
        key = normalize_env_key(raw_key)
        if not key:
            continue
        entries.append(ConfigEntry(key, strip_quotes(raw_value.strip()), source_file, line_number))
    return entries
