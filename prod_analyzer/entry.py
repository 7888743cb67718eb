"""Canonical configuration entry model shared by every parser and rule."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple


class ConfigFormat(str, Enum):
    """Supported configuration file formats."""

    YAML = "yaml"
    PROPERTIES = "properties"
    ENV = "env"
    JSON = "json"


# Lower-cased fnmatch patterns per format. JSON is restricted to well-known
# file names because arbitrary *.json files are rarely application config.
CONFIG_FILE_PATTERNS: Dict[ConfigFormat, Sequence[str]] = {
    ConfigFormat.YAML: ("*.yml", "*.yaml"),
    ConfigFormat.PROPERTIES: ("*.properties",),
    ConfigFormat.ENV: (".env*",),
    ConfigFormat.JSON: (
        "appsettings.json",
        "appsettings.*.json",
        "config.json",
        "package.json",
    ),
}


@dataclass(frozen=True)
class ConfigEntry:
    """One flattened configuration setting.

    ``key`` is dot notation (lower case for every format except JSON),
    ``value`` is always a string and ``line_number`` is 1-based when the
    source format can provide it.
    """

    key: str
    value: str
    source_file: str
    line_number: Optional[int] = None


@dataclass(frozen=True)
class ParsedConfigFile:
    """Entries produced from one file plus the reason a parse degraded."""

    file_path: str
    format: ConfigFormat
    entries: Tuple[ConfigEntry, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None
