"""Locate configuration files beneath a scan root."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Optional

from ..entry import CONFIG_FILE_PATTERNS, ConfigFormat

logger = logging.getLogger(__name__)

EXCLUDED_DIRECTORIES: FrozenSet[str] = frozenset(
    {
        "node_modules",
        ".git",
        ".svn",
        ".hg",
        "target",
        "build",
        "dist",
        "out",
        ".idea",
        ".vscode",
        "__pycache__",
        ".gradle",
    }
)

# Policy documents are YAML too but describe rules, not configuration.
EXCLUDED_FILE_NAMES: FrozenSet[str] = frozenset(
    {
        ".prod-analyzer-policy.yml",
        ".prod-analyzer-policy.yaml",
        "prod-analyzer-policy.yml",
        "prod-analyzer-policy.yaml",
    }
)

MAX_DEPTH = 10


@dataclass(frozen=True)
class DiscoveredFile:
    path: Path
    format: ConfigFormat


def detect_file_format(file_name: str) -> Optional[ConfigFormat]:
    """Return the format implied by ``file_name`` or ``None`` if unsupported."""

    name = file_name.lower()
    for config_format, patterns in CONFIG_FILE_PATTERNS.items():
        if any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns):
            return config_format
    return None


def discover_config_files(root: Path, max_depth: int = MAX_DEPTH) -> List[DiscoveredFile]:
    """Walk ``root`` and return supported files sorted by path.

    Build output, dependency and VCS directories are pruned, as is anything
    deeper than ``max_depth`` levels below ``root``.
    """

    found: List[DiscoveredFile] = []
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        depth = len(Path(dirpath).relative_to(root).parts)
        if depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = [name for name in dirnames if name not in EXCLUDED_DIRECTORIES]
        for filename in filenames:
            if filename.lower() in EXCLUDED_FILE_NAMES:
                continue
            config_format = detect_file_format(filename)
            if config_format is not None:
                found.append(DiscoveredFile(Path(dirpath) / filename, config_format))
    found.sort(key=lambda item: str(item.path))
    logger.debug("Discovered %d configuration files under %s", len(found), root)
    return found


def _log_walk_error(error: OSError) -> None:
    logger.warning("Cannot read directory %s: %s", error.filename, error.strerror)
