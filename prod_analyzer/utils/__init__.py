"""Utility helpers for the analyzer."""

from .discovery import DiscoveredFile, detect_file_format, discover_config_files
from .fileio import ConfigLoader, read_text_file

__all__ = [
    "ConfigLoader",
    "DiscoveredFile",
    "detect_file_format",
    "discover_config_files",
    "read_text_file",
]
