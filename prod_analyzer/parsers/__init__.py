"""Format normalizers and the factory that dispatches between them."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

import yaml

from ..entry import ConfigEntry, ConfigFormat, ParsedConfigFile
from .env import parse_env
from .json_config import parse_json
from .properties import parse_properties
from .yaml_config import parse_yaml

logger = logging.getLogger(__name__)

Normalizer = Callable[[str, str], List[ConfigEntry]]

NORMALIZERS: Dict[ConfigFormat, Normalizer] = {
    ConfigFormat.YAML: parse_yaml,
    ConfigFormat.JSON: parse_json,
    ConfigFormat.PROPERTIES: parse_properties,
    ConfigFormat.ENV: parse_env,
}


def get_normalizer(config_format: ConfigFormat) -> Normalizer:
    try:
        return NORMALIZERS[ConfigFormat(config_format)]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Unsupported config format: {config_format}") from exc


def parse_config_file(content: str, file_path: str, config_format: ConfigFormat) -> ParsedConfigFile:
    """Normalize one file; malformed content degrades to zero entries."""

    normalizer = get_normalizer(config_format)
    config_format = ConfigFormat(config_format)
    try:
        entries = normalizer(content, file_path)
    except (yaml.YAMLError, ValueError, RecursionError) as exc:
        message = f"Failed to parse {config_format.value} file {file_path}: {exc}"
        logger.warning(message)
        return ParsedConfigFile(file_path, config_format, (), message)
    logger.debug("Parsed %d entries from %s", len(entries), file_path)
    return ParsedConfigFile(file_path, config_format, tuple(entries))


__all__ = [
    "NORMALIZERS",
    "get_normalizer",
    "parse_config_file",
    "parse_env",
    "parse_json",
    "parse_properties",
    "parse_yaml",
]
