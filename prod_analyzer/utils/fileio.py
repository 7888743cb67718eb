"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class ConfigLoader(yaml.SafeLoader):
    """Safe YAML loader that reads application-specific tags as plain data.

    Ansible writes encrypted values as ``!vault`` and Home Assistant style
    configs use ``!secret`` and ``!env_var``. The safe loader rejects unknown
    tags, so any ``!`` tag is read as the node it wraps and the key still
    reaches the rules.
    """


def _construct_tagged(loader: ConfigLoader, tag_suffix: str, node: yaml.Node) -> Any:
    # the tag itself carries no meaning for scanning
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node)
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node)
    return None


ConfigLoader.add_multi_constructor("!", _construct_tagged)


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text.

    A leading byte order mark is dropped since Windows editors commonly
    write one into ``appsettings.json``.
    """

    return path.read_text(encoding="utf-8-sig")
