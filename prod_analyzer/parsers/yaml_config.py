"""YAML normalizer built on the PyYAML node graph."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import yaml

from ..entry import ConfigEntry
from ..utils.fileio import ConfigLoader
from .flatten import join_key, stringify_value


def parse_yaml(content: str, source_file: str) -> List[ConfigEntry]:
    """Flatten every document in ``content`` into lower-case dot keys.

    Walking nodes instead of constructed objects keeps the 1-based line of
    each key. Documents whose root is not a mapping contribute nothing.
    """

    loader = ConfigLoader(content)
    entries: List[ConfigEntry] = []
    try:
        while loader.check_node():
            node = loader.get_node()
            if isinstance(node, yaml.MappingNode):
        # expands ``<<`` merge keys in place, merged pairs first
        loader.flatten_mapping(node)
        children: Dict[str, Tuple[yaml.Node, yaml.Node]] = {}
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                continue
            key = loader.construct_object(key_node)
            if key is None:
                continue
            # later pairs override earlier ones, as in construct_mapping
            children[stringify_value(key).lower()] = (key_node, value_node)
        for key, (key_node, value_node) in children.items():
            path = join_key(prefix, key)
            _walk(loader, value_node, path, key_node.start_mark.line + 1, source_file, entries)
    elif isinstance(node, yaml.SequenceNode):
        for index, item in enumerate(node.value):
            _walk(loader, item, f"{prefix}[{index}]", item.start_mark.line + 1, source_file, entries)
    elif prefix:
        value = loader.construct_object(node)
        if value is not None:
            entries.append(ConfigEntry(prefix, stringify_value(value), source_file, line_number))
