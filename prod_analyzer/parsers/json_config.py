"""JSON normalizer (``appsettings.json``, ``package.json`` ...)."""

from __future__ import annotations

import json
from typing import List

from ..entry import ConfigEntry
from .flatten import flatten_tree


def parse_json(content: str, source_file: str) -> List[ConfigEntry]:
    """Flatten a JSON object keeping the source key casing.

    .NET configuration keys are case-sensitive, so ``Logging.LogLevel.Default``
    stays as written. JSON carries no line information.
    """

    data = json.loads(content)
    if not isinstance(data, dict):
        return []
    return flatten_tree(data, source_file, lowercase_keys=False)
