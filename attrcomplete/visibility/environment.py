"""Evaluation environment built from flattened attribute state."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["ABSENT", "build_environment", "decode_value", "split_path"]

_PATH_PART = re.compile(r"\[(\d+)\]|\[([^\]]*)\]|([^.\[\]]+)")


class _Absent:
    """Value of anything not present in the environment."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Any = _Absent()


def split_path(path: str) -> list[str | int]:
    """Split a flattened path into its keys.

    "items[2].components.sku" -> ["items", 2, "components", "sku"]
    """
    parts: list[str | int] = []
    for match in _PATH_PART.finditer(path):
        index, other, name = match.groups()
        if index is not None:
            parts.append(int(index))
        elif other is not None:
            parts.append(other)
        else:
            parts.append(name)
    return parts


def decode_value(raw: Any) -> Any:  # noqa: ANN401
    """Decode a JSON literal, keeping the raw text when it isn't one."""
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _assign(env: dict, keys: list[str | int], value: Any) -> None:  # noqa: ANN401
    node = env
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[keys[-1]] = value


def build_environment(known: Mapping[str, Any], supplied: Mapping[str, Any]) -> dict:
    """Reassemble flattened state into nested dictionaries.

    Args:
        known: Values the server already holds (updates only)
        supplied: Values given on the command line; these win over `known`

    Returns:
        Nested dictionaries, array indices being integer keys
    """
    env: dict = {}
    for source in (known, supplied):
        for path, raw in source.items():
            keys = split_path(path)
            if keys:
                _assign(env, keys, decode_value(raw))
    return env
