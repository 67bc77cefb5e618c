"""Resolution of [n] array placeholders in attribute paths."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["PLACEHOLDER", "count_placeholders", "max_indices", "resolve_placeholders"]

PLACEHOLDER = "[n]"


def count_placeholders(template: str) -> int:
    """Return how many [n] placeholders `template` holds."""
    return template.count(PLACEHOLDER)


def _template_regex(template: str) -> re.Pattern[str]:
    parts = [re.escape(part) for part in template.split(PLACEHOLDER)]
    return re.compile("^" + r"\[(\d+)\]".join(parts) + "$")


def max_indices(template: str, supplied_paths: Iterable[str]) -> list[int]:
    """Find the highest index used at each placeholder position.

    Args:
        template: Path with [n] placeholders, e.g. "a[n].b[n]"
        supplied_paths: Concrete paths already on the command line

    Returns:
        One entry per placeholder, -1 where no index was seen
    """
    highest = [-1] * count_placeholders(template)
    if not highest:
        return highest
    regex = _template_regex(template)
    for path in supplied_paths:
        match = regex.match(path)
        if match is None:
            continue
        for position, index in enumerate(match.groups()):
            highest[position] = max(highest[position], int(index))
    return highest


def resolve_placeholders(template: str, supplied_paths: Iterable[str]) -> list[str]:
    """Turn a path template into the concrete paths worth offering next.

    One candidate per placeholder: that position moves one past its highest
    seen index while the others stay at their highest index (0 if unseen).
    With "a[0].b[1]" supplied, "a[n].b[n]" gives "a[1].b[1]" and "a[0].b[2]".

    Args:
        template: Path with [n] placeholders
        supplied_paths: Concrete paths already on the command line

    Returns:
        The candidates; [template] itself when it holds no placeholder
    """
    highest = max_indices(template, supplied_paths)
    if not highest:
        return [template]

    parts = template.split(PLACEHOLDER)
    candidates = []
    for advanced in range(len(highest)):
        indices = [highest[p] + 1 if p == advanced else max(highest[p], 0) for p in range(len(highest))]
        path = parts[0]
        for index, part in zip(indices, parts[1:], strict=True):
            path += f"[{index}]{part}"
        candidates.append(path)
    return candidates
