"""Grammar of regex attribute keys.

A regex key is an anchored pattern (``^...$``) written as a flat sequence of
segments, for instance::

    ^custom_inputs\\.([a-zA-Z0-9_-]+)\\.name$

splits into ``^``, ``custom_inputs``, ``\\.``, ``([a-zA-Z0-9_-]+)``, ``\\.``,
``name`` and ``$``. Only this closed subset is accepted: anchors, runs of
plain characters, escaped metacharacters, (quantified) character classes and
single level capture groups. Anything else, a bare ``.`` in particular (in a
JSON path it is almost always a forgotten escape), is a SchemaError.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..models import SchemaError

__all__ = ["Segment", "SegmentKind", "parse_pattern"]

_QUANTIFIERS = "*+?{"
_CLASS_ESCAPES = "dDwWsS"


class SegmentKind(Enum):
    """Kind of a top-level segment."""

    CARET = "caret"
    DOLLAR = "dollar"
    LITERAL = "literal"
    ESCAPED_META = "escaped_meta"
    CHAR_CLASS = "char_class"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Segment:
    """One top-level segment of a regex key.

    Attributes:
        kind: What the segment is
        text: Its regex source, as written in the key
        literal: The text it stands for (anchors, literals, escapes only)
    """

    kind: SegmentKind
    text: str
    literal: str = ""

    @property
    def is_variable(self) -> bool:
        """True for segments matching varying text (groups and classes)."""
        return self.kind in (SegmentKind.CAPTURE, SegmentKind.CHAR_CLASS)


def _read_quantifier(pattern: str, pos: int) -> int:
    """Return the position after an optional quantifier starting at `pos`."""
    if pos >= len(pattern) or pattern[pos] not in _QUANTIFIERS:
        return pos
    if pattern[pos] == "{":
        end = pattern.find("}", pos)
        if end == -1 or not re.fullmatch(r"\{\d*(,\d*)?\}", pattern[pos : end + 1]):
            raise SchemaError(f"malformed quantifier at offset {pos} in {pattern}")
        pos = end + 1
    else:
        pos += 1
    if pos < len(pattern) and pattern[pos] in "?+":
        pos += 1
    return pos


def _read_class(pattern: str, pos: int) -> int:
    """Return the position right after the character class opening at `pos`."""
    i = pos + 1
    if i < len(pattern) and pattern[i] == "^":
        i += 1
    if i < len(pattern) and pattern[i] == "]":
        i += 1
    while i < len(pattern):
        if pattern[i] == "\\":
            i += 2
            continue
        if pattern[i] == "]":
            return i + 1
        i += 1
    raise SchemaError(f"unterminated character class at offset {pos} in {pattern}")


def _read_group(pattern: str, pos: int) -> int:
    """Return the position right after the capture group opening at `pos`."""
    i = pos + 1
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
        elif char == "[":
            i = _read_class(pattern, i)
        elif char == "(":
            raise SchemaError(f"nested group at offset {i} in {pattern}")
        elif char == ".":
            raise SchemaError(f"regex can't use a bare dot, it should probably be escaped: {pattern}")
        elif char == ")":
            return i + 1
        else:
            i += 1
    raise SchemaError(f"unterminated group at offset {pos} in {pattern}")


def _split(pattern: str) -> list[Segment]:  # noqa: C901
    segments: list[Segment] = [Segment(SegmentKind.CARET, "^")]
    literal_run: list[str] = []

    def flush() -> None:
        if literal_run:
            text = "".join(literal_run)
            segments.append(Segment(SegmentKind.LITERAL, text, text))
            literal_run.clear()

    body_end = len(pattern) - 1
    pos = 1
    while pos < body_end:
        char = pattern[pos]
        if char == "\\":
            if pos + 1 >= body_end:
                raise SchemaError(f"dangling escape in {pattern}")
            escaped = pattern[pos + 1]
            flush()
            if escaped in _CLASS_ESCAPES:
                end = _read_quantifier(pattern, pos + 2)
                segments.append(Segment(SegmentKind.CHAR_CLASS, pattern[pos:end]))
                pos = end
                continue
            if escaped.isalnum():
                raise SchemaError(f"unsupported escape \\{escaped} in {pattern}")
            segments.append(Segment(SegmentKind.ESCAPED_META, pattern[pos : pos + 2], escaped))
            pos += 2
        elif char == "[":
            flush()
            end = _read_quantifier(pattern, _read_class(pattern, pos))
            segments.append(Segment(SegmentKind.CHAR_CLASS, pattern[pos:end]))
            pos = end
        elif char == "(":
            flush()
            end = _read_group(pattern, pos)
            if end < len(pattern) and pattern[end] in _QUANTIFIERS and end < body_end:
                raise SchemaError(f"quantified group is not a plain concatenation: {pattern}")
            segments.append(Segment(SegmentKind.CAPTURE, pattern[pos:end]))
            pos = end
        elif char == ".":
            raise SchemaError(f"regex can't use a bare dot, it should probably be escaped: {pattern}")
        elif char == "|":
            raise SchemaError(f"top-level alternation is not supported: {pattern}")
        elif char in "^$)":
            raise SchemaError(f"unexpected {char!r} at offset {pos} in {pattern}")
        elif char in _QUANTIFIERS:
            raise SchemaError(f"quantifier at offset {pos} does not apply to a class or group: {pattern}")
        else:
            literal_run.append(char)
            pos += 1
            continue
        if pos < body_end and pattern[pos] in _QUANTIFIERS and segments[-1].kind == SegmentKind.ESCAPED_META:
            raise SchemaError(f"quantified escape at offset {pos} is not supported: {pattern}")

    flush()
    segments.append(Segment(SegmentKind.DOLLAR, "$"))
    return segments


def parse_pattern(pattern: str) -> list[Segment]:
    """Split an anchored regex key into its top-level segments.

    Args:
        pattern: The regex key, e.g. ``^items\\.([a-z]+)\\.sku$``

    Returns:
        The segments, first one being ``^`` and last one ``$``

    Raises:
        SchemaError: the key is not anchored, uses unsupported syntax, or one
            of its prefixes does not compile
    """
    if len(pattern) < 2 or pattern[0] != "^" or pattern[-1] != "$":  # noqa: PLR2004
        raise SchemaError(f"regex needs to start with a ^ and end with a $, not: {pattern}")
    if pattern.endswith("\\$") and not pattern.endswith("\\\\$"):
        raise SchemaError(f"regex needs to end with an unescaped $: {pattern}")

    segments = _split(pattern)

    prefix = ""
    for segment in segments:
        prefix += segment.text
        try:
            re.compile(prefix)
        except re.error as e:
            raise SchemaError(f"couldn't compile regex prefix {prefix!r}: {e}") from e
    return segments
