"""Merge tree over regex attribute keys.

Every regex key is split into top-level segments (see
attrcomplete.schema.patterns) and threaded into a shared tree, so keys that
start the same way share nodes. Attribute paths already on the command line
are then walked through the tree: capture group nodes remember the concrete
text they matched (e.g. the "dogbed" in "components.dogbed.name"). Completion
options are built bottom-up from literal segments and remembered values.
"""

from __future__ import annotations

import re

from ..schema.models import normalize_indices
from ..schema.patterns import Segment, SegmentKind, parse_pattern

__all__ = ["RegexCompletionTree", "RegexNode"]


class RegexNode:
    """A node of the merge tree.

    Attributes:
        segment: The segment this node matches
        prefix: Regex source of this node and all its ancestors
        parent: Parent node (None for the root)
        children: Child nodes keyed by their segment source
        observed: Text matched by this node in observed paths (ordered set)
    """

    def __init__(self, segment: Segment, prefix: str, parent: RegexNode | None = None) -> None:
        self.segment = segment
        self.prefix = prefix
        self.prefix_regex = re.compile(prefix)
        self.parent = parent
        self.children: dict[str, RegexNode] = {}
        self.observed: dict[str, None] = {}

    def child_for(self, segment: Segment) -> RegexNode:
        """Return the child matching `segment`, creating it if needed."""
        node = self.children.get(segment.text)
        if node is None:
            node = RegexNode(segment, self.prefix + segment.text, self)
            self.children[segment.text] = node
        return node

    def observe(self, value: str, parent_match: str) -> None:
        """Record what this node matches in `value`, then recurse.

        Args:
            value: The observed path, indices folded to [n]
            parent_match: Text matched by the parent's prefix
        """
        match = self.prefix_regex.match(value)
        if match is None:
            return
        matched = match.group(0)
        self.observed[matched[len(parent_match) :]] = None
        for child in self.children.values():
            child.observe(value, matched)

    def completions(self) -> list[str]:
        """Completion strings for the subtree rooted here."""
        kind = self.segment.kind
        if kind == SegmentKind.DOLLAR:
            return [""]

        child_options = [option for child in self.children.values() for option in child.completions()]

        if kind == SegmentKind.CARET:
            return child_options
        if kind in (SegmentKind.LITERAL, SegmentKind.ESCAPED_META):
            return [self.segment.literal + option for option in child_options]

        values = [value for value in self.observed if value]
        if not values:
            # nothing concrete is known past this point
            return [""]
        return [value + option for option in child_options for value in values]


class RegexCompletionTree:
    """Shared prefix tree over anchored regex keys."""

    def __init__(self) -> None:
        self.root: RegexNode | None = None
        self.patterns: list[str] = []

    def add_regex(self, pattern: str) -> None:
        """Insert an anchored pattern.

        Args:
            pattern: Regex key of the form ^...$

        Raises:
            SchemaError: the pattern is unanchored, not a flat concatenation,
                contains a bare dot or has a prefix that does not compile
        """
        segments = parse_pattern(pattern)
        if self.root is None:
            self.root = RegexNode(segments[0], segments[0].text)
        node = self.root
        for segment in segments[1:]:
            node = node.child_for(segment)
        self.patterns.append(pattern)

    def add_observed_value(self, literal_path: str) -> None:
        """Walk a concrete attribute path through the tree.

        Paths that belong to no registered pattern are ignored.
        """
        if self.root is None:
            return
        self.root.observe(normalize_indices(literal_path), "")

    def completions(self) -> list[str]:
        """Return the literal completion strings, without duplicates."""
        if self.root is None:
            return []
        return list(dict.fromkeys(self.root.completions()))
