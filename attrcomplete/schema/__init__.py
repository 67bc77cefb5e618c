"""Resource schemas: attribute declarations and their parsing."""

from .models import AttributeSpec, CrudInfo, Resource, is_regex_key, normalize_indices
from .parsing import parse_attribute, parse_attributes, parse_kind, parse_resource
from .patterns import Segment, SegmentKind, parse_pattern

__all__ = [
    "AttributeSpec",
    "CrudInfo",
    "Resource",
    "Segment",
    "SegmentKind",
    "is_regex_key",
    "normalize_indices",
    "parse_attribute",
    "parse_attributes",
    "parse_kind",
    "parse_pattern",
    "parse_resource",
]
