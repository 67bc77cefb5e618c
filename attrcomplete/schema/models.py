"""Typed view of resource and attribute declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models import AttributeKind

__all__ = ["AttributeSpec", "CrudInfo", "Resource", "is_regex_key", "normalize_indices"]

_CONCRETE_INDEX = re.compile(r"\[\d+\]")


def is_regex_key(key: str) -> bool:
    """Tell whether an attribute key is an anchored regex rather than a literal path."""
    return key.startswith("^") and key.endswith("$")


def normalize_indices(path: str) -> str:
    """Replace concrete array indices with the [n] placeholder.

    E.g. "items[0].components[12].sku" -> "items[n].components[n].sku"
    """
    return _CONCRETE_INDEX.sub("[n]", path)


@dataclass(frozen=True)
class AttributeSpec:  # pylint: disable=too-many-instance-attributes
    """One declared attribute of a resource.

    Attributes:
        key: Literal dotted/bracketed path (items[n].sku) or anchored regex
        kind: Tag driving value completion
        enum_values: Allowed values for ENUM attributes
        target: Referenced resource for RESOURCE_REF attributes ("*" for any)
        when: Visibility predicate source, empty when unconditional
        conditions: Alternative predicates, at least one must hold
        usage: Free-form description
        autofill: Faker-style generator name used by other tools
        alias_attribute: Attribute of the target resource used for aliasing
    """

    key: str
    kind: AttributeKind = AttributeKind.STRING
    enum_values: tuple[str, ...] = ()
    target: str = ""
    when: str = ""
    conditions: tuple[str, ...] = ()
    usage: str = ""
    autofill: str = ""
    alias_attribute: str = ""

    @property
    def is_regex(self) -> bool:
        """True if the key is an anchored regex."""
        return is_regex_key(self.key)

    @property
    def is_conditional(self) -> bool:
        """True if the attribute declares any visibility predicate."""
        return bool(self.when.strip()) or any(c.strip() for c in self.conditions)

    @property
    def type_name(self) -> str:
        """The kind as written in definitions (ENUM:a,b / RESOURCE_ID:customers)."""
        if self.kind == AttributeKind.ENUM:
            return f"{self.kind.value}:{','.join(self.enum_values)}"
        if self.kind == AttributeKind.RESOURCE_REF:
            return f"{self.kind.value}:{self.target}"
        return self.kind.value


@dataclass(frozen=True)
class CrudInfo:
    """How one operation of a resource is invoked."""

    url: str = ""
    query_parameters: tuple[str, ...] = ()


@dataclass
class Resource:  # pylint: disable=too-many-instance-attributes
    """A resource and its attribute declarations."""

    name: str
    singular_name: str = ""
    json_api_type: str = ""
    alternate_json_api_types: tuple[str, ...] = ()
    attributes: dict[str, AttributeSpec] = field(default_factory=dict)
    get_entity: CrudInfo | None = None
    get_collection: CrudInfo | None = None
    create_entity: CrudInfo | None = None
    update_entity: CrudInfo | None = None
    delete_entity: CrudInfo | None = None

    def literal_attributes(self) -> list[AttributeSpec]:
        """Attributes keyed by a literal path."""
        return [spec for spec in self.attributes.values() if not spec.is_regex]

    def regex_attributes(self) -> list[AttributeSpec]:
        """Attributes keyed by an anchored regex."""
        return [spec for spec in self.attributes.values() if spec.is_regex]

    def find_attribute(self, path: str) -> AttributeSpec | None:
        """Find the declaration governing a concrete attribute path.

        Concrete indices are folded back to [n] for the literal lookup; regex
        keys are tried afterwards, in declaration order.

        Args:
            path: The attribute as typed (e.g. "items[3].sku")

        Returns:
            The matching AttributeSpec or None
        """
        spec = self.attributes.get(normalize_indices(path)) or self.attributes.get(path)
        if spec is not None and not spec.is_regex:
            return spec
        normalized = normalize_indices(path)
        for spec in self.regex_attributes():
            try:
                if re.search(spec.key, path) or re.search(spec.key, normalized):
                    return spec
            except re.error:
                continue
        return None
