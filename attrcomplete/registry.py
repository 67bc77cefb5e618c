"""In-memory collaborators: resource registry and alias store.

HeaderCatalog lives with the completers and is re-exported here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .completions.headers import DEFAULT_HEADERS, HeaderCatalog
from .logging_setup import get_logger
from .schema.parsing import parse_resource

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .schema.models import AttributeSpec, Resource

__all__ = ["DEFAULT_HEADERS", "AliasStore", "HeaderCatalog", "ResourceRegistry"]


class ResourceRegistry:
    """Resources by plural name, looked up by plural or singular name."""

    def __init__(self, resources: Iterable[Resource] = ()) -> None:
        self._resources: dict[str, Resource] = {}
        self._singular: dict[str, Resource] = {}
        for resource in resources:
            self.add(resource)

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, dict], logger: logging.Logger | None = None) -> tuple[ResourceRegistry, list[str]]:
        """Build a registry from raw resource definitions.

        Args:
            definitions: Plural name -> raw definition
            logger: Logger for schema problems

        Returns:
            The registry and every schema error met (invalid attributes are left out)
        """
        log = logger or get_logger("registry")
        registry = cls()
        errors: list[str] = []
        for name, raw in definitions.items():
            resource, problems = parse_resource(name, raw, log)
            registry.add(resource)
            errors.extend(problems)
        log.debug("Loaded %d resources (%d errors)", len(registry.plural_resources()), len(errors))
        return registry, errors

    def add(self, resource: Resource) -> None:
        """Register (or replace) a resource."""
        self._resources[resource.name] = resource
        if resource.singular_name:
            self._singular[resource.singular_name] = resource

    def get_resource(self, name: str) -> Resource | None:
        """Return the resource with the given plural or singular name."""
        return self._resources.get(name) or self._singular.get(name)

    def get_attribute_specs(self, resource: str) -> list[AttributeSpec]:
        """Return every attribute declaration of a resource (empty if unknown)."""
        found = self.get_resource(resource)
        return list(found.attributes.values()) if found else []

    def plural_resources(self) -> list[Resource]:
        """Return every resource."""
        return list(self._resources.values())

    def singular_names(self) -> list[str]:
        """Return the singular names."""
        return list(self._singular)


class AliasStore:
    """Aliases by JSON:API type."""

    def __init__(self, aliases: Mapping[str, Iterable[str]] | None = None) -> None:
        self._aliases: dict[str, set[str]] = {}
        for json_api_type, names in (aliases or {}).items():
            for name in names:
                self.add(json_api_type, name)

    def add(self, json_api_type: str, alias: str) -> None:
        """Remember an alias of `json_api_type`."""
        self._aliases.setdefault(json_api_type, set()).add(alias)

    def aliases_for(self, json_api_type: str, alternate_types: tuple[str, ...] = ()) -> set[str]:
        """Return the aliases of a type and of its alternate types."""
        result: set[str] = set()
        for name in (json_api_type, *alternate_types):
            result |= self._aliases.get(name, set())
        return result

