"""Requests, results and collaborators of the completion engine."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from ..models import Intent, ShellDirective, Verb

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..config import Configuration
    from ..schema.models import AttributeSpec, Resource
    from .headers import HeaderCatalog

__all__ = [
    "AliasSource",
    "CompletionContext",
    "CompletionRequest",
    "CompletionResult",
    "ResourceSource",
]


@runtime_checkable
class ResourceSource(Protocol):
    """Read-only view of the loaded resource schemas.

    Implementations must hand out a consistent snapshot for the duration of a
    completion call.
    """

    def get_resource(self, name: str) -> Resource | None:
        """Return the resource with the given plural or singular name."""
        ...

    def get_attribute_specs(self, resource: str) -> list[AttributeSpec]:
        """Return every attribute declaration of a resource."""
        ...

    def plural_resources(self) -> list[Resource]:
        """Return every resource, keyed by plural name order."""
        ...

    def singular_names(self) -> list[str]:
        """Return the singular name of every resource that declares one."""
        ...


@runtime_checkable
class AliasSource(Protocol):
    """Aliases known for each JSON:API type."""

    def aliases_for(self, json_api_type: str, alternate_types: tuple[str, ...] = ()) -> set[str]:
        """Return the aliases of `json_api_type` and its alternate types."""
        ...


@dataclass
class CompletionRequest:  # pylint: disable=too-many-instance-attributes
    """What to complete, and the state of the command line.

    Attributes:
        intents: What the caller wants completed (flags may be combined)
        resource: Plural name of the resource the command targets
        supplied: Attribute paths already given, path -> JSON literal text
        known: Values the server already holds (updates), same shape
        verb: Operation being built
        attribute: Attribute whose value is being completed
        query_param: Query parameter whose value is being completed
        header: Header whose value is being completed
        to_complete: The word typed so far
        no_aliases: Never offer aliases (settings decide when None)
        allow_templates: Offer template snippets (settings decide when None)
        skip_visibility: Ignore visibility predicates (settings decide when None)
    """

    intents: Intent
    resource: str = ""
    supplied: Mapping[str, Any] = field(default_factory=dict)
    known: Mapping[str, Any] = field(default_factory=dict)
    verb: Verb = Verb.NONE
    attribute: str = ""
    query_param: str = ""
    header: str = ""
    to_complete: str = ""
    no_aliases: bool | None = None
    allow_templates: bool | None = None
    skip_visibility: bool | None = None


@dataclass
class CompletionResult:
    """Candidates and how the shell should present them."""

    candidates: list[str] = field(default_factory=list)
    directive: ShellDirective = ShellDirective.NO_FILE_COMP

    def __iter__(self) -> Iterator[Any]:
        """Allow `candidates, directive = complete(...)`."""
        return iter((self.candidates, self.directive))


@dataclass
class CompletionContext:
    """Collaborators of one completion call.

    Attributes:
        registry: Resource schemas
        aliases: Alias store
        headers: Header catalog
        settings: Completion settings (defaults when omitted)
        environ: Environment variables offered by the `env` template function
        logger: Logger for recovered errors
    """

    registry: ResourceSource
    aliases: AliasSource | None = None
    headers: HeaderCatalog | None = None
    settings: Configuration | None = None
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    logger: logging.Logger | None = None
