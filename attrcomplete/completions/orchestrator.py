"""Dispatch of completion requests to the specialised completers.

`complete` looks at the intents of a request, asks the matching completers
for candidates and merges them, in a stable order, together with the shell
directive. Errors of the completers are recovered here: a broken regex key
or predicate never aborts a completion.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..constants import (
    ACCOUNT_MANAGEMENT_KEYS,
    ALIAS_ATTRIBUTE_SUFFIXES,
    BOOL_LITERALS,
    CRUD_ACTIONS,
    CURRENCIES,
    GET_ALL_QUERY_PARAMS,
    GET_QUERY_PARAMS,
    SORT_IMPLICIT_ATTRIBUTES,
    TEMPLATE_CONTINUATION_FUNCTIONS,
    TEMPLATE_GENERATOR_FUNCTIONS,
    TOTAL_METHODS,
)
from ..logging_setup import get_logger
from ..models import AttributeKind, Intent, PredicateError, SchemaError, ShellDirective, Verb
from ..settings import default_settings
from ..visibility import VisibilityEvaluator
from .arrays import resolve_placeholders
from .filters import complete_filter
from .headers import HeaderCatalog
from .models import CompletionResult
from .regex_tree import RegexCompletionTree

if TYPE_CHECKING:
    from ..schema.models import AttributeSpec, Resource
    from .models import CompletionContext, CompletionRequest

__all__ = ["Completer", "complete"]

_ENV_FUNCTION = re.compile(r"env\s+[A-Za-z]*\s*$")


class Completer:  # pylint: disable=too-many-instance-attributes
    """Computes the candidates of one request.

    Request flags left to None are taken from the settings.
    """

    def __init__(self, request: CompletionRequest, context: CompletionContext) -> None:
        self.request = request
        self.context = context
        self.log = context.logger or get_logger("completion")
        self.settings = context.settings if context.settings is not None else default_settings(self.log)
        self.headers = context.headers if context.headers is not None else HeaderCatalog()
        self.no_aliases = self._flag(request.no_aliases, "no_aliases")
        self.allow_templates = self._flag(request.allow_templates, "allow_templates")
        self.skip_visibility = self._flag(request.skip_visibility, "skip_visibility")
        self.resource: Resource | None = context.registry.get_resource(request.resource) if request.resource else None
        self.directive = ShellDirective.NO_FILE_COMP
        self._evaluator: VisibilityEvaluator | None = None

    def _flag(self, value: bool | None, name: str) -> bool:
        return self.settings.get_bool(name) if value is None else value

    def collect(self) -> list[str]:
        """Compute the raw candidates, in the order of the intent flags."""
        intents = self.request.intents
        handlers = (
            (Intent.PLURAL_RESOURCE, self.plural_resources),
            (Intent.SINGULAR_RESOURCE, self.singular_resources),
            (Intent.CRUD_ACTION, lambda: list(CRUD_ACTIONS)),
            (Intent.LOGIN_API, lambda: ["api"]),
            (Intent.BOOL, lambda: list(BOOL_LITERALS)),
            (Intent.LOGIN_CLIENT_ID, lambda: ["client_id"]),
            (Intent.LOGIN_CLIENT_SECRET, lambda: ["client_secret"]),
            (Intent.ATTRIBUTE_KEY, self.attribute_keys),
            (Intent.ATTRIBUTE_VALUE, self.attribute_values),
            (Intent.QUERY_PARAM_KEY, self.query_param_keys),
            (Intent.ALIAS, self.resource_aliases),
            (Intent.QUERY_PARAM_VALUE, self.query_param_values),
            (Intent.LOGIN_ACCOUNT_MANAGEMENT_KEY, lambda: list(ACCOUNT_MANAGEMENT_KEYS)),
            (Intent.HEADER_KEY, self.headers.names),
            (Intent.HEADER_VALUE, self.header_values),
            (Intent.CURRENCY, lambda: list(CURRENCIES)),
        )
        candidates: list[str] = []
        for intent, handler in handlers:
            if intents & intent:
                candidates.extend(handler())

        return list(dict.fromkeys(candidates))

    def run(self) -> CompletionResult:
        """Compute the candidates, escaped for the shell when the settings ask for it."""
        candidates = self.collect()
        if self.settings.get_bool("escape_spaces"):
            candidates = [candidate.replace(" ", "\\ ") for candidate in candidates]
        self.log.debug("%d candidates for %r", len(candidates), self.request.intents)
        return CompletionResult(candidates, self.directive)

    # Resources

    def plural_resources(self) -> list[str]:
        """Plural resource names usable with the request's verb."""
        verb = self.request.verb
        names = []
        for resource in self.context.registry.plural_resources():
            if verb & (Verb.GET | Verb.GET_ALL):
                usable = resource.get_collection is not None
            elif verb & Verb.DELETE:
                usable = resource.delete_entity is not None
            elif verb & Verb.DELETE_ALL:
                usable = resource.delete_entity is not None and resource.get_collection is not None
            else:
                usable = True
            if usable:
                names.append(resource.name)
        return names

    def singular_resources(self) -> list[str]:
        """Singular resource names usable with the request's verb."""
        verb = self.request.verb
        names = []
        for name in self.context.registry.singular_names():
            resource = self.context.registry.get_resource(name)
            if resource is None:
                continue
            if verb & Verb.CREATE:
                usable = resource.create_entity is not None
            elif verb & Verb.UPDATE:
                usable = resource.update_entity is not None
            elif verb & Verb.DELETE:
                usable = resource.delete_entity is not None
            elif verb & Verb.GET:
                usable = resource.get_entity is not None
            else:
                usable = True
            if usable:
                names.append(name)
        return names

    def _resource_for_type(self, name: str) -> Resource | None:
        resource = self.context.registry.get_resource(name)
        if resource is not None:
            return resource
        for candidate in self.context.registry.plural_resources():
            if candidate.json_api_type == name:
                return candidate
        return None

    def _aliases_of(self, resource: Resource) -> list[str]:
        if self.no_aliases or self.context.aliases is None:
            return []
        return sorted(self.context.aliases.aliases_for(resource.json_api_type, resource.alternate_json_api_types))

    def resource_aliases(self) -> list[str]:
        """Aliases of the request's resource."""
        if self.resource is None:
            return []
        return self._aliases_of(self.resource)

    # Attribute keys

    def _is_visible(self, spec: AttributeSpec, path: str) -> bool:
        if self.skip_visibility or not spec.is_conditional:
            return True
        if self._evaluator is None:
            self._evaluator = VisibilityEvaluator(self.request.known, self.request.supplied)
        try:
            return self._evaluator.is_visible(spec, path)
        except PredicateError as e:
            self.log.warning("Can't decide whether %s applies, offering it anyway: %s", path, e)
            return True

    def attribute_keys(self) -> list[str]:
        """Attribute paths that may be supplied next."""
        if self.resource is None:
            self.log.debug("No resource named %r, no attribute to offer", self.request.resource)
            return []
        supplied = self.request.supplied
        supplied_paths = list(supplied)
        keys: list[str] = []

        for spec in self.resource.literal_attributes():
            for path in resolve_placeholders(spec.key, supplied_paths):
                if path not in supplied and self._is_visible(spec, path):
                    keys.append(path)

        tree = RegexCompletionTree()
        for spec in self.resource.regex_attributes():
            try:
                tree.add_regex(spec.key)
            except SchemaError as e:
                self.log.warning("Skipping attribute %s of %s: %s", spec.key, self.resource.name, e)
        for path in supplied_paths:
            tree.add_observed_value(path)
        for option in tree.completions():
            keys.extend(path for path in resolve_placeholders(option, supplied_paths) if path not in supplied)

        return keys

    # Attribute values

    def attribute_values(self) -> list[str]:
        """Values for the request's attribute, template snippets included."""
        if not self.request.attribute:
            return []
        values: list[str] = []
        spec = self.resource.find_attribute(self.request.attribute) if self.resource is not None else None
        if spec is not None:
            values.extend(self._values_for(spec))
        else:
            self.log.debug("No declaration for attribute %r", self.request.attribute)
        if self.allow_templates:
            values.extend(self.template_snippets())
        return values

    def _values_for(self, spec: AttributeSpec) -> list[str]:  # noqa: PLR0911
        kind = spec.kind
        if kind == AttributeKind.BOOL:
            return list(BOOL_LITERALS)
        if kind == AttributeKind.ENUM:
            return list(spec.enum_values)
        if kind == AttributeKind.URL:
            self.directive |= ShellDirective.NO_SPACE
            return ["https://"]
        if kind == AttributeKind.RESOURCE_REF:
            return self._reference_values(spec.target)
        if kind == AttributeKind.SINGULAR_RESOURCE_NAME:
            return self.context.registry.singular_names()
        if kind == AttributeKind.JSON_API_TYPE_NAME:
            return [resource.json_api_type for resource in self.context.registry.plural_resources() if resource.json_api_type]
        if kind == AttributeKind.CURRENCY:
            return list(CURRENCIES)
        if kind == AttributeKind.FILE:
            self.directive = ShellDirective.FILTER_FILE_EXT
            return [str(ext) for ext in self.settings.get_list("file_extensions")]
        return []

    def _reference_values(self, target: str) -> list[str]:
        if target != "*":
            resource = self.context.registry.get_resource(target)
            return self._aliases_of(resource) if resource is not None else []

        parts = self.request.to_complete.split("/")
        if len(parts) == 1:
            self.directive |= ShellDirective.NO_SPACE
            return ["alias/"]
        if len(parts) == 2:  # noqa: PLR2004
            self.directive |= ShellDirective.NO_SPACE
            return [f"alias/{resource.json_api_type}/" for resource in self.context.registry.plural_resources() if resource.json_api_type]
        if len(parts) > 4:  # noqa: PLR2004
            return []

        aliased = self._resource_for_type(parts[1])
        if aliased is None:
            return []
        values = []
        for alias in self._aliases_of(aliased):
            base = f"alias/{aliased.json_api_type}/{alias}/"
            values.append(base + "id")
            values.extend(base + suffix for suffix in ALIAS_ATTRIBUTE_SUFFIXES if suffix in aliased.attributes)
        return values

    def template_snippets(self) -> list[str]:
        """Template function snippets continuing the word typed so far.

        Outside a template, snippets open one (``{{ date |``); after a pipe they
        continue the pipeline and the string functions are offered too.
        """
        typed = self.request.to_complete
        last_pipe = typed.rfind("|")
        prefix = "{{ " if last_pipe == -1 else typed[: last_pipe + 1] + " "

        functions = [prefix + name for name in TEMPLATE_GENERATOR_FUNCTIONS]
        if last_pipe != -1:
            functions.extend(prefix + name for name in TEMPLATE_CONTINUATION_FUNCTIONS)
        if _ENV_FUNCTION.search(typed):
            functions.extend(f'{prefix}env "{name}"' for name in sorted(self.context.environ))
        else:
            functions.append(prefix + "env")
        return [snippet for function in functions for snippet in (f"{function} |", f"{function} }}}}")]

    # Query parameters

    def query_param_keys(self) -> list[str]:
        """Query parameters of a get or get-all request."""
        verb = self.request.verb
        if verb & Verb.GET_ALL:
            crud, shared = (self.resource.get_collection if self.resource else None), GET_ALL_QUERY_PARAMS
        elif verb & Verb.GET:
            crud, shared = (self.resource.get_entity if self.resource else None), GET_QUERY_PARAMS
        else:
            return []
        declared = list(crud.query_parameters) if crud is not None else []
        return declared + list(shared)

    def query_param_values(self) -> list[str]:
        """Values of the sort, filter and page[total_method] parameters."""
        if not self.request.verb & Verb.GET_ALL:
            return []
        param = self.request.query_param
        if param == "sort":
            keys = list(self.resource.attributes) if self.resource is not None else []
            return [value for key in [*keys, *SORT_IMPLICIT_ATTRIBUTES] for value in (key, f"-{key}")]
        if param == "filter":
            self.directive |= ShellDirective.NO_SPACE
            fields = [spec.key for spec in self.resource.literal_attributes()] if self.resource is not None else []
            return complete_filter(self.request.to_complete, fields)
        if param == "page[total_method]":
            return list(TOTAL_METHODS)
        return []

    # Headers

    def header_values(self) -> list[str]:
        """Values of the request's header, through the catalog's nested request."""
        nested = self.headers.request_for(self.request.header)
        if nested is None:
            return []
        return Completer(nested, self.context).collect()


def complete(request: CompletionRequest, context: CompletionContext) -> CompletionResult:
    """Compute the next legal tokens for a partially typed command line.

    Args:
        request: What to complete and the state of the command line
        context: Registry, alias store, header catalog, settings and logger

    Returns:
        The candidates and the shell directive
    """
    return Completer(request, context).run()
