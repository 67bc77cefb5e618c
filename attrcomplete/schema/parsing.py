"""Build Resource and AttributeSpec objects from raw definition dictionaries.

Raw definitions have the shape resource definition files use::

    customers:
      singular-name: customer
      json-api-type: customer
      get-entity: {url: "/v2/customers/{customers}"}
      attributes:
        name: {type: STRING}
        status: {type: "ENUM:live,draft"}
        "^custom_inputs\\.([a-zA-Z0-9_-]+)\\.name$": {type: STRING}

Reading and decoding the files is left to the caller.
"""

from __future__ import annotations

import logging

from ..logging_setup import get_logger
from ..models import AttributeKind, SchemaError
from ..validation import SchemaField, SchemaItems, SchemaValidator, format_schema_error
from .models import AttributeSpec, CrudInfo, Resource, is_regex_key
from .patterns import parse_pattern

__all__ = ["ATTRIBUTE_SCHEMA", "RESOURCE_SCHEMA", "parse_attribute", "parse_attributes", "parse_kind", "parse_resource"]

_KIND_NAMES = {kind.value: kind for kind in AttributeKind}


def _validate_type(value: str) -> list[str]:
    try:
        parse_kind(value)
    except SchemaError as e:
        return [str(e)]
    return []


def _validate_predicates(value: list) -> list[str]:
    return [f"Condition {item!r} must be a string" for item in value if not isinstance(item, str)]


ATTRIBUTE_SCHEMA = SchemaItems(
    SchemaField("type", str, required=True, description="Kind of the attribute", validator=_validate_type),
    SchemaField("usage", str, description="Free-form description"),
    SchemaField("when", str, description="Visibility predicate"),
    SchemaField("conditions", list, description="Alternative visibility predicates", validator=_validate_predicates),
    SchemaField("autofill", str, description="Generator used to fill the attribute"),
    SchemaField("alias_attribute", str, description="Attribute of the target used for aliases"),
)

RESOURCE_SCHEMA = SchemaItems(
    SchemaField("singular-name", str, description="Singular name of the resource"),
    SchemaField("json-api-type", str, description="Type used in JSON:API payloads"),
    SchemaField("alternate-json-type-for-aliases", list, description="Other types whose aliases apply"),
    SchemaField("json-api-format", str),
    SchemaField("docs", str),
    SchemaField("no-wrapping", bool),
    SchemaField("legacy", bool),
    SchemaField("suppress-reset-warning", bool),
    SchemaField("created_by", list),
    SchemaField("get-entity", dict),
    SchemaField("get-collection", dict),
    SchemaField("create-entity", dict),
    SchemaField("update-entity", dict),
    SchemaField("delete-entity", dict),
    SchemaField("attributes", dict, default={}),
)

_CRUD_KEYS = {
    "get_entity": "get-entity",
    "get_collection": "get-collection",
    "create_entity": "create-entity",
    "update_entity": "update-entity",
    "delete_entity": "delete-entity",
}


def parse_kind(type_str: str) -> tuple[AttributeKind, tuple[str, ...], str]:
    """Split a type declaration into its parts.

    "ENUM:live,draft" -> (ENUM, ("live", "draft"), "")
    "RESOURCE_ID:customers" -> (RESOURCE_REF, (), "customers")

    Returns:
        The kind, the enum values and the referenced resource

    Raises:
        SchemaError: unknown kind, or ENUM / RESOURCE_ID without argument
    """
    name, _, argument = type_str.strip().partition(":")
    kind = _KIND_NAMES.get(name)
    if kind is None:
        raise SchemaError(f"unknown attribute type {type_str!r}")
    if kind == AttributeKind.ENUM:
        values = tuple(value.strip() for value in argument.split(",") if value.strip())
        if not values:
            raise SchemaError(f"ENUM type without values: {type_str!r}")
        return kind, values, ""
    if kind == AttributeKind.RESOURCE_REF:
        if not argument.strip():
            raise SchemaError(f"RESOURCE_ID type without a target: {type_str!r}")
        return kind, (), argument.strip()
    return kind, (), ""


def parse_attribute(key: str, raw: dict) -> AttributeSpec:
    """Build one AttributeSpec from a validated definition.

    Raises:
        SchemaError: the key is an invalid regex, or the type is malformed
    """
    if is_regex_key(key):
        parse_pattern(key)
    kind, enum_values, target = parse_kind(raw["type"])
    return AttributeSpec(
        key=key,
        kind=kind,
        enum_values=enum_values,
        target=target,
        when=raw.get("when") or "",
        conditions=tuple(raw.get("conditions") or ()),
        usage=raw.get("usage") or "",
        autofill=raw.get("autofill") or "",
        alias_attribute=raw.get("alias_attribute") or "",
    )


def parse_attributes(raw: dict, section: str = "attributes", logger: logging.Logger | None = None) -> tuple[dict[str, AttributeSpec], list[str]]:
    """Build the attribute specs of a resource, skipping invalid ones.

    Args:
        raw: Attribute key -> definition dictionary
        section: Prefix of error messages (usually the resource name)
        logger: Logger for warnings and errors

    Returns:
        The valid specs by key, and the error messages for the skipped ones
    """
    log = logger or get_logger("schema")
    specs: dict[str, AttributeSpec] = {}
    errors: list[str] = []
    for key, definition in raw.items():
        if isinstance(definition, str):
            # shorthand: `name: STRING`
            definition = {"type": definition}  # noqa: PLW2901
        if not isinstance(definition, dict):
            errors.append(format_schema_error(section, key, f"Expected a definition table, got {type(definition).__name__}"))
            continue
        validator = SchemaValidator(definition, f"{section}.{key}", log)
        problems = validator.validate(ATTRIBUTE_SCHEMA)
        validator.warn_unknown_keys(ATTRIBUTE_SCHEMA)
        if not problems:
            try:
                specs[key] = parse_attribute(key, definition)
            except SchemaError as e:
                problems = [format_schema_error(section, key, str(e))]
        errors.extend(problems)

    for error in errors:
        log.error(error)
    return specs, errors


def _parse_crud(raw: dict | None) -> CrudInfo | None:
    if raw is None:
        return None
    names = tuple(param["name"] for param in raw.get("query") or () if isinstance(param, dict) and param.get("name"))
    return CrudInfo(url=raw.get("url", ""), query_parameters=names)


def parse_resource(name: str, raw: dict, logger: logging.Logger | None = None) -> tuple[Resource, list[str]]:
    """Build a Resource from its raw definition.

    Invalid attributes are left out of the resource and reported; the rest of
    the resource is kept.

    Args:
        name: Plural name of the resource
        raw: The definition dictionary
        logger: Logger for warnings and errors

    Returns:
        The resource, and the error messages
    """
    log = logger or get_logger("schema")
    SchemaValidator(raw, name, log).warn_unknown_keys(RESOURCE_SCHEMA)
    errors: list[str] = []
    accepted: dict = {}
    for field in RESOURCE_SCHEMA:
        if field.name not in raw:
            continue
        problems = SchemaValidator({field.name: raw[field.name]}, name, log).validate(SchemaItems(field))
        for problem in problems:
            log.error(problem)
        if problems:
            errors.extend(problems)
        else:
            accepted[field.name] = raw[field.name]

    attributes, attribute_errors = parse_attributes(accepted.get("attributes") or {}, name, log)
    errors.extend(attribute_errors)

    resource = Resource(
        name=name,
        singular_name=accepted.get("singular-name", ""),
        json_api_type=accepted.get("json-api-type", ""),
        alternate_json_api_types=tuple(accepted.get("alternate-json-type-for-aliases") or ()),
        attributes=attributes,
        **{attr: _parse_crud(accepted.get(key)) for attr, key in _CRUD_KEYS.items()},
    )
    return resource, errors
