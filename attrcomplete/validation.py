"""Declarative schemas for raw definition dictionaries.

Provides SchemaField/SchemaItems to describe the expected keys of a
dictionary (an attribute definition, the completion settings table) and a
SchemaValidator that reports type errors, missing keys, invalid choices and
unknown keys with typo suggestions.

Used by:
- attrcomplete.schema.parsing to vet attribute definitions before building specs
- attrcomplete.config to check the [completion] settings table
"""

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "SchemaField",
    "SchemaItems",
    "SchemaValidator",
    "format_schema_error",
]


@dataclass
class SchemaField:
    """Describes one expected key of a definition dictionary.

    Attributes:
        name: The key name
        field_type: Expected type (str, int, bool, list, dict) or tuple of types for union
        required: Whether the key is required
        default: Default value if not provided
        description: Human-readable description for error messages
        choices: List of valid values for enum-like keys
        validator: Custom validator returning a list of error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    required: bool = False
    default: Any = None
    description: str = ""
    choices: list | None = None
    validator: Callable[[Any], list[str]] | None = None

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'str', 'str or list')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class SchemaItems(list):
    """A list of SchemaField items with cached lookup by name."""

    def __init__(self, *args: SchemaField) -> None:
        super().__init__(args)
        self._cache: dict[str, SchemaField] = {}

    def get(self, name: str) -> SchemaField | None:
        """Get a SchemaField by name.

        Args:
            name: The field name to look up

        Returns:
            The SchemaField if found, None otherwise
        """
        v = self._cache.get(name)
        if not v:
            for prop in self:
                if prop.name == name:
                    v = prop
                    self._cache[name] = v
                    break
        return v


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Return the closest known key to `unknown_key`, or None."""
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


def format_schema_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a schema error message.

    Args:
        section: Where the definition lives (resource name, settings table...)
        field: Key that has the error
        message: Error description
        suggestion: Optional hint for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{section}] Error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class SchemaValidator:
    """Validates a definition dictionary against a SchemaItems list."""

    def __init__(self, data: dict, section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            data: The dictionary to validate
            section: Name used to prefix error messages
            logger: Logger instance for warnings
        """
        self.data = data
        self.section = section
        self.log = logger

    def validate(self, schema: SchemaItems) -> list[str]:
        """Validate the dictionary against `schema`.

        Args:
            schema: List of SchemaField definitions

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []

        for field_def in schema:
            value = self.data.get(field_def.name)

            if field_def.required and value is None:
                errors.append(
                    format_schema_error(
                        self.section,
                        field_def.name,
                        "Missing required key",
                        f"Add '{field_def.name}' ({field_def.type_name})",
                    )
                )
                continue

            if value is None:
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.choices is not None and value not in field_def.choices:
                choices_str = ", ".join(repr(c) for c in field_def.choices)
                errors.append(
                    format_schema_error(
                        self.section,
                        field_def.name,
                        f"Invalid value {value!r}",
                        f"Valid options: {choices_str}",
                    )
                )
                continue

            if field_def.validator:
                errors.extend(format_schema_error(self.section, field_def.name, message) for message in field_def.validator(value))

        return errors

    def _check_type(self, field_def: SchemaField, value: Any) -> str | None:  # noqa: ANN401
        """Check that `value` has the declared type.

        Returns:
            Error message if type mismatch, None otherwise
        """
        expected = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        for single_type in expected:
            if single_type is bool:
                if isinstance(value, bool) or (isinstance(value, str) and value.lower() in BOOL_STRINGS):
                    return None
            elif single_type is int:
                if isinstance(value, int) and not isinstance(value, bool):
                    return None
            elif isinstance(value, single_type):
                return None
        return format_schema_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
        )

    def warn_unknown_keys(self, schema: SchemaItems) -> list[str]:
        """Log warnings for keys the schema does not declare.

        Args:
            schema: List of SchemaField definitions

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = [f.name for f in schema]

        for key in self.data:
            if key in known_keys:
                continue

            similar = _find_similar_key(key, known_keys)
            if similar:
                msg = f"[{self.section}] Unknown key '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.section}] Unknown key '{key}' - will be ignored"

            self.log.warning(msg)
            warnings.append(msg)

        return warnings
