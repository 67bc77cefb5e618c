"""Configuration wrapper providing typed access with schema defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging

    from .validation import SchemaItems

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_STRINGS", "BOOL_TRUE_STRINGS", "Configuration", "coerce_to_bool"]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """Settings dictionary with typed accessors.

    Values missing from the dictionary fall back to the defaults declared by
    the schema given at construction time.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: SchemaItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Optional list of SchemaField definitions for automatic defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema_defaults: dict[str, ConfigValueType] = {}
        if schema:
            self.set_schema(schema)

    def set_schema(self, schema: SchemaItems) -> None:
        """Set the schema used for default value lookups."""
        self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults

        Returns:
            The value, schema default, or provided default
        """
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        if name in self._schema_defaults:
            return self._schema_defaults[name]
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, see coerce_to_bool for the accepted spellings."""
        return coerce_to_bool(self.get(name), default)

    def get_list(self, name: str, default: list | None = None) -> list:
        """Get a list value, wrapping a lone scalar into a one element list."""
        value = self.get(name)
        if value is None:
            return list(default or [])
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]
