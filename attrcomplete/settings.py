"""Completion settings: schema, defaults and TOML loading."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from .config import Configuration
from .constants import FILE_EXTENSIONS
from .logging_setup import get_logger
from .validation import SchemaField, SchemaItems, SchemaValidator

__all__ = ["SETTINGS_SCHEMA", "SETTINGS_SECTION", "default_settings", "load_settings", "validate_settings"]

SETTINGS_SECTION = "completion"


def _validate_extensions(value: list) -> list[str]:
    return [f"Extension {ext!r} must not start with a dot" for ext in value if isinstance(ext, str) and ext.startswith(".")]


SETTINGS_SCHEMA = SchemaItems(
    SchemaField("no_aliases", bool, default=False, description="Never offer aliases as values"),
    SchemaField("allow_templates", bool, default=False, description="Offer template function snippets as values"),
    SchemaField("skip_visibility", bool, default=False, description="Offer every attribute regardless of its predicate"),
    SchemaField("escape_spaces", bool, default=True, description="Escape spaces in candidates for the shell"),
    SchemaField(
        "file_extensions",
        list,
        default=list(FILE_EXTENSIONS),
        description="Extensions offered for FILE attributes",
        validator=_validate_extensions,
    ),
)


def validate_settings(data: dict, logger: logging.Logger) -> list[str]:
    """Check a settings table, logging unknown keys.

    Returns:
        List of error messages
    """
    validator = SchemaValidator(data, SETTINGS_SECTION, logger)
    errors = validator.validate(SETTINGS_SCHEMA)
    validator.warn_unknown_keys(SETTINGS_SCHEMA)
    return errors


def default_settings(logger: logging.Logger | None = None) -> Configuration:
    """Return settings holding only the schema defaults."""
    return Configuration(logger=logger or get_logger("settings"), schema=SETTINGS_SCHEMA)


def load_settings(path: str | Path, logger: logging.Logger | None = None) -> Configuration:
    """Load the [completion] table of a TOML file.

    A missing file or table yields the defaults. Invalid entries are logged
    and dropped so that completion keeps working with the defaults.

    Args:
        path: TOML file to read
        logger: Logger for warnings (a "settings" logger if omitted)

    Returns:
        The settings
    """
    log = logger or get_logger("settings")
    filename = Path(path).expanduser()
    if not filename.exists():
        log.info("No settings file at %s, using defaults", filename)
        return default_settings(log)

    with filename.open("rb") as f:
        try:
            document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.error("Can't parse %s: %s", filename, e)
            return default_settings(log)

    section = document.get(SETTINGS_SECTION, {})
    if not isinstance(section, dict):
        log.error("[%s] in %s must be a table", SETTINGS_SECTION, filename)
        return default_settings(log)

    SchemaValidator(section, SETTINGS_SECTION, log).warn_unknown_keys(SETTINGS_SCHEMA)
    accepted = {}
    for name, value in section.items():
        field = SETTINGS_SCHEMA.get(name)
        if field is None:
            continue
        errors = SchemaValidator({name: value}, SETTINGS_SECTION, log).validate(SchemaItems(field))
        for error in errors:
            log.error(error)
        if not errors:
            accepted[name] = value
    log.debug("Loaded settings from %s", filename)
    return Configuration(accepted, logger=log, schema=SETTINGS_SCHEMA)
