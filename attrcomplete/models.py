"""Shared enums and exceptions."""

from enum import IntFlag, StrEnum

__all__ = [
    "AttributeCompletionError",
    "AttributeKind",
    "Intent",
    "LexError",
    "PredicateError",
    "SchemaError",
    "ShellDirective",
    "Verb",
]


class AttributeCompletionError(Exception):
    """Base class for errors raised by the completion engine."""


class SchemaError(AttributeCompletionError):
    """An attribute declaration cannot be used (bad regex key, bare dot...)."""


class PredicateError(AttributeCompletionError):
    """A visibility predicate failed to compile or to evaluate."""


class LexError(AttributeCompletionError):
    """Filter text does not match any token legal in the current lexer state."""


class AttributeKind(StrEnum):
    """Kind tag of an attribute, driving value completion."""

    STRING = "STRING"
    BOOL = "BOOL"
    ENUM = "ENUM"
    URL = "URL"
    RESOURCE_REF = "RESOURCE_ID"
    CURRENCY = "CURRENCY"
    FILE = "FILE"
    SINGULAR_RESOURCE_NAME = "SINGULAR_RESOURCE_TYPE"
    JSON_API_TYPE_NAME = "JSON_API_TYPE"
    CONDITIONAL = "CONDITIONAL"


class Intent(IntFlag):
    """What the caller wants completed. Flags may be combined."""

    PLURAL_RESOURCE = 1
    SINGULAR_RESOURCE = 2
    ATTRIBUTE_KEY = 4
    ATTRIBUTE_VALUE = 8
    QUERY_PARAM_KEY = 16
    QUERY_PARAM_VALUE = 32
    CRUD_ACTION = 64
    ALIAS = 128
    LOGIN_API = 256
    LOGIN_CLIENT_ID = 512
    LOGIN_CLIENT_SECRET = 1024
    LOGIN_ACCOUNT_MANAGEMENT_KEY = 2048
    HEADER_KEY = 4096
    HEADER_VALUE = 8192
    CURRENCY = 16384
    BOOL = 32768


class Verb(IntFlag):
    """Operation the command line is building."""

    NONE = 0
    GET = 1
    CREATE = 2
    UPDATE = 4
    DELETE = 8
    GET_ALL = 16
    DELETE_ALL = 32


class ShellDirective(IntFlag):
    """Presentation hints returned along with the candidates."""

    DEFAULT = 0
    NO_SPACE = 2
    NO_FILE_COMP = 4
    FILTER_FILE_EXT = 8
