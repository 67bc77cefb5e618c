"""Completers and the orchestrator dispatching requests to them."""

from .arrays import resolve_placeholders
from .filters import complete_filter, lex
from .headers import HeaderCatalog
from .models import AliasSource, CompletionContext, CompletionRequest, CompletionResult, ResourceSource
from .orchestrator import Completer, complete
from .regex_tree import RegexCompletionTree

__all__ = [
    "AliasSource",
    "Completer",
    "CompletionContext",
    "CompletionRequest",
    "CompletionResult",
    "HeaderCatalog",
    "RegexCompletionTree",
    "ResourceSource",
    "complete",
    "complete_filter",
    "lex",
    "resolve_placeholders",
]
