"""Headers offered for completion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import Intent
from .models import CompletionRequest

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["DEFAULT_HEADERS", "HeaderCatalog"]

DEFAULT_HEADERS: dict[str, CompletionRequest | None] = {
    "EP-Beta-Features": None,
    "EP-Channel": None,
    "EP-Context-Tag": None,
    "EP-Account-Management-Authentication-Token": None,
    "X-Moltin-Customer-Token": None,
    "X-Moltin-Currency": CompletionRequest(intents=Intent.CURRENCY),
    "X-Moltin-Currencies": None,
}


class HeaderCatalog:
    """Headers offered for completion, and how to complete their values.

    Lookups ignore case; names are offered with the casing they were added with.
    """

    def __init__(self, headers: Mapping[str, CompletionRequest | None] | None = None) -> None:
        """Initialize the catalog.

        Args:
            headers: Header name -> request completing its value (None for free text).
                The standard headers are used when omitted.
        """
        self._requests: dict[str, CompletionRequest | None] = {}
        self._names: dict[str, str] = {}
        self.add(DEFAULT_HEADERS if headers is None else headers)

    def add(self, headers: Mapping[str, CompletionRequest | None]) -> None:
        """Add or replace headers."""
        for name, request in headers.items():
            self._requests[name.lower()] = request
            self._names[name.lower()] = name

    def names(self) -> list[str]:
        """Return the header names, as added."""
        return list(self._names.values())

    def request_for(self, header: str) -> CompletionRequest | None:
        """Return the request completing the value of `header`, if any."""
        return self._requests.get(header.lower())

    def __contains__(self, header: object) -> bool:
        return isinstance(header, str) and header.lower() in self._requests
