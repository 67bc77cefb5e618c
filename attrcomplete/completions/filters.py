"""Completion of filter query values.

Filters chain operator calls with colons::

    eq(status,paid):like(name,'foo*'):in(currency,"USD","EUR")

Binary operators (eq, like, gt, ge, lt, le) take a field and exactly one
value, the vararg operator (in) takes a field and any number of values.
The partial text is lexed by a small state machine and the next fragment is
proposed from the last token or two. Every candidate is a whole-line
replacement of the text typed so far.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..constants import FILTER_IMPLICIT_ATTRIBUTES, FILTER_OPERATORS
from ..models import LexError

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = ["LexState", "LexedToken", "TokenType", "complete_filter", "lex"]


class LexState(Enum):
    """Lexer states."""

    REGULAR = "regular"
    FILTER_OP = "filterOp"
    SINGLE_QUOTE = "singleQuote"
    DOUBLE_QUOTE = "doubleQuote"


class TokenType(Enum):
    """Token types, in the priority order the lexer tries them."""

    CHAIN = "chain"
    BINARY_OP = "binary_op"
    VARARG_OP = "vararg_op"
    RIGHT_PAREN = "right_paren"
    COMMA = "comma"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    SINGLE_QUOTED_CONTENTS = "single_quoted_contents"
    DOUBLE_QUOTED_CONTENTS = "double_quoted_contents"
    RAW_LITERAL = "raw_literal"


_R = LexState.REGULAR
_F = LexState.FILTER_OP
_SQ = LexState.SINGLE_QUOTE
_DQ = LexState.DOUBLE_QUOTE

# token type -> (regex, {state before: state after})
_TOKEN_RULES: dict[TokenType, tuple[re.Pattern[str], dict[LexState, LexState]]] = {
    TokenType.CHAIN: (re.compile(r"\s*:"), {_R: _R}),
    TokenType.BINARY_OP: (re.compile(r"\s*(eq|like|gt|ge|lt|le)\s*\("), {_R: _F}),
    TokenType.VARARG_OP: (re.compile(r"\s*(in)\s*\("), {_R: _F}),
    TokenType.RIGHT_PAREN: (re.compile(r"\s*\)"), {_F: _R}),
    TokenType.COMMA: (re.compile(r"\s*,"), {_F: _F}),
    TokenType.SINGLE_QUOTE: (re.compile(r"\s*'"), {_F: _SQ, _SQ: _F}),
    TokenType.DOUBLE_QUOTE: (re.compile(r'\s*"'), {_F: _DQ, _DQ: _F}),
    TokenType.SINGLE_QUOTED_CONTENTS: (re.compile(r"\s*([^\\']|\\')+"), {_SQ: _SQ}),
    TokenType.DOUBLE_QUOTED_CONTENTS: (re.compile(r'\s*([^\\"]|\\")+'), {_DQ: _DQ}),
    # Incomplete operator names and field names lex as raw literals
    TokenType.RAW_LITERAL: (re.compile(r"\s*[a-zA-Z0-9@$_*.{}| +:/-]+"), {_R: _R, _F: _F}),
}

_OPERATORS = (TokenType.BINARY_OP, TokenType.VARARG_OP)
_QUOTE_CONTENTS = (TokenType.SINGLE_QUOTED_CONTENTS, TokenType.DOUBLE_QUOTED_CONTENTS)
_QUOTE_CHARS = {LexState.SINGLE_QUOTE: "'", LexState.DOUBLE_QUOTE: '"'}


@dataclass(frozen=True)
class LexedToken:
    """A token and the lexer state around it.

    Attributes:
        token_type: What was matched
        text: The matched text, leading whitespace included
        whole_match: All the text consumed up to and including this token
        state_before: Lexer state the token was read in
        state_after: Lexer state after the token
    """

    token_type: TokenType
    text: str
    whole_match: str
    state_before: LexState
    state_after: LexState


def lex(text: str) -> list[LexedToken]:
    """Split filter text into tokens.

    Args:
        text: The filter typed so far (surrounding spaces are ignored)

    Returns:
        The tokens, in order

    Raises:
        LexError: some text cannot be matched in the state reached
    """
    state = LexState.REGULAR
    remaining = text.strip(" ")
    consumed = ""
    tokens: list[LexedToken] = []

    while remaining:
        for token_type, (regex, transitions) in _TOKEN_RULES.items():
            next_state = transitions.get(state)
            if next_state is None:
                continue
            match = regex.match(remaining)
            if match is None or not match.group(0):
                continue
            matched = match.group(0)
            consumed += matched
            remaining = remaining[len(matched) :]
            tokens.append(LexedToken(token_type, matched, consumed, state, next_state))
            state = next_state
            break
        else:
            raise LexError(f"could not lex [{text}], remaining [{remaining}]")

    return tokens


def _governing_operator(tokens: list[LexedToken]) -> tuple[LexedToken | None, int]:
    """Find the most recent operator token and count the commas after it."""
    operator = None
    commas = 0
    for token in tokens:
        if token.token_type in _OPERATORS:
            operator = token
            commas = 0
        elif token.token_type == TokenType.COMMA:
            commas += 1
    return operator, commas


def _closing(text: str, suffix: str, operator: LexedToken | None, commas: int) -> list[str]:
    """Close the current value, and offer another one when the operator allows it."""
    if operator is not None and operator.token_type == TokenType.BINARY_OP and commas >= 1:
        return [f"{text}{suffix})"]
    return [f"{text}{suffix})", f"{text}{suffix},"]


def complete_filter(text: str, attribute_names: Iterable[str]) -> list[str]:
    """Propose the next fragment of a filter query.

    Args:
        text: The filter typed so far
        attribute_names: Filterable fields of the resource (id, created_at
            and updated_at are always added)

    Returns:
        Whole-line candidates; the operator list when the text can't be lexed
    """
    try:
        tokens = lex(text)
    except LexError:
        return list(FILTER_OPERATORS)
    if not tokens:
        return list(FILTER_OPERATORS)

    fields = list(dict.fromkeys([*attribute_names, *FILTER_IMPLICIT_ATTRIBUTES]))
    operator, commas = _governing_operator(tokens)
    last = tokens[-1]
    # values are closed on the text as typed, spaces inside quotes included
    previous = tokens[-2] if len(tokens) > 1 else None
    typed = last.whole_match

    if last.state_before in _QUOTE_CHARS:
        if last.token_type in _QUOTE_CONTENTS:
            return _closing(text, _QUOTE_CHARS[last.state_before], operator, commas)
        return _closing(text, "", operator, commas)

    if last.token_type in _OPERATORS:
        return [f"{typed}{name}," for name in fields]

    if last.token_type == TokenType.CHAIN:
        return [typed + op for op in FILTER_OPERATORS]

    if last.token_type == TokenType.RIGHT_PAREN:
        return [f"{typed}:"]

    if last.token_type == TokenType.RAW_LITERAL:
        if last.state_before == LexState.REGULAR:
            # partial operator name, the shell filters by prefix
            prefix = previous.whole_match if previous is not None else ""
            return [prefix + op for op in FILTER_OPERATORS]
        if previous is not None and previous.token_type in _OPERATORS:
            return [f"{previous.whole_match}{name}," for name in fields]
        if previous is not None and previous.token_type == TokenType.COMMA:
            # unquoted value: a binary operator is complete after it
            if operator is not None and operator.token_type == TokenType.VARARG_OP:
                return [f"{text})", f"{text},"]
            return [f"{text})"]

    return []
