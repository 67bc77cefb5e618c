"""Predicate language used by `when` and `conditions`.

A small expression language with an explicit AST::

    field_type == 'integer' && !(min_value > 10)
    items[n].type in ['bundle', 'kit']
    relationships?.parent.data.id != nil

Precedence, loosest first: ``||``/``or``, ``&&``/``and``, ``==`` ``!=``,
``<`` ``<=`` ``>`` ``>=`` ``in`` ``not in``, ``+`` ``-``, unary ``!``/``not``/``-``,
then postfix ``.name``, ``?.name`` and ``[index]``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..models import PredicateError

__all__ = [
    "ArrayLiteral",
    "BinaryOp",
    "Expression",
    "Identifier",
    "IndexAccess",
    "Literal",
    "MemberAccess",
    "UnaryOp",
    "compile_expression",
]


@dataclass(frozen=True)
class Literal:
    """A constant: number, string, boolean or nil (None)."""

    value: Any


@dataclass(frozen=True)
class ArrayLiteral:
    """``[a, b, c]``."""

    items: tuple[Expression, ...]


@dataclass(frozen=True)
class Identifier:
    """A top-level attribute name."""

    name: str


@dataclass(frozen=True)
class MemberAccess:
    """``target.name``; optional accesses yield ABSENT on a missing target."""

    target: Expression
    name: str
    optional: bool = False


@dataclass(frozen=True)
class IndexAccess:
    """``target[index]``."""

    target: Expression
    index: Expression
    optional: bool = False


@dataclass(frozen=True)
class UnaryOp:
    """``!x``, ``not x`` (op "!") or ``-x``."""

    op: str
    operand: Expression


@dataclass(frozen=True)
class BinaryOp:
    """Infix operation; "and"/"or" are normalized to "&&"/"||"."""

    op: str
    left: Expression
    right: Expression


Expression = Literal | ArrayLiteral | Identifier | MemberAccess | IndexAccess | UnaryOp | BinaryOp

_TOKEN_REGEX = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<number>\d+(?:\.\d+)?)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<op>\?\.|==|!=|<=|>=|&&|\|\||[<>!+\-.\[\](),])
    |(?P<name>[A-Za-z_$][A-Za-z0-9_$]*)
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", "'": "'", '"': '"'}

_KEYWORD_LITERALS = {"true": True, "false": False, "nil": None, "null": None}

_COMPARISONS = ("<", "<=", ">", ">=")


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    pos: int


def _unquote(text: str) -> str:
    body = text[1:-1]
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def _tokenize(source: str) -> list[_Token]:
    tokens = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_REGEX.match(source, pos)
        if match is None:
            raise PredicateError(f"unexpected character {source[pos]!r} at offset {pos} in: {source}")
        kind = match.lastgroup or ""
        if kind != "space":
            tokens.append(_Token(kind, match.group(0), pos))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive descent parser producing an Expression."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = _tokenize(source)
        self.pos = 0

    def _peek(self, offset: int = 0) -> _Token | None:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def _accept(self, *texts: str) -> str | None:
        token = self._peek()
        if token is not None and token.kind in ("op", "name") and token.text in texts:
            self.pos += 1
            return token.text
        return None

    def _expect(self, text: str) -> None:
        if self._accept(text) is None:
            token = self._peek()
            found = repr(token.text) if token else "end of input"
            raise PredicateError(f"expected {text!r}, found {found} in: {self.source}")

    def parse(self) -> Expression:
        if not self.tokens:
            raise PredicateError("empty predicate")
        node = self._or()
        token = self._peek()
        if token is not None:
            raise PredicateError(f"unexpected {token.text!r} at offset {token.pos} in: {self.source}")
        return node

    def _or(self) -> Expression:
        node = self._and()
        while self._accept("||", "or"):
            node = BinaryOp("||", node, self._and())
        return node

    def _and(self) -> Expression:
        node = self._equality()
        while self._accept("&&", "and"):
            node = BinaryOp("&&", node, self._equality())
        return node

    def _equality(self) -> Expression:
        node = self._relation()
        while op := self._accept("==", "!="):
            node = BinaryOp(op, node, self._relation())
        return node

    def _relation(self) -> Expression:
        node = self._additive()
        while True:
            if op := self._accept(*_COMPARISONS, "in"):
                node = BinaryOp(op, node, self._additive())
            elif self._is_not_in():
                self.pos += 2
                node = BinaryOp("not in", node, self._additive())
            else:
                return node

    def _is_not_in(self) -> bool:
        first, second = self._peek(), self._peek(1)
        return first is not None and second is not None and (first.kind, first.text, second.kind, second.text) == ("name", "not", "name", "in")

    def _additive(self) -> Expression:
        node = self._unary()
        while op := self._accept("+", "-"):
            node = BinaryOp(op, node, self._unary())
        return node

    def _unary(self) -> Expression:
        if self._accept("!", "not"):
            return UnaryOp("!", self._unary())
        if self._accept("-"):
            return UnaryOp("-", self._unary())
        return self._postfix()

    def _postfix(self) -> Expression:
        node = self._primary()
        while True:
            if op := self._accept(".", "?."):
                name = self._peek()
                if name is None or name.kind != "name":
                    raise PredicateError(f"expected a member name after {op!r} in: {self.source}")
                self.pos += 1
                node = MemberAccess(node, name.text, optional=op == "?.")
            elif self._accept("["):
                index = self._or()
                self._expect("]")
                node = IndexAccess(node, index)
            else:
                return node

    def _primary(self) -> Expression:
        token = self._peek()
        if token is None:
            raise PredicateError(f"unexpected end of predicate: {self.source}")
        self.pos += 1
        if token.kind == "number":
            return Literal(float(token.text) if "." in token.text else int(token.text))
        if token.kind == "string":
            return Literal(_unquote(token.text))
        if token.kind == "name":
            if token.text in _KEYWORD_LITERALS:
                return Literal(_KEYWORD_LITERALS[token.text])
            return Identifier(token.text)
        if token.text == "(":
            node = self._or()
            self._expect(")")
            return node
        if token.text == "[":
            items: list[Expression] = []
            if not self._accept("]"):
                items.append(self._or())
                while self._accept(","):
                    items.append(self._or())
                self._expect("]")
            return ArrayLiteral(tuple(items))
        raise PredicateError(f"unexpected {token.text!r} at offset {token.pos} in: {self.source}")


def compile_expression(source: str) -> Expression:
    """Parse predicate source text into an Expression.

    Raises:
        PredicateError: the text is not a valid predicate
    """
    return _Parser(source).parse()
