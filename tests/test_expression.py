"""Tests for the predicate language."""

import pytest

from attrcomplete.models import PredicateError
from attrcomplete.visibility import ABSENT, evaluate
from attrcomplete.visibility.expression import (
    ArrayLiteral,
    BinaryOp,
    Identifier,
    IndexAccess,
    Literal,
    MemberAccess,
    UnaryOp,
    compile_expression,
)


def run(source, env=None):
    return evaluate(compile_expression(source), env or {})


class TestParsing:
    """Building the AST."""

    def test_comparison(self):
        """A comparison of an identifier with a string."""
        assert compile_expression("field_type == 'integer'") == BinaryOp("==", Identifier("field_type"), Literal("integer"))

    def test_precedence(self):
        """&& binds tighter than ||, comparisons tighter than &&."""
        node = compile_expression("a == 1 || b == 2 && c")
        assert node == BinaryOp(
            "||",
            BinaryOp("==", Identifier("a"), Literal(1)),
            BinaryOp("&&", BinaryOp("==", Identifier("b"), Literal(2)), Identifier("c")),
        )

    def test_word_operators(self):
        """and, or and not spell &&, || and !."""
        assert compile_expression("not a and b or c") == compile_expression("!a && b || c")

    def test_postfix_chain(self):
        """Members, optional members and indices chain left to right."""
        node = compile_expression("items[n].data?.id")
        assert node == MemberAccess(
            MemberAccess(IndexAccess(Identifier("items"), Identifier("n")), "data"),
            "id",
            optional=True,
        )

    def test_literals(self):
        """Numbers, strings, keywords and arrays."""
        node = compile_expression("[1, 2.5, \"x\", true, nil, null]")
        assert node == ArrayLiteral((Literal(1), Literal(2.5), Literal("x"), Literal(True), Literal(None), Literal(None)))

    def test_escaped_quote(self):
        """Backslash escapes in strings."""
        assert compile_expression(r"'it\'s'") == Literal("it's")

    def test_not_in(self):
        """not in is a single operator."""
        assert compile_expression("a not in [1]") == BinaryOp("not in", Identifier("a"), ArrayLiteral((Literal(1),)))

    def test_unary_minus(self):
        """Negative numbers parse as negation."""
        assert compile_expression("-1") == UnaryOp("-", Literal(1))

    @pytest.mark.parametrize("source", ["", "a ==", "(a", "a b", "a.", "'open", "a # b", "[1, 2"])
    def test_malformed(self, source):
        """Malformed predicates raise PredicateError."""
        with pytest.raises(PredicateError):
            compile_expression(source)


class TestEvaluation:
    """Evaluating against an environment."""

    def test_equality(self):
        """Strings compare by value."""
        assert run("field_type == 'integer'", {"field_type": "integer"}) is True
        assert run("field_type == 'integer'", {"field_type": "string"}) is False

    def test_absent_is_nil(self):
        """A missing identifier equals nil."""
        assert run("missing") is ABSENT
        assert run("missing == nil") is True
        assert run("missing != nil") is False
        assert run("missing == 'x'") is False

    def test_absent_ordering_is_false(self):
        """Ordering against a missing value is false both ways."""
        assert run("missing > 1") is False
        assert run("missing <= 1") is False

    def test_absent_container(self):
        """Nothing is in a missing container."""
        assert run("'a' in missing") is False
        assert run("'a' not in missing") is True

    def test_bool_is_not_number(self):
        """true doesn't equal 1."""
        assert run("flag == 1", {"flag": True}) is False
        assert run("flag == true", {"flag": True}) is True

    def test_numbers(self):
        """Arithmetic and ordering on numbers."""
        assert run("a + 2 > 4", {"a": 3}) is True
        assert run("a - 2 >= 1.5", {"a": 3}) is False
        assert run("-a < 0", {"a": 3}) is True

    def test_string_concatenation(self):
        """+ joins strings."""
        assert run("a + 'b' == 'ab'", {"a": "a"}) is True

    def test_membership(self):
        """in over arrays, strings and objects."""
        assert run("a in ['x', 'y']", {"a": "y"}) is True
        assert run("'ell' in a", {"a": "hello"}) is True
        assert run("'k' in a", {"a": {"k": 1}}) is True
        assert run("a not in ['x']", {"a": "y"}) is True

    def test_nested_access(self):
        """Members and indices read nested values."""
        env = {"items": {0: {"type": "bundle"}}, "tags": ["a", "b"]}
        assert run("items[0].type == 'bundle'", env) is True
        assert run("tags[1] == 'b'", env) is True
        assert run("tags[5] == nil", env) is True

    def test_missing_intermediate_raises(self):
        """A plain member access on a missing value fails."""
        with pytest.raises(PredicateError):
            run("a.b.c == 1", {})

    def test_optional_member(self):
        """?. yields ABSENT instead of failing."""
        assert run("a?.b == nil", {}) is True

    def test_short_circuit(self):
        """|| and && don't evaluate the right side needlessly."""
        assert run("true || a.b.c > 1", {}) is True
        assert run("false && a.b.c > 1", {}) is False

    @pytest.mark.parametrize(
        ("source", "env"),
        [
            ("a > 'x'", {"a": 1}),
            ("a < b", {"a": [1], "b": [2]}),
            ("1 in a", {"a": "123"}),
            ("a in b", {"a": 1, "b": 2}),
            ("a - 'x'", {"a": "y"}),
            ("-a", {"a": "y"}),
            ("tags in meta", {"tags": ["a"], "meta": {"a": 1}}),
            ("meta[tags] == 1", {"tags": ["a"], "meta": {"a": 1}}),
            ("meta[inner] == 1", {"inner": {"b": 2}, "meta": {"a": 1}}),
        ],
    )
    def test_type_mismatch(self, source, env):
        """Incompatible operands raise PredicateError."""
        with pytest.raises(PredicateError):
            run(source, env)
