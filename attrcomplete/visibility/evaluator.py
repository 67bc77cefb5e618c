"""Evaluation of attribute visibility predicates."""

from __future__ import annotations

import re
from functools import reduce
from typing import TYPE_CHECKING, Any

from ..models import PredicateError
from .environment import ABSENT, build_environment
from .expression import (
    ArrayLiteral,
    BinaryOp,
    Expression,
    Identifier,
    IndexAccess,
    Literal,
    MemberAccess,
    UnaryOp,
    compile_expression,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..schema.models import AttributeSpec

__all__ = ["VisibilityEvaluator", "composite_predicate", "evaluate", "rewrite_for_path"]

PLACEHOLDER_NAME = "n"

_CONCRETE_INDEX = re.compile(r"\[(\d+)\]")


def composite_predicate(spec: AttributeSpec) -> Expression | None:
    """Compile the combined `when` and `conditions` of an attribute.

    Args:
        spec: The attribute declaration

    Returns:
        `when AND (c1 OR c2 ...)` with absent parts left out, or None when
        the attribute is always visible

    Raises:
        PredicateError: one of the predicates does not compile
    """
    when = compile_expression(spec.when) if spec.when.strip() else None
    conditions = [compile_expression(source) for source in spec.conditions if source.strip()]
    any_condition = reduce(lambda left, right: BinaryOp("||", left, right), conditions) if conditions else None
    if when is not None and any_condition is not None:
        return BinaryOp("&&", when, any_condition)
    return when if when is not None else any_condition


def _reference_path(node: Expression) -> str | None:
    """Render an access chain as an attribute path ("items[n].type"), None if it isn't one."""
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, MemberAccess):
        base = _reference_path(node.target)
        return None if base is None else f"{base}.{node.name}"
    if isinstance(node, IndexAccess):
        base = _reference_path(node.target)
        if base is None:
            return None
        index = node.index
        if isinstance(index, Identifier) and index.name == PLACEHOLDER_NAME:
            return f"{base}[n]"
        if isinstance(index, Literal) and isinstance(index.value, int):
            return f"{base}[{index.value}]"
    return None


def _placeholder_index(node: IndexAccess, candidate_path: str) -> int | None:
    """Find the concrete index standing for the `[n]` of `node` in the candidate path."""
    reference = _reference_path(node)
    ordinal = 0
    if reference is not None:
        regex = "^" + r"\[(\d+)\]".join(re.escape(part) for part in reference.split("[n]"))
        match = re.match(regex, candidate_path)
        if match is not None:
            return int(match.groups()[-1])
        ordinal = reference.count("[n]") - 1
    concrete = _CONCRETE_INDEX.findall(candidate_path)
    if ordinal < len(concrete):
        return int(concrete[ordinal])
    return None


def rewrite_for_path(node: Expression, candidate_path: str) -> Expression:
    """Prepare a predicate for one concrete attribute.

    Member and index accesses become optional, and every `n` used as an
    index is replaced by the matching index of `candidate_path`.

    Args:
        node: Compiled predicate
        candidate_path: The attribute being decided, e.g. "items[2].sku"

    Returns:
        The rewritten predicate
    """
    if isinstance(node, MemberAccess):
        return MemberAccess(rewrite_for_path(node.target, candidate_path), node.name, optional=True)
    if isinstance(node, IndexAccess):
        index = node.index
        if isinstance(index, Identifier) and index.name == PLACEHOLDER_NAME:
            concrete = _placeholder_index(node, candidate_path)
            if concrete is not None:
                index = Literal(concrete)
        else:
            index = rewrite_for_path(index, candidate_path)
        return IndexAccess(rewrite_for_path(node.target, candidate_path), index, optional=True)
    if isinstance(node, UnaryOp):
        return UnaryOp(node.op, rewrite_for_path(node.operand, candidate_path))
    if isinstance(node, BinaryOp):
        return BinaryOp(node.op, rewrite_for_path(node.left, candidate_path), rewrite_for_path(node.right, candidate_path))
    if isinstance(node, ArrayLiteral):
        return ArrayLiteral(tuple(rewrite_for_path(item, candidate_path) for item in node.items))
    return node


def _is_number(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equals(left: Any, right: Any) -> bool:  # noqa: ANN401
    left = None if left is ABSENT else left
    right = None if right is ABSENT else right
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return bool(left == right)


def _compare(op: str, left: Any, right: Any) -> bool:  # noqa: ANN401
    if left is ABSENT or right is ABSENT or left is None or right is None:
        return False
    if not ((_is_number(left) and _is_number(right)) or (isinstance(left, str) and isinstance(right, str))):
        raise PredicateError(f"cannot compare {type(left).__name__} {op} {type(right).__name__}")
    if op == "<":
        return bool(left < right)
    if op == "<=":
        return bool(left <= right)
    if op == ">":
        return bool(left > right)
    return bool(left >= right)


def _contains(item: Any, container: Any) -> bool:  # noqa: ANN401
    if container is ABSENT or container is None:
        return False
    if isinstance(container, (list, tuple)):
        return any(_equals(item, element) for element in container)
    if isinstance(container, dict):
        try:
            return item in container
        except TypeError as e:
            raise PredicateError(f"cannot look for {type(item).__name__} among object keys") from e
    if isinstance(container, str):
        if not isinstance(item, str):
            raise PredicateError(f"cannot look for {type(item).__name__} in a string")
        return item in container
    raise PredicateError(f"cannot use 'in' on {type(container).__name__}")


def _arithmetic(op: str, left: Any, right: Any) -> Any:  # noqa: ANN401
    if left is ABSENT or right is ABSENT:
        return ABSENT
    if _is_number(left) and _is_number(right):
        return left + right if op == "+" else left - right
    if op == "+" and type(left) is type(right) and isinstance(left, (str, list)):
        return left + right
    raise PredicateError(f"unsupported operands for {op}: {type(left).__name__} and {type(right).__name__}")


def _access(target: Any, key: Any, optional: bool) -> Any:  # noqa: ANN401
    if target is ABSENT or target is None:
        if optional:
            return ABSENT
        raise PredicateError(f"cannot read {key!r} of a missing value")
    if isinstance(target, dict):
        try:
            return target.get(key, ABSENT)
        except TypeError as e:
            raise PredicateError(f"cannot use {type(key).__name__} as an object key") from e
    if isinstance(target, (list, tuple)) and isinstance(key, int) and not isinstance(key, bool):
        return target[key] if -len(target) <= key < len(target) else ABSENT
    if optional:
        return ABSENT
    raise PredicateError(f"cannot read {key!r} of {type(target).__name__}")


def evaluate(node: Expression, env: Mapping[str, Any]) -> Any:  # noqa: ANN401, C901, PLR0911
    """Evaluate an expression; identifiers missing from `env` are ABSENT.

    Raises:
        PredicateError: operands of incompatible types
    """
    if isinstance(node, Literal):
        return node.value
    if isinstance(node, ArrayLiteral):
        return [evaluate(item, env) for item in node.items]
    if isinstance(node, Identifier):
        return env.get(node.name, ABSENT)
    if isinstance(node, MemberAccess):
        return _access(evaluate(node.target, env), node.name, node.optional)
    if isinstance(node, IndexAccess):
        return _access(evaluate(node.target, env), evaluate(node.index, env), node.optional)
    if isinstance(node, UnaryOp):
        operand = evaluate(node.operand, env)
        if node.op == "!":
            return not operand
        if operand is ABSENT:
            return ABSENT
        if not _is_number(operand):
            raise PredicateError(f"cannot negate {type(operand).__name__}")
        return -operand

    op = node.op
    if op == "&&":
        return bool(evaluate(node.left, env)) and bool(evaluate(node.right, env))
    if op == "||":
        return bool(evaluate(node.left, env)) or bool(evaluate(node.right, env))
    left = evaluate(node.left, env)
    right = evaluate(node.right, env)
    if op == "==":
        return _equals(left, right)
    if op == "!=":
        return not _equals(left, right)
    if op == "in":
        return _contains(left, right)
    if op == "not in":
        return not _contains(left, right)
    if op in ("+", "-"):
        return _arithmetic(op, left, right)
    return _compare(op, left, right)


class VisibilityEvaluator:
    """Decides whether conditional attributes apply to the current state.

    Predicates are compiled at most once per evaluator, which lives for one
    completion call.
    """

    def __init__(self, known: Mapping[str, Any], supplied: Mapping[str, Any]) -> None:
        """Build the evaluation environment.

        Args:
            known: Flattened values the server already holds
            supplied: Flattened values from the command line
        """
        self.environment = build_environment(known, supplied)
        self._compiled: dict[str, Expression | None] = {}

    def predicate_for(self, spec: AttributeSpec) -> Expression | None:
        """Return the compiled composite predicate of `spec` (None if unconditional)."""
        if spec.key not in self._compiled:
            self._compiled[spec.key] = composite_predicate(spec)
        return self._compiled[spec.key]

    def is_visible(self, spec: AttributeSpec, candidate_path: str) -> bool:
        """Decide whether `candidate_path`, an instance of `spec`, applies.

        Args:
            spec: The attribute declaration
            candidate_path: Concrete path being offered (placeholders resolved)

        Raises:
            PredicateError: the predicate does not compile or evaluate
        """
        predicate = self.predicate_for(spec)
        if predicate is None:
            return True
        return bool(evaluate(rewrite_for_path(predicate, candidate_path), self.environment))
