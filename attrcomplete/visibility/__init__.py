"""Conditional visibility of attributes."""

from .environment import ABSENT, build_environment
from .evaluator import VisibilityEvaluator, composite_predicate, evaluate, rewrite_for_path
from .expression import compile_expression

__all__ = [
    "ABSENT",
    "VisibilityEvaluator",
    "build_environment",
    "compile_expression",
    "composite_predicate",
    "evaluate",
    "rewrite_for_path",
]
