"""treelox: a tree-walking Lox interpreter."""

from .evaluator import Interpreter
from .parser import parse_source, tokenize
from .resolver import resolve
from .runner import run

__all__ = [
    "Interpreter",
    "parse_source",
    "resolve",
    "run",
    "tokenize",
]
