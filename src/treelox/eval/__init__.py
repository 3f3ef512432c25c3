"""Evaluator helper modules for the treelox interpreter."""

__all__ = [
    "common",
    "control",
    "expr",
    "fn",
    "helpers",
    "objects",
]
