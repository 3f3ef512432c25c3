"""
Token Types for the Lox front end

Shared between the parser, the resolver and the REPL to avoid circular
dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Union


class TT(Enum):
    """Token Types - lark terminal names map onto these by name"""

    # Single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # One or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: Dict[str, TT] = {
    "and": TT.AND,
    "class": TT.CLASS,
    "else": TT.ELSE,
    "false": TT.FALSE,
    "for": TT.FOR,
    "fun": TT.FUN,
    "if": TT.IF,
    "nil": TT.NIL,
    "or": TT.OR,
    "print": TT.PRINT,
    "return": TT.RETURN,
    "super": TT.SUPER,
    "this": TT.THIS,
    "true": TT.TRUE,
    "var": TT.VAR,
    "while": TT.WHILE,
}

# Every lexeme with a fixed spelling, so anonymous grammar terminals can be
# mapped back without depending on lark's generated names.
FIXED_LEXEMES: Dict[str, TT] = {
    "(": TT.LEFT_PAREN,
    ")": TT.RIGHT_PAREN,
    "{": TT.LEFT_BRACE,
    "}": TT.RIGHT_BRACE,
    ",": TT.COMMA,
    ".": TT.DOT,
    "-": TT.MINUS,
    "+": TT.PLUS,
    ";": TT.SEMICOLON,
    "/": TT.SLASH,
    "*": TT.STAR,
    "!": TT.BANG,
    "!=": TT.BANG_EQUAL,
    "=": TT.EQUAL,
    "==": TT.EQUAL_EQUAL,
    ">": TT.GREATER,
    ">=": TT.GREATER_EQUAL,
    "<": TT.LESS,
    "<=": TT.LESS_EQUAL,
    **KEYWORDS,
}

LiteralValue = Union[float, str, None]


@dataclass(frozen=True)
class Token:
    """Token with position info.

    ``position`` is the absolute offset of the lexeme in the source text, so
    two tokens with the same spelling never compare equal unless they are the
    same scanned token.
    """

    kind: TT
    lexeme: str
    literal: LiteralValue = None
    line: int = 0
    position: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"
