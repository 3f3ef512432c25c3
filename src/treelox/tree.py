"""AST node classes produced by the parser and walked by the resolver and evaluator.

Nodes compare and hash by identity (``eq=False``) so they can key the
resolver's side table: two textually identical references at different
places in the source are different keys.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, List, Optional, Union
from typing_extensions import TypeAlias

from .token_types import Token
from .types import LoxValue


# ---------- Expressions ----------

@dataclass(eq=False)
class Literal:
    value: LoxValue

@dataclass(eq=False)
class Variable:
    name: Token

@dataclass(eq=False)
class Assign:
    name: Token
    value: 'Expr'

@dataclass(eq=False)
class Binary:
    left: 'Expr'
    operator: Token
    right: 'Expr'

@dataclass(eq=False)
class Logical:
    left: 'Expr'
    operator: Token
    right: 'Expr'

@dataclass(eq=False)
class Unary:
    operator: Token
    right: 'Expr'

@dataclass(eq=False)
class Call:
    callee: 'Expr'
    paren: Token                  # closing paren, for error locations
    arguments: List['Expr']

@dataclass(eq=False)
class Get:
    object: 'Expr'
    name: Token

@dataclass(eq=False)
class Set:
    object: 'Expr'
    name: Token
    value: 'Expr'

@dataclass(eq=False)
class This:
    keyword: Token

@dataclass(eq=False)
class Super:
    keyword: Token
    method: Token

@dataclass(eq=False)
class Grouping:
    expression: 'Expr'

Expr: TypeAlias = Union[Literal, Variable, Assign, Binary, Logical, Unary, Call, Get, Set, This, Super, Grouping]


# ---------- Statements ----------

@dataclass(eq=False)
class ExpressionStmt:
    expression: Expr

@dataclass(eq=False)
class PrintStmt:
    expression: Expr

@dataclass(eq=False)
class VarStmt:
    name: Token
    initializer: Optional[Expr]

@dataclass(eq=False)
class BlockStmt:
    statements: List['Stmt']

@dataclass(eq=False)
class IfStmt:
    condition: Expr
    then_branch: 'Stmt'
    else_branch: Optional['Stmt']

@dataclass(eq=False)
class WhileStmt:
    condition: Expr
    body: 'Stmt'

@dataclass(eq=False)
class FunctionStmt:
    name: Token
    params: List[Token]
    body: List['Stmt']

@dataclass(eq=False)
class ReturnStmt:
    keyword: Token
    value: Optional[Expr]

@dataclass(eq=False)
class ClassStmt:
    name: Token
    superclass: Optional[Variable]
    methods: List[FunctionStmt]

Stmt: TypeAlias = Union[
    ExpressionStmt, PrintStmt, VarStmt, BlockStmt, IfStmt, WhileStmt, FunctionStmt, ReturnStmt, ClassStmt
]

Node: TypeAlias = Union[Expr, Stmt]

_TOKEN_FIELDS = ('name', 'operator', 'paren', 'keyword')

def node_token(node: Node) -> Optional[Token]:
    """Return the token that best locates ``node`` in the source, if it has one."""
    for attr in _TOKEN_FIELDS:
        tok = getattr(node, attr, None)
        if isinstance(tok, Token):
            return tok

    return None

def node_label(node: Node) -> str:
    return type(node).__name__

def dump(node: Union[Node, List[Any]], indent: str = '  ') -> str:
    """Return a pretty-printed, indented rendering of a node or statement list."""
    def _render(value: Any, level: int) -> List[str]:
        pad = indent * level

        if isinstance(value, list):
            lines: List[str] = []
            for item in value:
                lines.extend(_render(item, level))
            return lines

        if isinstance(value, Token):
            return [f"{pad}{value.kind.name.lower()}  {value.lexeme}"]

        if not isinstance(value, _NODE_TYPES):
            return [f"{pad}{value!r}"]

        lines = [f"{pad}{node_label(value)}"]
        for f in fields(value):
            child = getattr(value, f.name)
            if child is None:
                continue
            lines.extend(_render(child, level + 1))
        return lines

    return "\n".join(_render(node, 0)) + "\n"

_NODE_TYPES = (
    Literal, Variable, Assign, Binary, Logical, Unary, Call, Get, Set, This, Super, Grouping,
    ExpressionStmt, PrintStmt, VarStmt, BlockStmt, IfStmt, WhileStmt, FunctionStmt, ReturnStmt, ClassStmt,
)
