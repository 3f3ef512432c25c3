"""Lark front end: source text -> token stream -> AST statements.

The grammar lives next to this module in ``grammar.lark``; the LALR parse
tree is turned into the dataclass AST of ``tree.py`` by ``AstBuilder``.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from lark import Lark, Transformer
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .token_types import FIXED_LEXEMES, TT, Token
from .tree import (
    Assign,
    Binary,
    BlockStmt,
    Call,
    ClassStmt,
    Expr,
    ExpressionStmt,
    FunctionStmt,
    Get,
    Grouping,
    IfStmt,
    Literal,
    Logical,
    PrintStmt,
    ReturnStmt,
    Set,
    Stmt,
    Super,
    This,
    Unary,
    VarStmt,
    Variable,
    WhileStmt,
)
from .types import LoxBool, LoxNil, LoxNumber, LoxString, ParseError

GRAMMAR_PATH = Path(__file__).resolve().with_name("grammar.lark")

MAX_ARGS = 255

_PARSER: Optional[Lark] = None

def make_parser() -> Lark:
    """Build (once) the LALR parser for the Lox grammar."""
    global _PARSER

    if _PARSER is None:
        grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
        _PARSER = Lark(grammar, parser="lalr", lexer="basic", maybe_placeholders=True)

    return _PARSER

def to_token(tok: LarkToken) -> Token:
    text = str(tok)
    kind = FIXED_LEXEMES.get(text) or TT[tok.type]
    literal: Any = None

    if kind == TT.NUMBER:
        literal = float(text)
    elif kind == TT.STRING:
        literal = text[1:-1]

    return Token(kind, text, literal, tok.line or 0, tok.start_pos or 0, tok.column or 0)

def _error_at(tok: Token, message: str) -> ParseError:
    return ParseError(message, tok.line, tok.column, where=f" at '{tok.lexeme}'")

def _from_lark_error(exc: UnexpectedInput) -> ParseError:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)

    if line is not None and line < 0:
        line = None

    if isinstance(exc, UnexpectedCharacters):
        char = exc.char
        if char == '"':
            return ParseError("Unterminated string.", line, column)
        return ParseError(f"Unexpected character '{char}'.", line, column)

    if isinstance(exc, UnexpectedToken):
        tok = exc.token
        if tok.type == "$END":
            return ParseError("Unexpected end of input.", line, column, where=" at end")
        return ParseError("Unexpected token.", line, column, where=f" at '{tok}'")

    return ParseError(str(exc), line, column)


class AstBuilder(Transformer):
    """Turn the lark parse tree into ``tree.py`` nodes.

    Methods receive the list of children (lark convention); optional parts
    of a rule arrive as ``None`` placeholders.
    """

    # ---- declarations ----
    def start(self, c: List[Stmt]) -> List[Stmt]:
        return list(c)

    def class_decl(self, c):
        name, superclass, *methods = c
        parent = Variable(to_token(superclass)) if superclass is not None else None
        return ClassStmt(to_token(name), parent, list(methods))

    def fun_decl(self, c):
        return c[0]

    def function(self, c):
        name, params, body = c
        return FunctionStmt(to_token(name), params or [], body.statements)

    def parameters(self, c):
        params = [to_token(p) for p in c]

        if len(params) > MAX_ARGS:
            raise _error_at(params[MAX_ARGS], f"Can't have more than {MAX_ARGS} parameters.")

        return params

    def var_decl(self, c):
        name, initializer = c
        return VarStmt(to_token(name), initializer)

    # ---- statements ----
    def expr_stmt(self, c):
        return ExpressionStmt(c[0])

    def print_stmt(self, c):
        return PrintStmt(c[0])

    def return_stmt(self, c):
        keyword, value = c
        return ReturnStmt(to_token(keyword), value)

    def block(self, c):
        return BlockStmt(list(c))

    def if_stmt(self, c):
        condition, then_branch, else_branch = c
        return IfStmt(condition, then_branch, else_branch)

    def while_stmt(self, c):
        condition, body = c
        return WhileStmt(condition, body)

    def for_init(self, c):
        return c[0] if c else None

    def for_stmt(self, c):
        # for (init; cond; incr) body  ==>  { init; while (cond) { body; incr; } }
        initializer, condition, increment, body = c

        if increment is not None:
            body = BlockStmt([body, ExpressionStmt(increment)])

        if condition is None:
            condition = Literal(LoxBool(True))

        loop: Stmt = WhileStmt(condition, body)

        if initializer is not None:
            loop = BlockStmt([initializer, loop])

        return loop

    # ---- expressions ----
    def assign(self, c):
        target, equals, value = c

        if isinstance(target, Variable):
            return Assign(target.name, value)

        if isinstance(target, Get):
            return Set(target.object, target.name, value)

        raise _error_at(to_token(equals), "Invalid assignment target.")

    @staticmethod
    def _fold(c: List[Any], node_cls) -> Expr:
        it = iter(c)
        acc = next(it)

        for op in it:
            rhs = next(it)
            acc = node_cls(acc, to_token(op), rhs)

        return acc

    def logic_or(self, c):
        return self._fold(c, Logical)

    def logic_and(self, c):
        return self._fold(c, Logical)

    def equality(self, c):
        return self._fold(c, Binary)

    def comparison(self, c):
        return self._fold(c, Binary)

    def term(self, c):
        return self._fold(c, Binary)

    def factor(self, c):
        return self._fold(c, Binary)

    def unary_expr(self, c):
        op, right = c
        return Unary(to_token(op), right)

    def call_expr(self, c):
        callee, arguments, paren = c
        arguments = arguments or []
        paren_tok = to_token(paren)

        if len(arguments) > MAX_ARGS:
            raise _error_at(paren_tok, f"Can't have more than {MAX_ARGS} arguments.")

        return Call(callee, paren_tok, arguments)

    def arguments(self, c):
        return list(c)

    def get_expr(self, c):
        obj, name = c
        return Get(obj, to_token(name))

    def true_lit(self, _c):
        return Literal(LoxBool(True))

    def false_lit(self, _c):
        return Literal(LoxBool(False))

    def nil_lit(self, _c):
        return Literal(LoxNil())

    def number_lit(self, c):
        return Literal(LoxNumber(to_token(c[0]).literal))

    def string_lit(self, c):
        return Literal(LoxString(to_token(c[0]).literal))

    def variable(self, c):
        return Variable(to_token(c[0]))

    def this_expr(self, c):
        return This(to_token(c[0]))

    def super_expr(self, c):
        keyword, method = c
        return Super(to_token(keyword), to_token(method))

    def grouping(self, c):
        return Grouping(c[0])


def parse_source(source: str) -> List[Stmt]:
    """Parse a whole program into its list of top-level statements."""
    parser = make_parser()

    try:
        tree = parser.parse(source)
    except UnexpectedInput as exc:
        raise _from_lark_error(exc) from None

    try:
        return AstBuilder().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            raise exc.orig_exc from None
        raise

def tokenize(source: str) -> List[Token]:
    """Scan ``source`` into tokens, ending with an EOF token."""
    parser = make_parser()
    tokens: List[Token] = []

    try:
        for tok in parser.lex(source):
            tokens.append(to_token(tok))
    except UnexpectedInput as exc:
        raise _from_lark_error(exc) from None

    line = source.count("\n") + 1
    tokens.append(Token(TT.EOF, "", None, line, len(source), 0))

    return tokens
