from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import TT, LoxBool, LoxNumber, LoxString, parse_source, tokenize
from treelox.tree import (
    Assign,
    Binary,
    BlockStmt,
    Call,
    ClassStmt,
    ExpressionStmt,
    FunctionStmt,
    Get,
    Literal,
    Logical,
    PrintStmt,
    Set,
    Super,
    Unary,
    VarStmt,
    Variable,
    WhileStmt,
    dump,
)


def _expr(source: str):
    statements = parse_source(source)
    assert len(statements) == 1
    stmt = statements[0]
    assert isinstance(stmt, (ExpressionStmt, PrintStmt))
    return stmt.expression


def test_tokenize_kinds_and_literals() -> None:
    tokens = tokenize('var x = 1.5; print "hi";')

    assert [tok.kind for tok in tokens] == [
        TT.VAR,
        TT.IDENTIFIER,
        TT.EQUAL,
        TT.NUMBER,
        TT.SEMICOLON,
        TT.PRINT,
        TT.STRING,
        TT.SEMICOLON,
        TT.EOF,
    ]
    assert tokens[3].literal == 1.5
    assert tokens[6].lexeme == '"hi"'
    assert tokens[6].literal == "hi"


def test_tokenize_keyword_prefix_is_identifier() -> None:
    tokens = tokenize("orchid or classy class")

    assert [tok.kind for tok in tokens[:-1]] == [TT.IDENTIFIER, TT.OR, TT.IDENTIFIER, TT.CLASS]


def test_tokenize_two_char_operators() -> None:
    tokens = tokenize("! != = == > >= < <=")

    assert [tok.kind for tok in tokens[:-1]] == [
        TT.BANG,
        TT.BANG_EQUAL,
        TT.EQUAL,
        TT.EQUAL_EQUAL,
        TT.GREATER,
        TT.GREATER_EQUAL,
        TT.LESS,
        TT.LESS_EQUAL,
    ]


def test_tokenize_tracks_lines_and_skips_comments() -> None:
    tokens = tokenize("a // trailing comment\nb")

    assert [(tok.lexeme, tok.line) for tok in tokens[:-1]] == [("a", 1), ("b", 2)]
    assert tokens[-1].kind == TT.EOF


def test_same_spelling_tokens_are_distinct() -> None:
    first, second, _eof = tokenize("a a")

    assert first.lexeme == second.lexeme
    assert first != second


def test_precedence() -> None:
    expr = _expr("1 + 2 * 3;")

    assert isinstance(expr, Binary)
    assert expr.operator.kind == TT.PLUS
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.kind == TT.STAR


def test_binary_is_left_associative() -> None:
    expr = _expr("1 - 2 - 3;")

    assert isinstance(expr, Binary)
    assert isinstance(expr.left, Binary)
    assert isinstance(expr.right, Literal)
    assert expr.right.value == LoxNumber(3.0)


def test_assignment_is_right_associative() -> None:
    expr = _expr("a = b = 1;")

    assert isinstance(expr, Assign)
    assert expr.name.lexeme == "a"
    assert isinstance(expr.value, Assign)


def test_logical_operators() -> None:
    expr = _expr("a or b and c;")

    assert isinstance(expr, Logical)
    assert expr.operator.kind == TT.OR
    assert isinstance(expr.right, Logical)
    assert expr.right.operator.kind == TT.AND


def test_unary_nesting() -> None:
    expr = _expr("!-x;")

    assert isinstance(expr, Unary)
    assert expr.operator.kind == TT.BANG
    assert isinstance(expr.right, Unary)


def test_property_assignment_becomes_set() -> None:
    expr = _expr("a.b.c = 1;")

    assert isinstance(expr, Set)
    assert expr.name.lexeme == "c"
    assert isinstance(expr.object, Get)


def test_call_chain_keeps_closing_paren() -> None:
    expr = _expr("f(1)(2, 3);")

    assert isinstance(expr, Call)
    assert expr.paren.kind == TT.RIGHT_PAREN
    assert len(expr.arguments) == 2
    assert isinstance(expr.callee, Call)
    assert isinstance(expr.callee.callee, Variable)


def test_literals() -> None:
    statements = parse_source('print true; print nil; print "s"; print 2;')

    values = [stmt.expression.value for stmt in statements]
    assert values[0] == LoxBool(True)
    assert repr(values[1]) == "nil"
    assert values[2] == LoxString("s")
    assert values[3] == LoxNumber(2.0)


def test_for_desugars_to_while_in_blocks() -> None:
    (loop,) = parse_source("for (var i = 0; i < 3; i = i + 1) print i;")

    assert isinstance(loop, BlockStmt)
    init, while_stmt = loop.statements
    assert isinstance(init, VarStmt)
    assert isinstance(while_stmt, WhileStmt)
    body = while_stmt.body
    assert isinstance(body, BlockStmt)
    assert isinstance(body.statements[0], PrintStmt)
    increment = body.statements[1]
    assert isinstance(increment, ExpressionStmt)
    assert isinstance(increment.expression, Assign)


def test_for_without_clauses_loops_forever() -> None:
    (loop,) = parse_source("for (;;) print 1;")

    assert isinstance(loop, WhileStmt)
    assert isinstance(loop.condition, Literal)
    assert loop.condition.value == LoxBool(True)
    assert isinstance(loop.body, PrintStmt)


def test_class_declaration_shape() -> None:
    source = dedent(
        """\
        class B < A {
          init(x) {}
          m() {
            return super.m;
          }
        }
    """
    )
    (klass,) = parse_source(source)

    assert isinstance(klass, ClassStmt)
    assert klass.name.lexeme == "B"
    assert isinstance(klass.superclass, Variable)
    assert klass.superclass.name.lexeme == "A"
    assert [m.name.lexeme for m in klass.methods] == ["init", "m"]
    assert all(isinstance(m, FunctionStmt) for m in klass.methods)
    assert [p.lexeme for p in klass.methods[0].params] == ["x"]
    assert isinstance(klass.methods[1].body[0].value, Super)


def test_class_without_superclass() -> None:
    (klass,) = parse_source("class A {}")

    assert klass.superclass is None
    assert klass.methods == []


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("print 1;", "PrintStmt\n  Literal\n    1\n", id="print-literal"),
        pytest.param(
            "var a = -b;",
            "VarStmt\n  identifier  a\n  Unary\n    minus  -\n    Variable\n      identifier  b\n",
            id="var-unary",
        ),
    ],
)
def test_dump(source: str, expected: str) -> None:
    assert dump(parse_source(source)) == expected
