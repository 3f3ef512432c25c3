from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxResolveError, parse_source, resolve
from treelox.tree import BlockStmt, ClassStmt, PrintStmt, ReturnStmt, Super, This, Variable


def _resolve_error(source: str) -> LoxResolveError:
    with pytest.raises(LoxResolveError) as exc_info:
        resolve(parse_source(source))
    return exc_info.value


STATIC_ERRORS = [
    pytest.param(
        "{ var a = 1; var a = 2; }",
        "Already a variable with this name in this scope.",
        id="duplicate-local",
    ),
    pytest.param(
        "fun f(a, a) {}",
        "Already a variable with this name in this scope.",
        id="duplicate-parameter",
    ),
    pytest.param(
        "{ var a = a; }",
        "Can't read local variable in its own initializer.",
        id="self-referencing-initializer",
    ),
    pytest.param(
        "return 1;",
        "Can't return from top-level code.",
        id="top-level-return",
    ),
    pytest.param(
        "class A { init() { return 1; } }",
        "Can't return a value from an initializer.",
        id="value-return-in-initializer",
    ),
    pytest.param(
        "print this;",
        "Can't use 'this' outside of a class.",
        id="this-at-top-level",
    ),
    pytest.param(
        "fun f() { return this; }",
        "Can't use 'this' outside of a class.",
        id="this-in-plain-function",
    ),
    pytest.param(
        "print super.x;",
        "Can't use 'super' outside of a class.",
        id="super-at-top-level",
    ),
    pytest.param(
        "class A { m() { return super.m(); } }",
        "Can't use 'super' in a class with no superclass.",
        id="super-without-superclass",
    ),
    pytest.param(
        "class A < A {}",
        "A class can't inherit from itself.",
        id="self-inheritance",
    ),
]


@pytest.mark.parametrize("source, message", STATIC_ERRORS)
def test_static_errors(source: str, message: str) -> None:
    err = _resolve_error(source)

    assert [issue.message for issue in err.issues] == [message]


def test_issue_text_names_line_and_lexeme() -> None:
    err = _resolve_error("{\n  var a = a;\n}")

    assert str(err.issues[0]) == "[line 2] Error at 'a': Can't read local variable in its own initializer."


def test_all_issues_are_collected() -> None:
    err = _resolve_error(
        dedent(
            """\
            return 1;
            print this;
            { var b = 1; var b = 2; }
        """
        )
    )

    assert len(err.issues) == 3
    assert [issue.token.line for issue in err.issues] == [1, 2, 3]


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("var a = 1; var a = 2;", id="global-redeclaration"),
        pytest.param("class A { init() { return; } }", id="bare-return-in-initializer"),
        pytest.param("var a = a;", id="global-self-initializer"),
        pytest.param("class A {} class B < A { m() { return super.m; } }", id="super-in-subclass"),
        pytest.param("fun f() { return; }", id="bare-return-in-function"),
    ],
)
def test_accepted_programs(source: str) -> None:
    resolve(parse_source(source))


def test_global_reference_has_no_entry() -> None:
    statements = parse_source("var a = 1; print a;")

    assert resolve(statements) == {}


def test_distance_counts_enclosing_blocks() -> None:
    statements = parse_source("{ var a = 1; { print a; } }")
    outer = statements[0]
    assert isinstance(outer, BlockStmt)
    inner = outer.statements[1]
    assert isinstance(inner, BlockStmt)
    printed = inner.statements[0]
    assert isinstance(printed, PrintStmt)

    table = resolve(statements)

    assert table[printed.expression] == 1


def test_innermost_declaration_wins() -> None:
    statements = parse_source("{ var a = 1; { var a = 2; print a; } }")
    printed = statements[0].statements[1].statements[1]

    table = resolve(statements)

    assert table[printed.expression] == 0


def test_identical_references_are_distinct_keys() -> None:
    statements = parse_source("{ var a = 1; print a; print a; }")
    first = statements[0].statements[1].expression
    second = statements[0].statements[2].expression
    assert isinstance(first, Variable) and isinstance(second, Variable)

    table = resolve(statements)

    assert first is not second
    assert table[first] == 0
    assert table[second] == 0
    assert len(table) == 2


def test_this_resolves_past_method_scope() -> None:
    statements = parse_source("class A { m() { return this; } }")
    klass = statements[0]
    assert isinstance(klass, ClassStmt)
    ret = klass.methods[0].body[0]
    assert isinstance(ret, ReturnStmt) and isinstance(ret.value, This)

    table = resolve(statements)

    assert table[ret.value] == 1


def test_super_resolves_past_this_scope() -> None:
    statements = parse_source("class A {} class B < A { m() { return super.m; } }")
    ret = statements[1].methods[0].body[0]
    assert isinstance(ret.value, Super)

    table = resolve(statements)

    assert table[ret.value] == 2


def test_closure_reference_counts_function_scopes() -> None:
    statements = parse_source(
        dedent(
            """\
            fun outer() {
              var x = 1;
              fun inner() {
                {
                  print x;
                }
              }
            }
        """
        )
    )
    inner = statements[0].body[1]
    printed = inner.body[0].statements[0]

    table = resolve(statements)

    # block -> inner's scope -> outer's scope
    assert table[printed.expression] == 2
