from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import LoxNameError, run_program, run_runtime_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
              var a = 2;
              print a;
            }
            print a;
        """
        ),
        ("lines", ["2", "1"]),
        None,
        id="block-shadows-global",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            {
              a = 2;
            }
            print a;
        """
        ),
        ("lines", ["2"]),
        None,
        id="assign-outer-from-block",
    ),
    pytest.param(
        dedent(
            """\
            {
              var a = 1;
              {
                var b = 2;
                {
                  a = a + b;
                }
              }
              print a;
            }
        """
        ),
        ("lines", ["3"]),
        None,
        id="assign-local-across-scopes",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            print a;
            a = "one";
            print a;
            a = nil;
            print a;
        """
        ),
        ("lines", ["1", "one", "nil"]),
        None,
        id="global-changes-variant",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            var a = 2;
            print a;
        """
        ),
        ("lines", ["2"]),
        None,
        id="global-redeclaration-allowed",
    ),
    pytest.param(
        dedent(
            """\
            var a;
            print a;
        """
        ),
        ("lines", ["nil"]),
        None,
        id="uninitialized-is-nil",
    ),
    pytest.param(
        dedent(
            """\
            fun f() {
              return g();
            }
            fun g() {
              return "late";
            }
            print f();
        """
        ),
        ("lines", ["late"]),
        None,
        id="globals-bound-late",
    ),
    pytest.param(
        dedent(
            """\
            fun f() {
              print later;
            }
            var later = "ok";
            f();
        """
        ),
        ("lines", ["ok"]),
        None,
        id="global-defined-after-function",
    ),
    pytest.param(
        dedent(
            """\
            var x = "global";
            fun f() {
              var x = "local";
              {
                print x;
              }
            }
            f();
            print x;
        """
        ),
        ("lines", ["local", "global"]),
        None,
        id="function-local-shadows-global",
    ),
    pytest.param(
        dedent(
            """\
            fun f(a) {
              a = a + 1;
              return a;
            }
            var a = 10;
            print f(a);
            print a;
        """
        ),
        ("lines", ["11", "10"]),
        None,
        id="parameters-are-local",
    ),
    pytest.param(
        "print nope;",
        ("message", "Undefined variable 'nope'."),
        LoxNameError,
        id="undefined-global-read",
    ),
    pytest.param(
        "nope = 1;",
        ("message", "Undefined variable 'nope'."),
        LoxNameError,
        id="undefined-global-assign",
    ),
    pytest.param(
        "var a = a;",
        ("message", "Undefined variable 'a'."),
        LoxNameError,
        id="global-self-initializer-is-runtime-error",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_globals_survive_between_runs(interpreter) -> None:
    run_program("var total = 1;", interpreter)
    run_program("total = total + 41;", interpreter)

    assert run_program("print total;", interpreter) == ["42"]
