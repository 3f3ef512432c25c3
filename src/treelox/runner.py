from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from .evaluator import Interpreter
from .parser import parse_source, tokenize
from .resolver import resolve
from .tree import dump
from .types import LoxResolveError, LoxRuntimeError, ParseError
from .utils import debug_py_trace_enabled

EXIT_USAGE = 64
EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70

_USAGE = "Usage: treelox [--tokens|--ast] [script|-]"

def run(source: str, interpreter: Optional[Interpreter] = None) -> Interpreter:
    """Parse, resolve and execute ``source``.

    Static errors (``ParseError``, ``LoxResolveError``) are raised before any
    statement runs; runtime errors propagate as ``LoxRuntimeError``. Passing
    an existing interpreter keeps its globals, as the REPL does.
    """
    if interpreter is None:
        interpreter = Interpreter()

    statements = parse_source(source)
    side_table = resolve(statements)
    interpreter.execute_program(statements, side_table)

    return interpreter

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def _report(exc: BaseException) -> None:
    print(str(exc), file=sys.stderr)

def main() -> None:
    mode = "run"
    arg = None

    for token in sys.argv[1:]:
        if token == "--tokens":
            mode = "tokens"
            continue

        if token == "--ast":
            mode = "ast"
            continue

        if token in ("-h", "--help"):
            print(_USAGE)
            return

        if token.startswith("--"):
            print(f"Unknown option: {token}\n{_USAGE}", file=sys.stderr)
            raise SystemExit(EXIT_USAGE)

        if arg is None:
            arg = token
        else:
            print(f"Unexpected argument: {token}\n{_USAGE}", file=sys.stderr)
            raise SystemExit(EXIT_USAGE)

    if arg is None and mode == "run" and sys.stdin.isatty():
        from .repl import repl

        repl()
        return

    source = _load_source(arg)

    try:
        if mode == "tokens":
            for tok in tokenize(source):
                print(repr(tok))
            return

        if mode == "ast":
            print(dump(parse_source(source)), end="")
            return

        run(source)
    except (ParseError, LoxResolveError) as exc:
        _report(exc)
        raise SystemExit(EXIT_STATIC_ERROR) from None
    except LoxRuntimeError as exc:
        _report(exc)
        if debug_py_trace_enabled():
            raise
        raise SystemExit(EXIT_RUNTIME_ERROR) from None

if __name__ == "__main__":
    main()
