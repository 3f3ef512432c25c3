"""Interactive REPL for treelox, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
import traceback
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.shortcuts import clear

from .evaluator import Interpreter
from .parser import tokenize
from .runner import run
from .token_types import KEYWORDS, TT
from .types import LoxResolveError, LoxRuntimeError, ParseError
from .utils import DEBUG_PY_TRACE_ENV, debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_STYLE_BY_KIND = {
    **{kind: "bold ansicyan" for kind in KEYWORDS.values()},
    TT.TRUE: "ansicyan",
    TT.FALSE: "ansicyan",
    TT.NIL: "ansicyan",
    TT.NUMBER: "ansimagenta",
    TT.STRING: "ansigreen",
}


def brace_depth(text: str) -> int:
    """Return how many ``{`` in *text* are still open.

    Input that does not scan yet (an unterminated string, say) counts as
    open so the user can finish typing it.
    """
    try:
        tokens = tokenize(text)
    except ParseError:
        return 1

    depth = 0
    for tok in tokens:
        if tok.kind == TT.LEFT_BRACE:
            depth += 1
        elif tok.kind == TT.RIGHT_BRACE:
            depth = max(depth - 1, 0)

    return depth


def _highlight_line(text: str) -> StyleAndTextTuples:
    if not text:
        return [("", "")]

    try:
        tokens = tokenize(text)
    except ParseError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.kind == TT.EOF:
            continue

        start = tok.position
        if start > pos:
            result.append(("", text[pos:start]))

        result.append((_STYLE_BY_KIND.get(tok.kind, ""), tok.lexeme))
        pos = start + len(tok.lexeme)

    if pos < len(text):
        result.append(("", text[pos:]))

    return result


class LoxLexer(Lexer):
    """Per-line syntax highlighting driven by the real tokenizer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return []
            return _highlight_line(lines[lineno])

        return get_line


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, _hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, interp_box: list[Interpreter]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ[DEBUG_PY_TRACE_ENV] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop(DEBUG_PY_TRACE_ENV, None)
        elif arg == "":
            if debug_py_trace_enabled():
                os.environ.pop(DEBUG_PY_TRACE_ENV, None)
            else:
                os.environ[DEBUG_PY_TRACE_ENV] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        interp_box[0] = Interpreter()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def eval_entry(text: str, interp: Interpreter) -> None:
    """Run one REPL entry against the long-lived interpreter, reporting errors."""
    try:
        run(text, interp)
    except (ParseError, LoxResolveError, LoxRuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled() and isinstance(exc, LoxRuntimeError):
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    # Use a mutable box so /reset can swap the interpreter.
    interp_box: list[Interpreter] = [Interpreter()]

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.lstrip().startswith("/") or brace_depth(text) == 0:
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + "    " * brace_depth(text))

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=LoxLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("treelox repl - Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt("> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, interp_box):
            continue

        eval_entry(text, interp_box[0])
