from __future__ import annotations

import sys
import traceback
import weakref
from typing import Callable, Dict, List, MutableMapping, Optional, TextIO

from .environment import Environment
from .runtime import init_stdlib, install_natives
from .token_types import Token
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
    Node,
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
    node_label,
    node_token,
)
from .types import COMPLETED, Completion, LoxInternalError, LoxRuntimeError, LoxValue, Returned
from .utils import debug_py_trace_enabled

from .eval.control import (
    exec_block_stmt,
    exec_expression_stmt,
    exec_if_stmt,
    exec_print_stmt,
    exec_return_stmt,
    exec_var_stmt,
    exec_while_stmt,
)
from .eval.expr import (
    eval_assign,
    eval_binary,
    eval_call,
    eval_grouping,
    eval_literal,
    eval_logical,
    eval_unary,
    eval_variable,
)
from .eval.fn import exec_class_stmt, exec_function_stmt
from .eval.helpers import scoped_environment
from .eval.objects import eval_get, eval_set, eval_super, eval_this

SideTable = Dict[Expr, int]

# Each Lox call nests roughly a dozen Python frames.
RECURSION_LIMIT = 20_000


def _ensure_recursion_limit() -> None:
    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)


def _maybe_attach_location(exc: LoxRuntimeError, node: Node) -> None:
    if exc.token is not None:
        return

    tok = node_token(node)
    if tok is not None:
        exc.token = tok


class Interpreter:
    """Tree-walking evaluator.

    Holds the global environment, the current-environment cursor and the
    resolver's side table. Expressions evaluate to values; statements
    complete with ``COMPLETED`` or ``Returned``; real failures are raised as
    ``LoxRuntimeError``.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        init_stdlib()
        _ensure_recursion_limit()
        self.globals = Environment()
        install_natives(self.globals)
        self.environment = self.globals
        # Entries go away with their nodes once no closure holds them.
        self.locals: MutableMapping[Expr, int] = weakref.WeakKeyDictionary()
        self.out: TextIO = out if out is not None else sys.stdout
        self.err: TextIO = err if err is not None else sys.stderr

    # ---------------- Public API ----------------

    def interpret(self, statements: List[Stmt], side_table: Optional[SideTable] = None) -> Optional[LoxRuntimeError]:
        """Run top-level statements, reporting the first runtime error on ``err``.

        Returns the error that stopped execution, or None when every
        statement completed.
        """
        try:
            self.execute_program(statements, side_table)
        except LoxRuntimeError as exc:
            print(str(exc), file=self.err)
            if debug_py_trace_enabled():
                print("\nPython traceback:", file=self.err)
                print("".join(traceback.format_tb(exc.__traceback__)), file=self.err, end="")
            return exc

        return None

    def execute_program(self, statements: List[Stmt], side_table: Optional[SideTable] = None) -> None:
        if side_table:
            self.locals.update(side_table)

        for stmt in statements:
            outcome = self.execute(stmt)
            if isinstance(outcome, Returned):
                raise LoxInternalError("'return' escaped the top-level statement list")

    def resolve(self, expr: Expr, depth: int) -> None:
        self.locals[expr] = depth

    # ---------------- Core evaluator ----------------

    def evaluate(self, expr: Expr) -> LoxValue:
        handler = _EXPR_DISPATCH.get(type(expr))
        if handler is None:
            raise LoxInternalError(f"Unknown expression node: {node_label(expr)}")

        try:
            return handler(expr, self)
        except LoxRuntimeError as e:
            _maybe_attach_location(e, expr)
            raise

    def execute(self, stmt: Stmt) -> Completion:
        handler = _STMT_DISPATCH.get(type(stmt))
        if handler is None:
            raise LoxInternalError(f"Unknown statement node: {node_label(stmt)}")

        try:
            return handler(stmt, self)
        except LoxRuntimeError as e:
            _maybe_attach_location(e, stmt)
            raise

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Completion:
        with scoped_environment(self, environment):
            for stmt in statements:
                outcome = self.execute(stmt)
                if isinstance(outcome, Returned):
                    return outcome

        return COMPLETED

    # ---------------- Variables ----------------

    def look_up_variable(self, name: Token, expr: Expr) -> LoxValue:
        distance = self.locals.get(expr)

        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)

        return self.globals.get(name.lexeme)

    def assign_variable(self, name: Token, expr: Expr, value: LoxValue) -> None:
        distance = self.locals.get(expr)

        if distance is not None:
            self.environment.assign_at(distance, name.lexeme, value)
        else:
            self.globals.assign(name.lexeme, value)


# ---------------- Dispatch ----------------

_EXPR_DISPATCH: dict[type, Callable[[Expr, Interpreter], LoxValue]] = {
    Literal: eval_literal,
    Grouping: eval_grouping,
    Variable: eval_variable,
    Assign: eval_assign,
    Unary: eval_unary,
    Binary: eval_binary,
    Logical: eval_logical,
    Call: eval_call,
    Get: eval_get,
    Set: eval_set,
    This: eval_this,
    Super: eval_super,
}

_STMT_DISPATCH: dict[type, Callable[[Stmt, Interpreter], Completion]] = {
    ExpressionStmt: exec_expression_stmt,
    PrintStmt: exec_print_stmt,
    VarStmt: exec_var_stmt,
    BlockStmt: exec_block_stmt,
    IfStmt: exec_if_stmt,
    WhileStmt: exec_while_stmt,
    FunctionStmt: exec_function_stmt,
    ReturnStmt: exec_return_stmt,
    ClassStmt: exec_class_stmt,
}
