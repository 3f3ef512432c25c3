from __future__ import annotations

from typing import TYPE_CHECKING

from ..environment import Environment
from ..tree import BlockStmt, ExpressionStmt, IfStmt, PrintStmt, ReturnStmt, VarStmt, WhileStmt
from ..types import COMPLETED, Completion, LoxNil, LoxValue, Returned
from ..utils import stringify
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_expression_stmt(n: ExpressionStmt, interp: 'Interpreter') -> Completion:
    interp.evaluate(n.expression)
    return COMPLETED

def exec_print_stmt(n: PrintStmt, interp: 'Interpreter') -> Completion:
    value = interp.evaluate(n.expression)
    print(stringify(value), file=interp.out)
    return COMPLETED

def exec_var_stmt(n: VarStmt, interp: 'Interpreter') -> Completion:
    value: LoxValue = LoxNil()

    if n.initializer is not None:
        value = interp.evaluate(n.initializer)

    interp.environment.define(n.name.lexeme, value)
    return COMPLETED

def exec_block_stmt(n: BlockStmt, interp: 'Interpreter') -> Completion:
    return interp.execute_block(n.statements, Environment.child_of(interp.environment))

def exec_if_stmt(n: IfStmt, interp: 'Interpreter') -> Completion:
    if is_truthy(interp.evaluate(n.condition)):
        return interp.execute(n.then_branch)

    if n.else_branch is not None:
        return interp.execute(n.else_branch)

    return COMPLETED

def exec_while_stmt(n: WhileStmt, interp: 'Interpreter') -> Completion:
    while is_truthy(interp.evaluate(n.condition)):
        outcome = interp.execute(n.body)
        if isinstance(outcome, Returned):
            return outcome

    return COMPLETED

def exec_return_stmt(n: ReturnStmt, interp: 'Interpreter') -> Completion:
    value: LoxValue = LoxNil()

    if n.value is not None:
        value = interp.evaluate(n.value)

    return Returned(value)
