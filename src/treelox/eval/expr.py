from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from ..runtime import call_value
from ..token_types import TT, Token
from ..tree import Assign, Binary, Call, Grouping, Literal, Logical, Unary, Variable
from ..types import LoxBool, LoxInternalError, LoxNumber, LoxString, LoxTypeError, LoxValue
from ..utils import lox_equals
from .common import require_number, require_numbers
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_literal(n: Literal, interp: 'Interpreter') -> LoxValue:
    return n.value

def eval_grouping(n: Grouping, interp: 'Interpreter') -> LoxValue:
    return interp.evaluate(n.expression)

def eval_variable(n: Variable, interp: 'Interpreter') -> LoxValue:
    return interp.look_up_variable(n.name, n)

def eval_assign(n: Assign, interp: 'Interpreter') -> LoxValue:
    value = interp.evaluate(n.value)
    interp.assign_variable(n.name, n, value)
    return value

def eval_unary(n: Unary, interp: 'Interpreter') -> LoxValue:
    rhs = interp.evaluate(n.right)

    match n.operator.kind:
        case TT.MINUS:
            return LoxNumber(-require_number(n.operator, rhs))
        case TT.BANG:
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxInternalError(f"Unsupported unary operator '{n.operator.lexeme}'", n.operator)

def eval_binary(n: Binary, interp: 'Interpreter') -> LoxValue:
    lhs = interp.evaluate(n.left)
    rhs = interp.evaluate(n.right)

    return apply_binary_operator(n.operator, lhs, rhs)

def eval_logical(n: Logical, interp: 'Interpreter') -> LoxValue:
    lhs = interp.evaluate(n.left)

    if n.operator.kind == TT.OR:
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return interp.evaluate(n.right)

def eval_call(n: Call, interp: 'Interpreter') -> LoxValue:
    callee = interp.evaluate(n.callee)
    args: List[LoxValue] = [interp.evaluate(arg) for arg in n.arguments]

    return call_value(callee, args, interp, n.paren)

def apply_binary_operator(op: Token, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op.kind:
        case TT.PLUS:
            if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
                return LoxNumber(lhs.value + rhs.value)
            if isinstance(lhs, LoxString) and isinstance(rhs, LoxString):
                return LoxString(lhs.value + rhs.value)
            raise LoxTypeError("Operands must be two numbers or two strings.", op)
        case TT.MINUS:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a - b)
        case TT.STAR:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(a * b)
        case TT.SLASH:
            a, b = require_numbers(op, lhs, rhs)
            return LoxNumber(_divide(a, b))
        case TT.GREATER:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a > b)
        case TT.GREATER_EQUAL:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a >= b)
        case TT.LESS:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a < b)
        case TT.LESS_EQUAL:
            a, b = require_numbers(op, lhs, rhs)
            return LoxBool(a <= b)
        case TT.EQUAL_EQUAL:
            return LoxBool(lox_equals(lhs, rhs))
        case TT.BANG_EQUAL:
            return LoxBool(not lox_equals(lhs, rhs))
    raise LoxInternalError(f"Unknown operator {op.lexeme}", op)

def _divide(a: float, b: float) -> float:
    # IEEE semantics: x/0 is +-inf, 0/0 is NaN
    if b != 0:
        return a / b

    if a == 0 or math.isnan(a):
        return math.nan

    return math.copysign(math.inf, a) * math.copysign(1.0, b)
