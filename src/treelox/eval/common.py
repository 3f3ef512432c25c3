from __future__ import annotations

from ..token_types import Token
from ..types import LoxNumber, LoxTypeError, LoxValue

def require_number(operator: Token, operand: LoxValue) -> float:
    if isinstance(operand, LoxNumber):
        return operand.value

    raise LoxTypeError("Operand must be a number.", operator)

def require_numbers(operator: Token, lhs: LoxValue, rhs: LoxValue) -> tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value

    raise LoxTypeError("Operands must be numbers.", operator)
