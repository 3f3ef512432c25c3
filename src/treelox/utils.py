from __future__ import annotations

import math
import os
from decimal import Decimal
from typing import Optional, Set, Tuple

from .types import (
    LoxBool,
    LoxClass,
    LoxFunction,
    LoxInstance,
    LoxNative,
    LoxNil,
    LoxNumber,
    LoxString,
    LoxValue,
)

DEBUG_PY_TRACE_ENV = "TREELOX_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """Show Python tracebacks alongside Lox runtime errors."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"

    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    if value == 0 and math.copysign(1.0, value) < 0:
        return "-0"

    if value.is_integer():
        return str(int(value))

    # Shortest round-trip digits, never in exponent form.
    return format(Decimal(repr(value)), "f")


def lox_equals(lhs: LoxValue, rhs: LoxValue, _seen: Optional[Set[Tuple[int, int]]] = None) -> bool:
    """Structural equality; instances compare field by field.

    A pair of instances already under comparison counts as equal, so
    self-referencing fields terminate.
    """
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxNative(), LoxNative()):
            return lhs.name == rhs.name
        case (LoxFunction(), LoxFunction()):
            return lhs.declaration.name == rhs.declaration.name
        case (LoxClass(), LoxClass()):
            return lhs.name == rhs.name
        case (LoxInstance(), LoxInstance()):
            if lhs is rhs:
                return True
            if not lox_equals(lhs.klass, rhs.klass):
                return False
            if lhs.fields.keys() != rhs.fields.keys():
                return False
            pair = (id(lhs), id(rhs))
            if _seen is None:
                _seen = set()
            elif pair in _seen:
                return True
            _seen.add(pair)
            return all(lox_equals(v, rhs.fields[k], _seen) for k, v in lhs.fields.items())
        case _:
            return False


def stringify(value: LoxValue) -> str:
    """Text form used by `print`: strings verbatim, everything else via repr."""
    if isinstance(value, LoxString):
        return value.value

    return repr(value)
