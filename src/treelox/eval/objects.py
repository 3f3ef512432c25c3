from __future__ import annotations

from typing import TYPE_CHECKING

from ..runtime import bound_property, super_method
from ..tree import Get, Set, Super, This
from ..types import LoxInstance, LoxInternalError, LoxPropertyError, LoxTypeError, LoxValue

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_get(n: Get, interp: 'Interpreter') -> LoxValue:
    target = interp.evaluate(n.object)

    if not isinstance(target, LoxInstance):
        raise LoxTypeError("Only instances have properties.", n.name)

    value = bound_property(target, n.name.lexeme)
    if value is None:
        raise LoxPropertyError(n.name.lexeme, n.name)

    return value

def eval_set(n: Set, interp: 'Interpreter') -> LoxValue:
    target = interp.evaluate(n.object)

    if not isinstance(target, LoxInstance):
        raise LoxTypeError("Only instances have fields.", n.name)

    value = interp.evaluate(n.value)
    # fields shadow methods of the same name on later reads
    target.fields[n.name.lexeme] = value

    return value

def eval_this(n: This, interp: 'Interpreter') -> LoxValue:
    return interp.look_up_variable(n.keyword, n)

def eval_super(n: Super, interp: 'Interpreter') -> LoxValue:
    distance = interp.locals.get(n)
    if distance is None:
        raise LoxInternalError("'super' was not resolved to a local scope", n.keyword)

    superclass = interp.environment.get_at(distance, "super")
    # the `this` scope sits directly inside the `super` scope
    instance = interp.environment.get_at(distance - 1, "this")

    method = super_method(superclass, instance, n.method.lexeme)
    if method is None:
        raise LoxPropertyError(n.method.lexeme, n.method)

    return method
