from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Dict, List, Optional

from .environment import Environment
from .token_types import Token
from .types import (
    LoxArityError,
    LoxCallError,
    LoxClass,
    LoxFunction,
    LoxInstance,
    LoxInternalError,
    LoxNative,
    LoxNil,
    LoxValue,
    NativeFn,
    Returned,
    is_callable,
)

if TYPE_CHECKING:
    from .evaluator import Interpreter

class Builtins:
    natives: Dict[str, LoxNative] = {}

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("treelox.stdlib")
    _STDLIB_INITIALIZED = True

def register_stdlib(name: str, *, params: Optional[List[str]] = None):
    def dec(fn: NativeFn):
        Builtins.natives[name] = LoxNative(name=name, params=list(params or []), fn=fn)
        return fn

    return dec

def install_natives(env: Environment) -> None:
    for name, native in Builtins.natives.items():
        env.define(name, native)

def call_value(callee: LoxValue, args: List[LoxValue], interpreter: 'Interpreter', paren: Optional[Token] = None) -> LoxValue:
    """Invoke any callable variant; arity is checked before anything runs."""
    if not is_callable(callee):
        raise LoxCallError("Can only call functions and classes.", paren)

    expected = callee.arity()
    if len(args) != expected:
        raise LoxArityError(expected, len(args), paren)

    return callee.call(interpreter, args)

def call_function(fn: LoxFunction, args: List[LoxValue], interpreter: 'Interpreter') -> LoxValue:
    """
    User function call semantics:
    - the body runs as a block in a fresh child of the closure, never the caller's scope
    - parameters are bound in that child, in order
    - a `return` completes the call with its value; falling off the end yields nil
    """
    env = Environment.child_of(fn.closure)

    for param, value in zip(fn.declaration.params, args):
        env.define(param.lexeme, value)

    outcome = interpreter.execute_block(fn.declaration.body, env)

    if isinstance(outcome, Returned):
        return outcome.value

    return LoxNil()

def bind_method(method: LoxFunction, instance: LoxInstance) -> LoxFunction:
    env = Environment.child_of(method.closure)
    env.define("this", instance)

    return LoxFunction(declaration=method.declaration, closure=env)

def instantiate(klass: LoxClass, args: List[LoxValue], interpreter: 'Interpreter') -> LoxInstance:
    instance = LoxInstance(klass)
    initializer = klass.find_method("init")

    if initializer is not None:
        # the initializer's own result is discarded; the call yields the instance
        bind_method(initializer, instance).call(interpreter, args)

    return instance

def bound_property(instance: LoxInstance, name: str) -> Optional[LoxValue]:
    """Fields first, then a freshly bound method; None when neither exists."""
    if name in instance.fields:
        return instance.fields[name]

    method = instance.klass.find_method(name)
    if method is None:
        return None

    return bind_method(method, instance)

def super_method(superclass: LoxValue, instance: LoxValue, name: str) -> Optional[LoxFunction]:
    if not isinstance(superclass, LoxClass) or not isinstance(instance, LoxInstance):
        raise LoxInternalError("'super' resolved to something other than a class and instance")

    method = superclass.find_method(name)
    if method is None:
        return None

    return bind_method(method, instance)
