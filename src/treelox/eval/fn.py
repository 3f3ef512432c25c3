from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

from ..environment import Environment
from ..tree import ClassStmt, FunctionStmt
from ..types import COMPLETED, Completion, LoxClass, LoxFunction, LoxNil, LoxTypeError

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_function_stmt(n: FunctionStmt, interp: 'Interpreter') -> Completion:
    # the closure is the environment at the point of definition
    fn_value = LoxFunction(declaration=n, closure=interp.environment)
    interp.environment.define(n.name.lexeme, fn_value)

    return COMPLETED

def exec_class_stmt(n: ClassStmt, interp: 'Interpreter') -> Completion:
    superclass: Optional[LoxClass] = None

    if n.superclass is not None:
        value = interp.evaluate(n.superclass)
        if not isinstance(value, LoxClass):
            raise LoxTypeError("Superclass must be a class.", n.superclass.name)
        superclass = value

    interp.environment.define(n.name.lexeme, LoxNil())

    method_env = interp.environment
    if superclass is not None:
        method_env = Environment.child_of(interp.environment)
        method_env.define("super", superclass)

    methods: Dict[str, LoxFunction] = {}

    for method in n.methods:
        methods[method.name.lexeme] = LoxFunction(declaration=method, closure=method_env)

    klass = LoxClass(name=n.name, superclass=superclass, methods=methods)
    interp.environment.assign(n.name.lexeme, klass)

    return COMPLETED
