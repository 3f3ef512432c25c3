from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from ..environment import Environment
from ..types import LoxBool, LoxNil, LoxValue

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            return True

@contextmanager
def scoped_environment(interp: 'Interpreter', env: Environment) -> Iterator[Environment]:
    """Point the interpreter's cursor at ``env`` for the duration of the block.

    The previous environment is restored even when the body raises, so a
    failed call never leaves the caller running in the callee's scope.
    """
    prev = interp.environment
    interp.environment = env

    try:
        yield env
    finally:
        interp.environment = prev
