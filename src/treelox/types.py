from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional
from typing_extensions import Protocol, TypeAlias, TypeGuard

from .token_types import Token

if TYPE_CHECKING:
    from .environment import Environment
    from .evaluator import Interpreter
    from .tree import FunctionStmt

# ---------- Value Model ----------

@dataclass
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        from .utils import format_number
        return format_number(self.value)

@dataclass
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

NativeFn = Callable[['Interpreter', List['LoxValue']], 'LoxValue']

@dataclass(eq=False)
class LoxNative:
    name: str
    params: List[str]
    fn: NativeFn

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter: 'Interpreter', args: List['LoxValue']) -> 'LoxValue':
        return self.fn(interpreter, args)

    def __repr__(self) -> str:
        return f"<fun {self.name}({', '.join(self.params)})>"

@dataclass(eq=False)
class LoxFunction:
    declaration: 'FunctionStmt'
    closure: 'Environment'        # environment active at definition time

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        from . import runtime
        return runtime.bind_method(self, instance)

    def call(self, interpreter: 'Interpreter', args: List['LoxValue']) -> 'LoxValue':
        from . import runtime
        return runtime.call_function(self, args, interpreter)

    def __repr__(self) -> str:
        params = ", ".join(p.lexeme for p in self.declaration.params)
        return f"<fun {self.name}({params})>"

@dataclass(eq=False)
class LoxClass:
    name: Token
    superclass: Optional['LoxClass']
    methods: Dict[str, LoxFunction] = field(default_factory=dict)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        method = self.methods.get(name)
        if method is not None:
            return method

        if self.superclass is not None:
            return self.superclass.find_method(name)

        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        return initializer.arity() if initializer is not None else 0

    def call(self, interpreter: 'Interpreter', args: List['LoxValue']) -> 'LoxValue':
        from . import runtime
        return runtime.instantiate(self, args, interpreter)

    def __repr__(self) -> str:
        return f"<class {self.name.lexeme}>"

@dataclass(eq=False)
class LoxInstance:
    klass: LoxClass
    fields: Dict[str, 'LoxValue'] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"instance {self.klass.name.lexeme}({', '.join(self.fields)})"

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxNative
    | LoxFunction
    | LoxClass
    | LoxInstance
)

class LoxCallable(Protocol):
    def arity(self) -> int: ...
    def call(self, interpreter: 'Interpreter', args: List[LoxValue]) -> LoxValue: ...

_CALLABLE_TYPES = (LoxNative, LoxFunction, LoxClass)

def is_callable(value: LoxValue) -> TypeGuard[LoxCallable]:
    return isinstance(value, _CALLABLE_TYPES)

# ---------- Statement completion ----------

class Completed:
    """Statement ran to its end; execution continues with the next one."""
    def __repr__(self) -> str:
        return "Completed"

COMPLETED = Completed()

@dataclass(frozen=True)
class Returned:
    """A `return` is unwinding to the nearest enclosing call."""
    value: LoxValue

Completion: TypeAlias = Completed | Returned

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    token: Optional[Token]

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.message = message
        self.token = token

    def __str__(self) -> str:
        if self.token is None:
            return self.message

        return f"{self.message} (line {self.token.line})"

class LoxTypeError(LoxRuntimeError):
    pass

class LoxNameError(LoxRuntimeError):
    def __init__(self, name: str, token: Optional[Token] = None):
        super().__init__(f"Undefined variable '{name}'.", token)
        self.name = name

class LoxPropertyError(LoxRuntimeError):
    def __init__(self, name: str, token: Optional[Token] = None):
        super().__init__(f"Undefined property '{name}'.", token)
        self.name = name

class LoxCallError(LoxRuntimeError):
    pass

class LoxArityError(LoxRuntimeError):
    def __init__(self, expected: int, got: int, token: Optional[Token] = None):
        super().__init__(f"Expected {expected} arguments but got {got}.", token)
        self.expected = expected
        self.got = got

class LoxInternalError(LoxRuntimeError):
    """State the resolver should have made impossible."""

@dataclass(frozen=True)
class ResolveIssue:
    token: Token
    message: str

    def __str__(self) -> str:
        return f"[line {self.token.line}] Error at '{self.token.lexeme}': {self.message}"

class LoxResolveError(Exception):
    """Static errors found by the resolver; execution must not start."""
    def __init__(self, issues: List[ResolveIssue]):
        self.issues = list(issues)
        super().__init__("\n".join(str(issue) for issue in self.issues))

class ParseError(Exception):
    """Lexical or syntax error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None, where: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.where = where

        if line is None:
            super().__init__(message)
        else:
            super().__init__(f"[line {line}] Error{where}: {message}")
