"""Static pass computing scope distances for local variable references.

The resolver mirrors the runtime's scope structure without evaluating
anything: every block, function body, `super` binding and `this` binding
pushes exactly one scope, just as the interpreter creates exactly one
environment for each. For every ``Variable``, ``Assign``, ``This`` and
``Super`` node that refers to a local, the number of scopes between the use
and the declaration is recorded in the side table. References with no entry
are globals.
"""
from __future__ import annotations

from enum import Enum, auto
from typing import Dict, List

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
)
from .types import LoxResolveError, ResolveIssue

SideTable = Dict[Expr, int]


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    def __init__(self) -> None:
        # name -> "initializer finished" per local scope; globals are not tracked
        self.scopes: List[Dict[str, bool]] = []
        self.side_table: SideTable = {}
        self.issues: List[ResolveIssue] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve_statements(self, statements: List[Stmt]) -> None:
        for stmt in statements:
            self.resolve_stmt(stmt)

    # ---------------- Statements ----------------

    def resolve_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case BlockStmt(statements=statements):
                self._begin_scope()
                self.resolve_statements(statements)
                self._end_scope()
            case VarStmt(name=name, initializer=initializer):
                self._declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self._define(name)
            case FunctionStmt(name=name):
                # defined eagerly so the body can recurse
                self._declare(name)
                self._define(name)
                self._resolve_function(stmt, FunctionType.FUNCTION)
            case ClassStmt():
                self._resolve_class(stmt)
            case ExpressionStmt(expression=expression) | PrintStmt(expression=expression):
                self.resolve_expr(expression)
            case IfStmt(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)
            case WhileStmt(condition=condition, body=body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)
            case ReturnStmt(keyword=keyword, value=value):
                if self.current_function == FunctionType.NONE:
                    self._error(keyword, "Can't return from top-level code.")

                if value is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self._error(keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value)
            case _:
                raise TypeError(f"Unknown statement node: {type(stmt).__name__}")

    def _resolve_function(self, fn: FunctionStmt, kind: FunctionType) -> None:
        enclosing = self.current_function
        self.current_function = kind

        self._begin_scope()
        for param in fn.params:
            self._declare(param)
            self._define(param)
        self.resolve_statements(fn.body)
        self._end_scope()

        self.current_function = enclosing

    def _resolve_class(self, stmt: ClassStmt) -> None:
        enclosing = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        superclass = stmt.superclass
        if superclass is not None:
            if superclass.name.lexeme == stmt.name.lexeme:
                self._error(superclass.name, "A class can't inherit from itself.")

            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(superclass)

            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self._resolve_function(method, kind)

        self._end_scope()

        if superclass is not None:
            self._end_scope()

        self.current_class = enclosing

    # ---------------- Expressions ----------------

    def resolve_expr(self, expr: Expr) -> None:
        match expr:
            case Variable(name=name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self._error(name, "Can't read local variable in its own initializer.")
                self._resolve_local(expr, name)
            case Assign(name=name, value=value):
                self.resolve_expr(value)
                self._resolve_local(expr, name)
            case Binary(left=left, right=right) | Logical(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)
            case Unary(right=right):
                self.resolve_expr(right)
            case Grouping(expression=inner):
                self.resolve_expr(inner)
            case Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for arg in arguments:
                    self.resolve_expr(arg)
            case Get(object=obj):
                self.resolve_expr(obj)
            case Set(object=obj, value=value):
                self.resolve_expr(obj)
                self.resolve_expr(value)
            case This(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self._error(keyword, "Can't use 'this' outside of a class.")
                    return
                self._resolve_local(expr, keyword)
            case Super(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self._error(keyword, "Can't use 'super' outside of a class.")
                    return
                if self.current_class != ClassType.SUBCLASS:
                    self._error(keyword, "Can't use 'super' in a class with no superclass.")
                    return
                self._resolve_local(expr, keyword)
            case Literal():
                pass
            case _:
                raise TypeError(f"Unknown expression node: {type(expr).__name__}")

    # ---------------- Scopes ----------------

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")

        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return

        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token) -> None:
        # innermost scope first; the nearest declaration wins
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.side_table[expr] = depth
                return

    def _error(self, token: Token, message: str) -> None:
        self.issues.append(ResolveIssue(token, message))


def resolve(statements: List[Stmt]) -> SideTable:
    """Resolve a program and return its side table.

    All static errors are collected before raising, so a single
    ``LoxResolveError`` reports every issue in the program.
    """
    resolver = Resolver()
    resolver.resolve_statements(statements)

    if resolver.issues:
        raise LoxResolveError(resolver.issues)

    return resolver.side_table
