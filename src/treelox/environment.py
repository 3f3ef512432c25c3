from __future__ import annotations

from typing import Dict, Optional

from .types import LoxInternalError, LoxNameError, LoxValue


class Environment:
    """One scope frame: a name->value map plus a link to the enclosing frame.

    Closures hold plain references to frames, so a frame stays alive for as
    long as any function value or child frame still points at it.
    """

    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, LoxValue] = {}
        self.enclosing = enclosing

    @classmethod
    def child_of(cls, parent: 'Environment') -> 'Environment':
        return cls(enclosing=parent)

    def define(self, name: str, value: LoxValue) -> None:
        self.values[name] = value

    def get(self, name: str) -> LoxValue:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.enclosing

        raise LoxNameError(name)

    def assign(self, name: str, value: LoxValue) -> None:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.values:
                env.values[name] = value
                return
            env = env.enclosing

        raise LoxNameError(name)

    def ancestor(self, distance: int) -> 'Environment':
        env = self

        for _ in range(distance):
            if env.enclosing is None:
                raise LoxInternalError(f"No enclosing scope at distance {distance}")
            env = env.enclosing

        return env

    def get_at(self, distance: int, name: str) -> LoxValue:
        values = self.ancestor(distance).values

        if name not in values:
            raise LoxInternalError(f"Resolved variable '{name}' missing at distance {distance}")

        return values[name]

    def assign_at(self, distance: int, name: str, value: LoxValue) -> None:
        values = self.ancestor(distance).values

        if name not in values:
            raise LoxInternalError(f"Resolved variable '{name}' missing at distance {distance}")

        values[name] = value

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing

        while env is not None:
            depth += 1
            env = env.enclosing

        return f"<Environment depth={depth} names={sorted(self.values)}>"
