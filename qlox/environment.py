from __future__ import annotations

from typing import Dict, Optional

from .errors import ScriptRuntimeError
from .tokens import Token


class Environment:
    """One scope record; `enclosing` links form the chain up to the globals."""

    def __init__(self, enclosing: Optional[Environment] = None) -> None:
        self.enclosing = enclosing
        self.values: Dict[str, object] = {}

    def define(self, name: str, value: object) -> None:
        self.values[name] = value

    def get(self, name: Token) -> object:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise ScriptRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: object) -> None:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise ScriptRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    # Resolver-informed access: the distance is trusted, a miss is a KeyError.

    def get_at(self, distance: int, name: str) -> object:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: str, value: object) -> None:
        self.ancestor(distance).values[name] = value

    def ancestor(self, distance: int) -> Environment:
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise RuntimeError("resolved distance exceeds environment depth")
            env = env.enclosing
        return env
