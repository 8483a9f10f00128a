"""
Runtime values that aren't plain host values: callables and instances.

nil, booleans, numbers and strings are represented by `None`, `bool`,
`float` and `str`; everything here is what user code can call or hold a
reference to.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable as HostCallable, Dict, Mapping, Optional, Sequence

from .. import ast
from ..environment import Environment
from ..errors import ScriptRuntimeError
from ..tokens import Token

if TYPE_CHECKING:  # pragma: no cover
    from ..interp import Interpreter


@dataclass(frozen=True)
class Returning:
    """Completion record of a `return` statement travelling to the call boundary."""

    value: object


class Callable:
    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        raise NotImplementedError


NativeImpl = HostCallable[[Sequence[object]], object]


class NativeFunction(Callable):
    def __init__(self, name: str, arity: int, impl: NativeImpl) -> None:
        self.name = name
        self._arity = arity
        self.impl = impl

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        return self.impl(arguments)

    def __str__(self) -> str:
        return "<native fn>"


class Function(Callable):
    def __init__(self, declaration: ast.Function, closure: Environment, is_initializer: bool = False) -> None:
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: Instance) -> Function:
        env = Environment(self.closure)
        env.define("this", instance)
        return Function(self.declaration, env, self.is_initializer)

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        frame = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            frame.define(param.lexeme, argument)
        completion = interpreter.execute_block(self.declaration.body, frame)
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if completion is not None:
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class Class(Callable):
    def __init__(self, name: str, superclass: Optional[Class], methods: Dict[str, Function]) -> None:
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[Function]:
        klass: Optional[Class] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: Interpreter, arguments: Sequence[object]) -> object:
        instance = Instance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


class Instance:
    def __init__(self, klass: Class) -> None:
        self.klass = klass
        self.fields: Dict[str, object] = {}

    def get(self, name: Token) -> object:
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]
        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)
        raise ScriptRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: object) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"


def _clock(arguments: Sequence[object]) -> object:
    return time.time()


BUILTINS: Mapping[str, NativeFunction] = {
    "clock": NativeFunction("clock", 0, _clock),
}


__all__ = [
    "BUILTINS",
    "Callable",
    "Class",
    "Function",
    "Instance",
    "NativeFunction",
    "Returning",
]
