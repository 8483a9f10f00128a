from __future__ import annotations

from .tokens import Token


class ScriptRuntimeError(Exception):
    """A runtime failure of the script being interpreted (not of the interpreter)."""

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token
        self.message = message
