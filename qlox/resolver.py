"""
Static scope resolution.

Walks the tree once, without evaluating anything, and records for every
variable read/assignment (and every `this`/`super`) how many environments
separate the use from its declaration. Names that are not found in any
local scope are left out of the map; the interpreter looks those up in the
global environment.

The same walk checks the placement rules the parser can't see: `return`
outside functions, values returned from initializers, `this`/`super`
outside classes, self-inheritance, duplicate locals and locals read in
their own initializer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Sequence, Set

from . import ast
from .diagnostics import RESOLVE, Diagnostic, compile_error
from .tokens import Token

# Distance map: expression node -> number of environment hops.
Locals = Dict[ast.Expr, int]


class FunctionKind(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassKind(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


@dataclass
class Resolution:
    locals: Locals
    diagnostics: List[Diagnostic]


class Resolver:
    def __init__(self, known_globals: Iterable[str] = ()) -> None:
        self.locals: Locals = {}
        self.diagnostics: List[Diagnostic] = []
        # Innermost scope last; values say whether the initializer has run.
        self.scopes: List[Dict[str, bool]] = []
        self.globals: Set[str] = set(known_globals)
        self.current_function = FunctionKind.NONE
        self.current_class = ClassKind.NONE

    def resolve(self, statements: Sequence[ast.Stmt]) -> Locals:
        for stmt in statements:
            self._resolve_stmt(stmt)
        return self.locals

    # Statements

    def _resolve_stmt(self, stmt: ast.Stmt) -> None:
        if isinstance(stmt, ast.Block):
            self._begin_scope()
            self.resolve(stmt.statements)
            self._end_scope()
            return
        if isinstance(stmt, ast.Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)
            return
        if isinstance(stmt, ast.Function):
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt, FunctionKind.FUNCTION)
            return
        if isinstance(stmt, ast.Class):
            self._resolve_class(stmt)
            return
        if isinstance(stmt, ast.Expression):
            self._resolve_expr(stmt.expression)
            return
        if isinstance(stmt, ast.Print):
            self._resolve_expr(stmt.expression)
            return
        if isinstance(stmt, ast.If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)
            return
        if isinstance(stmt, ast.While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)
            return
        if isinstance(stmt, ast.Return):
            if self.current_function == FunctionKind.NONE:
                self._error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                if self.current_function == FunctionKind.INITIALIZER:
                    self._error(stmt.keyword, "Can't return a value from an initializer.")
                self._resolve_expr(stmt.value)
            return
        raise TypeError(f"Unsupported statement {stmt!r}")

    def _resolve_class(self, stmt: ast.Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassKind.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self._error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassKind.SUBCLASS
            self._resolve_expr(stmt.superclass)
            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            kind = FunctionKind.METHOD
            if method.name.lexeme == "init":
                kind = FunctionKind.INITIALIZER
            self._resolve_function(method, kind)
        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def _resolve_function(self, function: ast.Function, kind: FunctionKind) -> None:
        enclosing_function = self.current_function
        self.current_function = kind
        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self.resolve(function.body)
        self._end_scope()
        self.current_function = enclosing_function

    # Expressions

    def _resolve_expr(self, expr: ast.Expr) -> None:
        if isinstance(expr, ast.Variable):
            self._resolve_variable(expr)
            return
        if isinstance(expr, ast.Assign):
            self._resolve_expr(expr.value)
            skip = 1 if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False else 0
            self._resolve_local(expr, expr.name, skip=skip)
            return
        if isinstance(expr, (ast.Binary, ast.Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)
            return
        if isinstance(expr, ast.Unary):
            self._resolve_expr(expr.right)
            return
        if isinstance(expr, ast.Grouping):
            self._resolve_expr(expr.expression)
            return
        if isinstance(expr, ast.Literal):
            return
        if isinstance(expr, ast.Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)
            return
        if isinstance(expr, ast.Get):
            self._resolve_expr(expr.object)
            return
        if isinstance(expr, ast.Set):
            self._resolve_expr(expr.value)
            self._resolve_expr(expr.object)
            return
        if isinstance(expr, ast.This):
            if self.current_class == ClassKind.NONE:
                self._error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self._resolve_local(expr, expr.keyword)
            return
        if isinstance(expr, ast.Super):
            if self.current_class == ClassKind.NONE:
                self._error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self.current_class != ClassKind.SUBCLASS:
                self._error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self._resolve_local(expr, expr.keyword)
            return
        raise TypeError(f"Unsupported expression {expr!r}")

    def _resolve_variable(self, expr: ast.Variable) -> None:
        name = expr.name.lexeme
        if self.scopes and self.scopes[-1].get(name) is False:
            # Declared in this scope but its initializer hasn't finished:
            # fall through to an outer binding when there is one.
            if not self._visible_outside_innermost(name):
                self._error(expr.name, "Can't read local variable in its own initializer.")
            self._resolve_local(expr, expr.name, skip=1)
            return
        self._resolve_local(expr, expr.name)

    # Scope bookkeeping

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            self.globals.add(name.lexeme)
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _visible_outside_innermost(self, name: str) -> bool:
        return name in self.globals or any(name in scope for scope in self.scopes[:-1])

    def _resolve_local(self, expr: ast.Expr, name: Token, skip: int = 0) -> None:
        for depth in range(skip, len(self.scopes)):
            if name.lexeme in self.scopes[-1 - depth]:
                self.locals[expr] = depth
                return

    def _error(self, token: Token, message: str) -> None:
        self.diagnostics.append(compile_error(RESOLVE, token.line, message, f" at '{token.lexeme}'"))


def resolve(statements: Sequence[ast.Stmt], known_globals: Iterable[str] = ()) -> Resolution:
    resolver = Resolver(known_globals)
    for stmt in statements:
        try:
            resolver.resolve([stmt])
        except RecursionError:
            resolver.diagnostics.append(
                compile_error(RESOLVE, ast.line_of(stmt) or 0, "Expression nesting too deep.")
            )
            # Scope and context state is left mid-walk; start the next statement clean.
            resolver.scopes = []
            resolver.current_function = FunctionKind.NONE
            resolver.current_class = ClassKind.NONE
    return Resolution(locals=resolver.locals, diagnostics=resolver.diagnostics)


__all__ = ["ClassKind", "FunctionKind", "Locals", "Resolution", "Resolver", "resolve"]
