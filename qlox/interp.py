from __future__ import annotations

import math
import sys
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, TextIO

from . import ast
from .diagnostics import Diagnostic, runtime_error
from .environment import Environment
from .errors import ScriptRuntimeError
from .resolver import Locals
from .runtime import BUILTINS, Callable, Class, Function, Instance, NativeFunction, Returning
from .tokens import Token, TokenType

_NUMERIC_BINARY = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


def is_truthy(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: object, right: object) -> bool:
    # bool is an int subclass in Python; keep kinds apart so `true == 1` is false.
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value: object) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if "e" in text:
            # Positional form with the same shortest digits, so the scanner can read it back.
            text = format(Decimal(text), "f")
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def _divide(left: float, right: float) -> float:
    if right != 0.0:
        return left / right
    if left == 0.0 or math.isnan(left):
        return math.nan
    return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _is_number(value: object) -> bool:
    return isinstance(value, float)


class Interpreter:
    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        builtins: Optional[Mapping[str, NativeFunction]] = None,
    ) -> None:
        self.stdout = stdout or sys.stdout
        self.globals = Environment()
        self.locals: Dict[ast.Expr, int] = {}
        for name, builtin in (BUILTINS if builtins is None else builtins).items():
            self.globals.define(name, builtin)

    def interpret(self, statements: Sequence[ast.Stmt], locals: Optional[Locals] = None) -> Optional[Diagnostic]:
        """
        Run top-level statements against the global environment.

        The first runtime error stops the remaining statements and is
        returned as a diagnostic; `None` means the program ran to the end.
        """
        if locals:
            self.locals.update(locals)
        for stmt in statements:
            try:
                self._exec_stmt(stmt, self.globals)
            except ScriptRuntimeError as err:
                return runtime_error(err.message, err.token.line)
            except RecursionError:
                return runtime_error("Stack overflow.", ast.line_of(stmt) or 0)
        return None

    def execute_block(self, statements: Sequence[ast.Stmt], env: Environment) -> Optional[Returning]:
        for stmt in statements:
            completion = self._exec_stmt(stmt, env)
            if completion is not None:
                return completion
        return None

    # Statements

    def _exec_stmt(self, stmt: ast.Stmt, env: Environment) -> Optional[Returning]:
        if isinstance(stmt, ast.Expression):
            self._eval(stmt.expression, env)
            return None
        if isinstance(stmt, ast.Print):
            value = self._eval(stmt.expression, env)
            self.stdout.write(stringify(value) + "\n")
            return None
        if isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self._eval(stmt.initializer, env)
            env.define(stmt.name.lexeme, value)
            return None
        if isinstance(stmt, ast.Block):
            return self.execute_block(stmt.statements, Environment(env))
        if isinstance(stmt, ast.If):
            if is_truthy(self._eval(stmt.condition, env)):
                return self._exec_stmt(stmt.then_branch, env)
            if stmt.else_branch is not None:
                return self._exec_stmt(stmt.else_branch, env)
            return None
        if isinstance(stmt, ast.While):
            while is_truthy(self._eval(stmt.condition, env)):
                completion = self._exec_stmt(stmt.body, env)
                if completion is not None:
                    return completion
            return None
        if isinstance(stmt, ast.Function):
            env.define(stmt.name.lexeme, Function(stmt, env))
            return None
        if isinstance(stmt, ast.Return):
            value = None
            if stmt.value is not None:
                value = self._eval(stmt.value, env)
            return Returning(value)
        if isinstance(stmt, ast.Class):
            self._exec_class(stmt, env)
            return None
        raise TypeError(f"Unsupported statement {stmt!r}")

    def _exec_class(self, stmt: ast.Class, env: Environment) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self._eval(stmt.superclass, env)
            if not isinstance(superclass, Class):
                raise ScriptRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        env.define(stmt.name.lexeme, None)

        method_env = env
        if superclass is not None:
            method_env = Environment(env)
            method_env.define("super", superclass)

        methods = {
            method.name.lexeme: Function(method, method_env, method.name.lexeme == "init")
            for method in stmt.methods
        }
        env.define(stmt.name.lexeme, Class(stmt.name.lexeme, superclass, methods))

    # Expressions

    def _eval(self, expr: ast.Expr, env: Environment) -> object:
        if isinstance(expr, ast.Literal):
            return expr.value
        if isinstance(expr, ast.Grouping):
            return self._eval(expr.expression, env)
        if isinstance(expr, ast.Variable):
            return self._lookup(expr.name, expr, env)
        if isinstance(expr, ast.Assign):
            value = self._eval(expr.value, env)
            distance = self.locals.get(expr)
            if distance is None:
                self.globals.assign(expr.name, value)
            else:
                env.assign_at(distance, expr.name.lexeme, value)
            return value
        if isinstance(expr, ast.Unary):
            return self._eval_unary(expr, env)
        if isinstance(expr, ast.Binary):
            return self._eval_binary(expr, env)
        if isinstance(expr, ast.Logical):
            left = self._eval(expr.left, env)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self._eval(expr.right, env)
        if isinstance(expr, ast.Call):
            return self._eval_call(expr, env)
        if isinstance(expr, ast.Get):
            obj = self._eval(expr.object, env)
            if not isinstance(obj, Instance):
                raise ScriptRuntimeError(expr.name, "Only instances have properties.")
            return obj.get(expr.name)
        if isinstance(expr, ast.Set):
            obj = self._eval(expr.object, env)
            if not isinstance(obj, Instance):
                raise ScriptRuntimeError(expr.name, "Only instances have fields.")
            value = self._eval(expr.value, env)
            obj.set(expr.name, value)
            return value
        if isinstance(expr, ast.This):
            return self._lookup(expr.keyword, expr, env)
        if isinstance(expr, ast.Super):
            return self._eval_super(expr, env)
        raise TypeError(f"Unsupported expression {expr!r}")

    def _eval_unary(self, expr: ast.Unary, env: Environment) -> object:
        right = self._eval(expr.right, env)
        if expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        if expr.operator.type == TokenType.MINUS:
            if not _is_number(right):
                raise ScriptRuntimeError(expr.operator, "Operand must be a number.")
            return -right
        raise TypeError(f"Unknown unary operator {expr.operator.lexeme}")

    def _eval_binary(self, expr: ast.Binary, env: Environment) -> object:
        left = self._eval(expr.left, env)
        right = self._eval(expr.right, env)
        op = expr.operator.type
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)
        if op == TokenType.PLUS:
            if _is_number(left) and _is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise ScriptRuntimeError(expr.operator, "Operands must be two numbers or two strings.")
        if not (_is_number(left) and _is_number(right)):
            raise ScriptRuntimeError(expr.operator, "Operands must be numbers.")
        if op == TokenType.SLASH:
            return _divide(left, right)
        if op in _NUMERIC_BINARY:
            return _NUMERIC_BINARY[op](left, right)
        raise TypeError(f"Unknown binary operator {expr.operator.lexeme}")

    def _eval_call(self, expr: ast.Call, env: Environment) -> object:
        callee = self._eval(expr.callee, env)
        arguments: List[object] = [self._eval(argument, env) for argument in expr.arguments]
        if not isinstance(callee, Callable):
            raise ScriptRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise ScriptRuntimeError(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise ScriptRuntimeError(expr.paren, "Stack overflow.") from None

    def _eval_super(self, expr: ast.Super, env: Environment) -> object:
        distance = self.locals[expr]
        superclass = env.get_at(distance, "super")
        # `this` lives in the scope just inside the one holding `super`.
        instance = env.get_at(distance - 1, "this")
        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise ScriptRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")
        return method.bind(instance)

    def _lookup(self, name: Token, expr: ast.Expr, env: Environment) -> object:
        distance = self.locals.get(expr)
        if distance is None:
            return self.globals.get(name)
        return env.get_at(distance, name.lexeme)


__all__ = ["Interpreter", "is_equal", "is_truthy", "stringify"]
