"""
Parenthesized prefix rendering of syntax trees, for `--ast` and tests.

    -123 * (45.67)   =>   (* (- 123) (group 45.67))
"""

from __future__ import annotations

from typing import Iterable, Sequence

from . import ast
from .interp import stringify


class AstPrinter:
    def print_program(self, statements: Sequence[ast.Stmt]) -> str:
        return "\n".join(self.print_stmt(stmt) for stmt in statements)

    def print_stmt(self, stmt: ast.Stmt) -> str:
        if isinstance(stmt, ast.Expression):
            return self._parenthesize(";", [self.print_expr(stmt.expression)])
        if isinstance(stmt, ast.Print):
            return self._parenthesize("print", [self.print_expr(stmt.expression)])
        if isinstance(stmt, ast.Var):
            parts = [stmt.name.lexeme]
            if stmt.initializer is not None:
                parts.append(self.print_expr(stmt.initializer))
            return self._parenthesize("var", parts)
        if isinstance(stmt, ast.Block):
            return self._parenthesize("block", [self.print_stmt(s) for s in stmt.statements])
        if isinstance(stmt, ast.If):
            parts = [self.print_expr(stmt.condition), self.print_stmt(stmt.then_branch)]
            if stmt.else_branch is not None:
                parts.append(self.print_stmt(stmt.else_branch))
            return self._parenthesize("if", parts)
        if isinstance(stmt, ast.While):
            return self._parenthesize("while", [self.print_expr(stmt.condition), self.print_stmt(stmt.body)])
        if isinstance(stmt, ast.Function):
            return self._function("fun", stmt)
        if isinstance(stmt, ast.Return):
            if stmt.value is None:
                return "(return)"
            return self._parenthesize("return", [self.print_expr(stmt.value)])
        if isinstance(stmt, ast.Class):
            parts = [stmt.name.lexeme]
            if stmt.superclass is not None:
                parts += ["<", stmt.superclass.name.lexeme]
            parts += [self._function("method", method) for method in stmt.methods]
            return self._parenthesize("class", parts)
        raise TypeError(f"Unsupported statement {stmt!r}")

    def print_expr(self, expr: ast.Expr) -> str:
        if isinstance(expr, ast.Literal):
            return _literal(expr.value)
        if isinstance(expr, ast.Grouping):
            return self._parenthesize("group", [self.print_expr(expr.expression)])
        if isinstance(expr, ast.Unary):
            return self._parenthesize(expr.operator.lexeme, [self.print_expr(expr.right)])
        if isinstance(expr, (ast.Binary, ast.Logical)):
            return self._parenthesize(
                expr.operator.lexeme,
                [self.print_expr(expr.left), self.print_expr(expr.right)],
            )
        if isinstance(expr, ast.Variable):
            return expr.name.lexeme
        if isinstance(expr, ast.Assign):
            return self._parenthesize("=", [expr.name.lexeme, self.print_expr(expr.value)])
        if isinstance(expr, ast.Call):
            return self._parenthesize(
                "call",
                [self.print_expr(expr.callee)] + [self.print_expr(arg) for arg in expr.arguments],
            )
        if isinstance(expr, ast.Get):
            return self._parenthesize(".", [self.print_expr(expr.object), expr.name.lexeme])
        if isinstance(expr, ast.Set):
            return self._parenthesize(
                "=.",
                [self.print_expr(expr.object), expr.name.lexeme, self.print_expr(expr.value)],
            )
        if isinstance(expr, ast.This):
            return "this"
        if isinstance(expr, ast.Super):
            return self._parenthesize("super", [expr.method.lexeme])
        raise TypeError(f"Unsupported expression {expr!r}")

    def _function(self, head: str, fn: ast.Function) -> str:
        params = "(" + " ".join(param.lexeme for param in fn.params) + ")"
        return self._parenthesize(head, [fn.name.lexeme, params] + [self.print_stmt(s) for s in fn.body])

    @staticmethod
    def _parenthesize(name: str, parts: Iterable[str]) -> str:
        return "(" + " ".join([name, *parts]) + ")"


def _literal(value: object) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    return stringify(value)
