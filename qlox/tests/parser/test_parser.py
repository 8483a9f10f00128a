from __future__ import annotations

import pytest

from qlox import ast
from qlox.parser import parse
from qlox.printer import AstPrinter
from qlox.scanner import scan
from qlox.test_support import parse_expr, parse_source


def _sexpr(source: str) -> str:
    return AstPrinter().print_expr(parse_expr(source))


def test_multiplication_binds_tighter_than_addition() -> None:
    assert _sexpr("1 + 2 * 3") == "(+ 1 (* 2 3))"


def test_precedence_ladder() -> None:
    assert _sexpr("a or b and c == d < e + f * -g") == "(or a (and b (== c (< d (+ e (* f (- g)))))))"


def test_binary_operators_are_left_associative() -> None:
    assert _sexpr("1 - 2 - 3") == "(- (- 1 2) 3)"
    assert _sexpr("8 / 4 / 2") == "(/ (/ 8 4) 2)"


def test_assignment_is_right_associative() -> None:
    expr = parse_expr("a = b = 1")
    assert isinstance(expr, ast.Assign)
    assert isinstance(expr.value, ast.Assign)
    assert _sexpr("a = b = 1") == "(= a (= b 1))"


def test_property_assignment_becomes_set() -> None:
    expr = parse_expr("a.b.c = 3")
    assert isinstance(expr, ast.Set)
    assert isinstance(expr.object, ast.Get)
    assert expr.name.lexeme == "c"


def test_chained_calls_and_gets() -> None:
    assert _sexpr("f()()") == "(call (call f))"
    assert _sexpr("a.b(1, 2).c") == "(. (call (. a b) 1 2) c)"


def test_super_and_this() -> None:
    assert _sexpr("super.cook(this)") == "(call (super cook) this)"


@pytest.mark.parametrize(
    "source, value",
    [
        ("12.5", 12.5),
        ('"text"', "text"),
        ("true", True),
        ("false", False),
        ("nil", None),
    ],
)
def test_literals(source: str, value: object) -> None:
    expr = parse_expr(source)
    assert isinstance(expr, ast.Literal)
    assert expr.value == value
    assert type(expr.value) is type(value)


def test_for_loop_desugars_to_while_in_block() -> None:
    (stmt,) = parse_source("for (var i = 0; i < 3; i = i + 1) print i;")
    assert isinstance(stmt, ast.Block)
    init, loop = stmt.statements
    assert isinstance(init, ast.Var)
    assert isinstance(loop, ast.While)
    assert isinstance(loop.body, ast.Block)
    body, increment = loop.body.statements
    assert isinstance(body, ast.Print)
    assert isinstance(increment, ast.Expression)
    assert isinstance(increment.expression, ast.Assign)


def test_for_loop_without_clauses_loops_on_true() -> None:
    (stmt,) = parse_source("for (;;) print 1;")
    assert isinstance(stmt, ast.While)
    assert isinstance(stmt.condition, ast.Literal)
    assert stmt.condition.value is True
    assert isinstance(stmt.body, ast.Print)


def test_class_with_superclass_and_methods() -> None:
    (stmt,) = parse_source("class B < A { init(x) { this.x = x; } get() { return this.x; } }")
    assert isinstance(stmt, ast.Class)
    assert stmt.name.lexeme == "B"
    assert isinstance(stmt.superclass, ast.Variable)
    assert stmt.superclass.name.lexeme == "A"
    assert [m.name.lexeme for m in stmt.methods] == ["init", "get"]
    assert [p.lexeme for p in stmt.methods[0].params] == ["x"]


def test_if_else_and_while() -> None:
    if_stmt, while_stmt = parse_source("if (a) print 1; else print 2; while (b) { x = x - 1; }")
    assert isinstance(if_stmt, ast.If)
    assert isinstance(if_stmt.else_branch, ast.Print)
    assert isinstance(while_stmt, ast.While)
    assert isinstance(while_stmt.body, ast.Block)


def test_return_without_value() -> None:
    (fn,) = parse_source("fun f() { return; }")
    (ret,) = fn.body
    assert isinstance(ret, ast.Return)
    assert ret.value is None


def test_identical_expressions_are_distinct_nodes() -> None:
    first, second = parse_source("a; a;")
    assert first.expression is not second.expression
    assert first.expression != second.expression
    assert len({first.expression, second.expression}) == 2


def test_parse_keeps_no_state_between_runs() -> None:
    tokens = scan("var a = 1; print a + 2;").tokens
    printer = AstPrinter()
    first = parse(tokens)
    second = parse(tokens)
    assert printer.print_program(first.statements) == printer.print_program(second.statements)
    assert first.diagnostics == second.diagnostics == []
