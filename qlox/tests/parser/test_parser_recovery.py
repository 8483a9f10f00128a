from __future__ import annotations

from qlox import ast
from qlox.parser import parse
from qlox.scanner import scan


def _parse(source: str):
    return parse(scan(source).tokens)


def test_error_message_and_location() -> None:
    result = _parse("print 1 +;")
    (diag,) = result.diagnostics
    assert diag.phase == "parse"
    assert diag.message == "Expect expression."
    assert diag.where == " at ';'"
    assert diag.render() == "[line 1] Error at ';': Expect expression."


def test_error_at_end_of_input() -> None:
    (diag,) = _parse("print 1").diagnostics
    assert diag.where == " at end"
    assert diag.message == "Expect ';' after value."


def test_one_diagnostic_per_bad_statement_and_rest_still_parses() -> None:
    result = _parse("var = 1;\nprint 2;\nvar x 3;\nprint 4;")
    assert [d.line for d in result.diagnostics] == [1, 3]
    assert [type(s) for s in result.statements] == [ast.Print, ast.Print]


def test_synchronize_stops_at_statement_keyword() -> None:
    result = _parse("1 + + fun f() {} print 5;")
    assert len(result.diagnostics) == 1
    assert [type(s) for s in result.statements] == [ast.Function, ast.Print]


def test_invalid_assignment_target_reported_without_unwinding() -> None:
    result = _parse("1 + 2 = 3; print 1;")
    assert [d.message for d in result.diagnostics] == ["Invalid assignment target."]
    assert result.diagnostics[0].where == " at '='"
    assert len(result.statements) == 2
    first = result.statements[0]
    assert isinstance(first, ast.Expression)
    assert isinstance(first.expression, ast.Binary)


def test_argument_cap_reported_but_parsing_continues() -> None:
    args = ", ".join(str(i) for i in range(256))
    result = _parse(f"f({args}); print 1;")
    assert [d.message for d in result.diagnostics] == ["Can't have more than 255 arguments."]
    call = result.statements[0].expression
    assert isinstance(call, ast.Call)
    assert len(call.arguments) == 256
    assert isinstance(result.statements[1], ast.Print)


def test_parameter_cap() -> None:
    params = ", ".join(f"p{i}" for i in range(256))
    result = _parse(f"fun f({params}) {{}}")
    assert [d.message for d in result.diagnostics] == ["Can't have more than 255 parameters."]
    assert len(result.statements[0].params) == 256


def test_exactly_255_arguments_is_fine() -> None:
    args = ", ".join("1" for _ in range(255))
    assert _parse(f"f({args});").diagnostics == []


def test_errors_inside_blocks_recover_inside_the_block() -> None:
    result = _parse("{ var a = ; print a; }\nprint 3;")
    assert len(result.diagnostics) == 1
    block, trailing = result.statements
    assert isinstance(block, ast.Block)
    assert [type(s) for s in block.statements] == [ast.Print]
    assert isinstance(trailing, ast.Print)


def test_missing_superclass_name() -> None:
    (diag,) = _parse("class A < { }").diagnostics
    assert diag.message == "Expect superclass name."


def test_deep_nesting_is_reported_and_parsing_continues() -> None:
    depth = 3000
    source = "print " + "(" * depth + "1" + ")" * depth + ";\nprint 2;"
    result = _parse(source)
    assert [d.message for d in result.diagnostics] == ["Expression nesting too deep."]
    assert result.diagnostics[0].line == 1
    (survivor,) = result.statements
    assert isinstance(survivor, ast.Print)
    assert survivor.expression.value == 2.0
