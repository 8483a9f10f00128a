"""
Syntax tree produced by the parser.

Two closed node families: `Expr` and `Stmt`. Nodes are frozen and compare
by identity (`eq=False`), so the resolver can key its distance map on the
node objects themselves: two identical-looking expressions at different
source positions stay distinct.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import Literal as LiteralValue
from .tokens import Token


class Expr:
    """Base class for expression nodes."""


class Stmt:
    """Base class for statement nodes."""


# Expressions


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    # Closing parenthesis; runtime errors for the call report its line.
    paren: Token
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Get(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Optional[LiteralValue | bool]


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Set(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: Token
    method: Token


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: Token


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


# Statements


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: Token
    superclass: Optional[Variable]
    methods: Tuple[Function, ...]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


def line_of(node: object) -> Optional[int]:
    """Line of the first token found under `node`, searched breadth first without recursion."""
    pending = deque([node])
    while pending:
        current = pending.popleft()
        if isinstance(current, Token):
            return current.line
        if isinstance(current, (Expr, Stmt)):
            pending.extend(vars(current).values())
        elif isinstance(current, tuple):
            pending.extend(current)
    return None
