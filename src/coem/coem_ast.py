"""
Defines the abstract syntax tree (AST) node types for the Coem programming language.

Nodes are frozen dataclasses: once the parser builds one it is never mutated, and
every child belongs to exactly one parent. Sequences of children are stored as
tuples.

Expressions:
    Literal, Variable, Assign, Logical, Binary, Unary, Call

Statements:
    Expression, Print, Var, Block, If, While, Function, Return, ErrorStmt

`ErrorStmt` takes the place of a declaration that failed to parse, so the list
returned by the parser has one entry per declaration attempt.

Every node supports `kind` (lower-case class name) and `to_dict()`, which turns the
node and all of its descendants into plain JSON-ready data:

    >>> Var(name, Literal(True)).to_dict()
    {'kind': 'var', 'name': {'type': 'IDENTIFIER', 'lexeme': 'x', 'line': 1}, 'initializer': {...}}
"""

from dataclasses import dataclass, fields
from typing import Any, TypedDict

from coem.coem_lexer import Token


class TokenDict(TypedDict):
    type: str
    lexeme: str
    line: int


def _serialize(value: Any) -> Any:
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, Token):
        return TokenDict(type=value.type.value, lexeme=value.lexeme, line=value.line)
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


class Node:
    """Common behaviour for expression and statement nodes."""

    @property
    def kind(self) -> str:
        return type(self).__name__.lower()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind}
        for field in fields(self):  # type: ignore[arg-type]
            data[field.name] = _serialize(getattr(self, field.name))
        return data


class Expr(Node):
    pass


class Stmt(Node):
    pass


# Expressions


@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Call(Expr):
    """A call suffix. `paren` is the em-dash closing the argument list, kept for error locations."""

    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


# Statements


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Expr | None = None


@dataclass(frozen=True)
class Block(Stmt):
    statements: tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt | None = None


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Expr | None = None


@dataclass(frozen=True)
class ErrorStmt(Stmt):
    """Placeholder for a declaration that failed to parse."""

    token: Token
    message: str


__all__ = [
    "Assign",
    "Binary",
    "Block",
    "Call",
    "ErrorStmt",
    "Expr",
    "Expression",
    "Function",
    "If",
    "Literal",
    "Logical",
    "Node",
    "Print",
    "Return",
    "Stmt",
    "Unary",
    "Var",
    "Variable",
    "While",
]
