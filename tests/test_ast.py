import dataclasses
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from coem.coem_ast import (
    Assign,
    Block,
    Call,
    ErrorStmt,
    Expression,
    Function,
    If,
    Literal,
    Print,
    Var,
    Variable,
)
from coem.coem_constants import TokenType
from coem.coem_lexer import Token
from conftest import ident, tok


def test_kind_is_lower_case_class_name() -> None:
    assert Literal(True).kind == "literal"
    assert ErrorStmt(ident("x"), "oops").kind == "errorstmt"


def test_nodes_are_frozen() -> None:
    node = Var(ident("x"), Literal(True))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.initializer = None  # type: ignore[misc]


def test_structural_equality() -> None:
    assert Print(Variable(ident("x"))) == Print(Variable(ident("x")))
    assert Print(Variable(ident("x"))) != Print(Variable(ident("y")))
    assert Print(Literal("x")) != Expression(Literal("x"))


def test_nodes_are_hashable() -> None:
    node = Block((Print(Literal("a")), Var(ident("b"))))
    assert hash(node) == hash(Block((Print(Literal("a")), Var(ident("b")))))


def test_var_to_dict() -> None:
    assert Var(ident("x"), Literal(True)).to_dict() == {
        "kind": "var",
        "name": {"type": "IDENTIFIER", "lexeme": "x", "line": 1},
        "initializer": {"kind": "literal", "value": True},
    }


def test_optional_children_serialize_as_none() -> None:
    data = If(Variable(ident("x")), Print(Literal("y"))).to_dict()
    assert data["else_branch"] is None
    assert data["then_branch"]["kind"] == "print"


def test_sequences_serialize_as_lists() -> None:
    fn = Function(ident("f"), (ident("a"), ident("b")), (Print(Variable(ident("a"))),))
    data = fn.to_dict()
    assert [p["lexeme"] for p in data["params"]] == ["a", "b"]
    assert data["body"][0]["expression"]["kind"] == "variable"


def test_call_to_dict_is_json_ready() -> None:
    call = Call(Variable(ident("f")), tok(TokenType.EM_DASH, "—"), (Literal("x"), Literal(None)))
    text = json.dumps(Expression(Assign(ident("r"), call)).to_dict())
    assert '"kind": "call"' in text
    assert '"value": null' in text


@given(st.text(), st.integers(min_value=1, max_value=10_000))  # type: ignore[misc]
def test_error_stmt_to_dict(message: str, line: int) -> None:
    token = Token(TokenType.SEMICOLON, ";", None, line, 1)
    data = ErrorStmt(token, message).to_dict()
    assert data == {
        "kind": "errorstmt",
        "token": {"type": "SEMICOLON", "lexeme": ";", "line": line},
        "message": message,
    }
