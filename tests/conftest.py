from typing import Any

from coem.coem_ast import Stmt
from coem.coem_constants import TokenType
from coem.coem_lexer import Token, tokenize
from coem.coem_parser import Parser


class Collector:
    """Diagnostic sink that just remembers what it was given."""

    def __init__(self) -> None:
        self.calls: list[tuple[Token, str]] = []

    def __call__(self, token: Token, message: str) -> None:
        self.calls.append((token, message))

    @property
    def messages(self) -> list[str]:
        return [message for _, message in self.calls]


def tok(type_: TokenType, lexeme: str = "", literal: Any = None, line: int = 1) -> Token:
    return Token(type_, lexeme or type_.value.lower(), literal, line, 0)


def ident(name: str, line: int = 1) -> Token:
    return Token(TokenType.IDENTIFIER, name, None, line, 0)


def eof(line: int = 1) -> Token:
    return Token(TokenType.EOF, "", None, line, 0)


def parse_source(source: str) -> tuple[list[Stmt], Parser, Collector]:
    sink = Collector()
    parser = Parser(tokenize(source), on_error=sink)
    return parser.parse(), parser, sink
