"""
Diagnostics for the Coem front end.

The parser never raises on malformed input. Every grammar procedure returns either
the node it built or a `ParseFailure`, and every problem it notices is recorded as a
`Diagnostic` and handed to a sink: any callable taking `(token, message)`.

Classes:
    DiagnosticKind: The four kinds of syntax problem the parser reports.
    Diagnostic: One reported problem, tied to the offending token.
    ParseFailure: Result marker returned by a grammar procedure that could not match.
    ErrorReporter: Default console sink used by the CLI and REPL.
    MappingError: Raised when a keyword alias configuration is invalid.

Message format (shared by every sink that uses `format_diagnostic`):
    [line 3] Error at 'x': Expect ';' after value.
    [line 9] Error at end: Expect '.' after block.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, TextIO

from coem.coem_constants import TokenType

if TYPE_CHECKING:
    from coem.coem_lexer import Token

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[["Token", str], None]


class DiagnosticKind(str, Enum):
    MISSING_EXPECTED_TOKEN = "missing-expected-token"
    INVALID_ASSIGNMENT_TARGET = "invalid-assignment-target"
    ARITY_EXCEEDED = "arity-exceeded"
    UNEXPECTED_PRIMARY = "unexpected-primary"


def format_diagnostic(token: Token, message: str) -> str:
    """Formats a diagnostic the way the command-line tools print it.

    Args:
        token: The offending token. `EOF` is rendered as "at end", lexer `ERROR`
            tokens carry no location text.
        message: Human-readable description.

    Returns:
        str: A single line such as ``[line 2] Error at 'be': Invalid assignment target.``
    """
    if token.type == TokenType.EOF:
        where = " at end"
    elif token.type == TokenType.ERROR:
        where = ""
    else:
        where = f" at '{token.lexeme}'"
    return f"[line {token.line}] Error{where}: {message}"


@dataclass(frozen=True)
class Diagnostic:
    """A single syntax problem.

    Attributes:
        kind (DiagnosticKind): What went wrong.
        token (Token): Where it went wrong.
        message (str): Human-readable description.
    """

    kind: DiagnosticKind
    token: Token
    message: str

    def __str__(self) -> str:
        return format_diagnostic(self.token, self.message)


@dataclass(frozen=True)
class ParseFailure:
    """Returned instead of a node when a grammar procedure cannot continue.

    The diagnostic has already been reported by the time a failure is returned;
    callers only propagate it until a declaration boundary resynchronizes.
    """

    diagnostic: Diagnostic

    @property
    def token(self) -> Token:
        return self.diagnostic.token

    @property
    def message(self) -> str:
        return self.diagnostic.message


class ErrorReporter:
    """Console diagnostic sink.

    Writes each reported problem to a text stream and remembers it, so a driver can
    decide afterwards whether it is safe to hand the tree to an evaluator.

    Attributes:
        stream (TextIO): Where formatted diagnostics are written.
        messages (list[str]): Every formatted diagnostic since the last reset.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self.messages: list[str] = []

    @property
    def had_error(self) -> bool:
        return bool(self.messages)

    def __call__(self, token: Token, message: str) -> None:
        self.report(token, message)

    def report(self, token: Token, message: str) -> None:
        text = format_diagnostic(token, message)
        self.messages.append(text)
        logger.debug("diagnostic reported: %s", text)
        print(text, file=self.stream or sys.stderr)

    def reset(self) -> None:
        self.messages.clear()


class MappingError(Exception):
    """Raised when a keyword alias configuration is invalid or conflicting.

    Attributes:
        conflicts (list[str]): One line per alias that was claimed by two token types.

    Example:
        raise MappingError("Alias collision(s) detected", ["'yell' → conflict between SAY and PRINT"])
    """

    def __init__(self, message: str, conflicts: list[str] | None = None):
        super().__init__(message)
        self.conflicts = conflicts or []


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "ErrorReporter",
    "MappingError",
    "ParseFailure",
    "format_diagnostic",
]
