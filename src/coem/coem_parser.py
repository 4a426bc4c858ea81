"""
Coem Language Parser

Parses Coem tokens into a list of statement nodes (see `coem.coem_ast`).

The parser is a recursive-descent parser. Each grammar rule is a `parse_*` method,
and expressions are parsed with a precedence ladder, loosest first:

    assignment  ->  or  ->  and  ->  equality  ->  unary  ->  call  ->  primary

Grammar
-------
    program    := declaration* EOF
    declaration:= function | varDecl | statement
    function   := 'to' IDENT '—' (IDENT (',' IDENT)*)? '—' ':' block
    block      := declaration* '.'
    varDecl    := 'let' IDENT ('be' expression)? ';'
    statement  := ifStmt | printStmt | returnStmt | whileStmt | ':' block | exprStmt
    ifStmt     := 'if' '—' primary '—' statement ('else' statement)?
    printStmt  := ('print' | 'know' | 'say') expression ';'
    returnStmt := '&' expression? ';'
    whileStmt  := 'while' '—' primary '—' statement
    exprStmt   := expression ';'

    assignment := IDENT 'be' assignment | or
    or         := and ('or' and)*
    and        := equality ('and' equality)*
    equality   := unary (('is' | 'am' | 'are') unary)*
    unary      := 'not' unary | call
    call       := primary ('—' (primary (',' primary)*)? '—')*
    primary    := 'true' | 'false' | 'nothing' | STRING | IDENT

Conditions of `if`/`while` and call arguments are single primaries.

Error Handling
--------------
Grammar methods return either a node or a `ParseFailure`. A failure is reported
when it is created and passed back by early return until `parse_declaration`,
which resynchronizes (panic mode) and records an `ErrorStmt` in its place.
Invalid assignment targets and oversized parameter/argument lists are reported
but do not fail the statement.

`parse()` never raises on malformed input; check `Parser.had_error` or the
diagnostic sink before evaluating the result.
"""

from __future__ import annotations

import logging
from typing import Sequence, Union

from coem.coem_ast import (
    Assign,
    Binary,
    Block,
    Call,
    ErrorStmt,
    Expr,
    Expression,
    Function,
    If,
    Literal,
    Logical,
    Print,
    Return,
    Stmt,
    Unary,
    Var,
    Variable,
    While,
)
from coem.coem_constants import MAX_ARITY, STATEMENT_KEYWORDS, TokenType
from coem.coem_errors import Diagnostic, DiagnosticKind, DiagnosticSink, ParseFailure
from coem.coem_lexer import Token

logger = logging.getLogger(__name__)

ExprResult = Union[Expr, ParseFailure]
StmtResult = Union[Stmt, ParseFailure]


class TokenCursor:
    """
    Read position over an immutable token sequence.

    The cursor never moves past the trailing `EOF` token, so `current()` is always
    valid once construction succeeds.

    Attributes
    ----------
    tokens : tuple[Token, ...]
        The token stream, ending with `EOF`.
    position : int
        Index of the current (not yet consumed) token.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("Token stream must end with an EOF token")
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.position: int = 0

    def current(self) -> Token:
        return self.tokens[self.position]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.position + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def previous(self) -> Token:
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        return self.current().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.position += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.current().type == type_

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False


class Parser:
    """
    Coem Parser Class

    Turns one token stream into a list of statements. A parser instance holds the
    cursor for a single pass and is not meant to be reused for another stream.

    Attributes
    ----------
    cursor : TokenCursor
        Position in the token stream.
    on_error : DiagnosticSink | None
        Called with `(token, message)` for every problem found.
    diagnostics : list[Diagnostic]
        Every problem found so far, in order.
    max_arity : int
        Number of parameters or arguments allowed before a diagnostic is reported.

    Methods
    -------
    parse() -> list[Stmt]
        Parse the whole stream.
    synchronize() -> None
        Skip to the start of the next statement after a failure.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        on_error: DiagnosticSink | None = None,
        max_arity: int = MAX_ARITY,
    ) -> None:
        self.cursor = TokenCursor(tokens)
        self.on_error = on_error
        self.max_arity = max_arity
        self.diagnostics: list[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    # Diagnostics

    def report(self, kind: DiagnosticKind, token: Token, message: str) -> Diagnostic:
        diagnostic = Diagnostic(kind, token, message)
        self.diagnostics.append(diagnostic)
        if self.on_error is not None:
            self.on_error(token, message)
        return diagnostic

    def fail(self, kind: DiagnosticKind, token: Token, message: str) -> ParseFailure:
        return ParseFailure(self.report(kind, token, message))

    def consume(self, type_: TokenType, message: str) -> Token | ParseFailure:
        if self.cursor.check(type_):
            return self.cursor.advance()
        return self.fail(DiagnosticKind.MISSING_EXPECTED_TOKEN, self.cursor.current(), message)

    def synchronize(self) -> None:
        """Discard tokens until the previous one ended a statement or the next one starts one."""
        skipped_from = self.cursor.current()
        self.cursor.advance()

        while not self.cursor.is_at_end():
            if self.cursor.previous().type == TokenType.SEMICOLON:
                break
            if self.cursor.current().type in STATEMENT_KEYWORDS:
                break
            self.cursor.advance()

        logger.debug(
            "resynchronized from line %d to %r at line %d",
            skipped_from.line,
            self.cursor.current().lexeme,
            self.cursor.current().line,
        )

    # Statements

    def parse(self) -> list[Stmt]:
        """Parse a full Coem program and return its top-level statements."""
        statements: list[Stmt] = []
        while not self.cursor.is_at_end():
            statements.append(self.parse_declaration())
        return statements

    def parse_declaration(self) -> Stmt:
        if self.cursor.match(TokenType.TO):
            result: StmtResult = self.parse_function()
        elif self.cursor.match(TokenType.LET):
            result = self.parse_var_declaration()
        else:
            result = self.parse_statement()

        if isinstance(result, ParseFailure):
            self.synchronize()
            return ErrorStmt(result.token, result.message)
        return result

    def parse_function(self) -> StmtResult:
        """Parse `name — params — : body .` after the `to` keyword."""
        name = self.consume(TokenType.IDENTIFIER, "Expect function name.")
        if isinstance(name, ParseFailure):
            return name
        dash = self.consume(TokenType.EM_DASH, "Expect '—' after function name.")
        if isinstance(dash, ParseFailure):
            return dash

        params: list[Token] = []
        if not self.cursor.check(TokenType.EM_DASH):
            while True:
                if len(params) == self.max_arity:
                    self.report(
                        DiagnosticKind.ARITY_EXCEEDED,
                        self.cursor.current(),
                        f"Can't have more than {self.max_arity} parameters.",
                    )
                param = self.consume(TokenType.IDENTIFIER, "Expect parameter name.")
                if isinstance(param, ParseFailure):
                    return param
                params.append(param)
                if not self.cursor.match(TokenType.COMMA):
                    break

        dash = self.consume(TokenType.EM_DASH, "Expect '—' after parameters.")
        if isinstance(dash, ParseFailure):
            return dash
        colon = self.consume(TokenType.COLON, "Expect ':' before function body.")
        if isinstance(colon, ParseFailure):
            return colon

        body = self.parse_block()
        if isinstance(body, ParseFailure):
            return body
        return Function(name, tuple(params), tuple(body))

    def parse_block(self) -> list[Stmt] | ParseFailure:
        """Parse declarations up to and including the closing `.`."""
        statements: list[Stmt] = []
        while not self.cursor.check(TokenType.DOT) and not self.cursor.is_at_end():
            statements.append(self.parse_declaration())

        dot = self.consume(TokenType.DOT, "Expect '.' after block.")
        if isinstance(dot, ParseFailure):
            return dot
        return statements

    def parse_var_declaration(self) -> StmtResult:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        if isinstance(name, ParseFailure):
            return name

        initializer: Expr | None = None
        if self.cursor.match(TokenType.BE):
            value = self.parse_expression()
            if isinstance(value, ParseFailure):
                return value
            initializer = value

        semicolon = self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Var(name, initializer)

    def parse_statement(self) -> StmtResult:
        if self.cursor.match(TokenType.IF):
            return self.parse_if()
        if self.cursor.match(TokenType.PRINT, TokenType.KNOW, TokenType.SAY):
            return self.parse_print()
        if self.cursor.match(TokenType.AMPERSAND):
            return self.parse_return()
        if self.cursor.match(TokenType.WHILE):
            return self.parse_while()
        if self.cursor.match(TokenType.COLON):
            statements = self.parse_block()
            if isinstance(statements, ParseFailure):
                return statements
            return Block(tuple(statements))
        return self.parse_expression_statement()

    def parse_condition(self, keyword: str, closing_message: str) -> ExprResult:
        """Parse the `— primary —` condition shared by `if` and `while`."""
        dash = self.consume(TokenType.EM_DASH, f"Expect '—' after '{keyword}'.")
        if isinstance(dash, ParseFailure):
            return dash
        condition = self.parse_primary()
        if isinstance(condition, ParseFailure):
            return condition
        dash = self.consume(TokenType.EM_DASH, closing_message)
        if isinstance(dash, ParseFailure):
            return dash
        return condition

    def parse_if(self) -> StmtResult:
        condition = self.parse_condition("if", "Expect '—' after if condition.")
        if isinstance(condition, ParseFailure):
            return condition

        then_branch = self.parse_statement()
        if isinstance(then_branch, ParseFailure):
            return then_branch

        else_branch: Stmt | None = None
        if self.cursor.match(TokenType.ELSE):
            branch = self.parse_statement()
            if isinstance(branch, ParseFailure):
                return branch
            else_branch = branch

        return If(condition, then_branch, else_branch)

    def parse_print(self) -> StmtResult:
        value = self.parse_expression()
        if isinstance(value, ParseFailure):
            return value
        semicolon = self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Print(value)

    def parse_return(self) -> StmtResult:
        keyword = self.cursor.previous()
        value: Expr | None = None
        if not self.cursor.check(TokenType.SEMICOLON):
            result = self.parse_expression()
            if isinstance(result, ParseFailure):
                return result
            value = result

        semicolon = self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Return(keyword, value)

    def parse_while(self) -> StmtResult:
        condition = self.parse_condition("while", "Expect '—' after condition.")
        if isinstance(condition, ParseFailure):
            return condition
        body = self.parse_statement()
        if isinstance(body, ParseFailure):
            return body
        return While(condition, body)

    def parse_expression_statement(self) -> StmtResult:
        expr = self.parse_expression()
        if isinstance(expr, ParseFailure):
            return expr
        semicolon = self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        if isinstance(semicolon, ParseFailure):
            return semicolon
        return Expression(expr)

    # Expressions

    def parse_expression(self) -> ExprResult:
        return self.parse_assignment()

    def parse_assignment(self) -> ExprResult:
        expr = self.parse_or()
        if isinstance(expr, ParseFailure):
            return expr

        if self.cursor.match(TokenType.BE):
            be = self.cursor.previous()
            value = self.parse_assignment()
            if isinstance(value, ParseFailure):
                return value
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Keep the right-hand side so the statement still parses
            self.report(DiagnosticKind.INVALID_ASSIGNMENT_TARGET, be, "Invalid assignment target.")
            return value

        return expr

    def parse_or(self) -> ExprResult:
        expr = self.parse_and()
        if isinstance(expr, ParseFailure):
            return expr

        while self.cursor.match(TokenType.OR):
            operator = self.cursor.previous()
            right = self.parse_and()
            if isinstance(right, ParseFailure):
                return right
            expr = Logical(expr, operator, right)
        return expr

    def parse_and(self) -> ExprResult:
        expr = self.parse_equality()
        if isinstance(expr, ParseFailure):
            return expr

        while self.cursor.match(TokenType.AND):
            operator = self.cursor.previous()
            right = self.parse_equality()
            if isinstance(right, ParseFailure):
                return right
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> ExprResult:
        expr = self.parse_unary()
        if isinstance(expr, ParseFailure):
            return expr

        while self.cursor.match(TokenType.IS, TokenType.AM, TokenType.ARE):
            operator = self.cursor.previous()
            right = self.parse_unary()
            if isinstance(right, ParseFailure):
                return right
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> ExprResult:
        if self.cursor.match(TokenType.NOT):
            operator = self.cursor.previous()
            right = self.parse_unary()
            if isinstance(right, ParseFailure):
                return right
            return Unary(operator, right)
        return self.parse_call()

    def parse_call(self) -> ExprResult:
        expr = self.parse_primary()
        if isinstance(expr, ParseFailure):
            return expr

        while self.cursor.match(TokenType.EM_DASH):
            expr = self.finish_call(expr)
            if isinstance(expr, ParseFailure):
                return expr
        return expr

    def finish_call(self, callee: Expr) -> ExprResult:
        """Parse the argument list of a call whose opening `—` was just consumed."""
        arguments: list[Expr] = []
        if not self.cursor.check(TokenType.EM_DASH):
            while True:
                if len(arguments) == self.max_arity:
                    self.report(
                        DiagnosticKind.ARITY_EXCEEDED,
                        self.cursor.current(),
                        f"Can't have more than {self.max_arity} arguments.",
                    )
                argument = self.parse_primary()
                if isinstance(argument, ParseFailure):
                    return argument
                arguments.append(argument)
                if not self.cursor.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.EM_DASH, "Expect '—' after arguments.")
        if isinstance(paren, ParseFailure):
            return paren
        return Call(callee, paren, tuple(arguments))

    def parse_primary(self) -> ExprResult:
        if self.cursor.match(TokenType.FALSE):
            return Literal(False)
        if self.cursor.match(TokenType.TRUE):
            return Literal(True)
        if self.cursor.match(TokenType.NOTHING):
            return Literal(None)
        if self.cursor.match(TokenType.STRING):
            return Literal(self.cursor.previous().literal)
        if self.cursor.match(TokenType.IDENTIFIER):
            return Variable(self.cursor.previous())

        return self.fail(DiagnosticKind.UNEXPECTED_PRIMARY, self.cursor.current(), "Expect expression.")


def parse(tokens: Sequence[Token], on_error: DiagnosticSink | None = None) -> list[Stmt]:
    """Parse `tokens` with a fresh `Parser` and return the top-level statements."""
    return Parser(tokens, on_error=on_error).parse()
