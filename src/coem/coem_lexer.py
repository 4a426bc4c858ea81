"""
Lexical analyzer for the Coem programming language.

This module converts raw source text into the token stream consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Immutable lexical token with type, lexeme, literal payload, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Functions:
    tokenize: Lexes a whole source string, returning every token including `EOF`.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Recognizes:
        * Identifiers and keywords (keywords come from a `KeywordMapper`)
        * Strings in double or single quotes, possibly spanning lines
        * Punctuation: `—` (em-dash), `,`, `:`, `.`, `;`, `&`
    - Bad input is reported through an optional `(token, message)` sink and skipped,
      so every stream ends with exactly one `EOF` token.

Example:
    >>> [t.type.value for t in tokenize("say x;")]
    ['SAY', 'IDENTIFIER', 'SEMICOLON', 'EOF']
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

from coem.coem_constants import TokenType, token_hashmap
from coem.coem_uimap import KeywordMapper

logger = logging.getLogger(__name__)

_BOOLEAN_LITERALS = {TokenType.TRUE: True, TokenType.FALSE: False}


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` from the current position, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def current(self) -> str | None:
        return self.source[self.position] if self.position < len(self.source) else None

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """Represents a single lexical token in the Coem language.

    Attributes:
        type (TokenType): The token's kind.
        lexeme (str): The source text the token was read from.
        literal (Any): `str` for strings, `bool` for `true`/`false`, otherwise None.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
    """

    type: TokenType
    lexeme: str
    literal: Any = None
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.lexeme!r})"


class Lexer:
    """Lexical analyzer for the Coem language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        on_error (Callable[[Token, str], None] | None): Receives lexical diagnostics.
        keywords (KeywordMapper): Resolves identifiers to keyword token types.
    """

    def __init__(
        self,
        stream: CharacterStream,
        on_error: Callable[[Token, str], None] | None = None,
        keywords: KeywordMapper | None = None,
    ) -> None:
        self.stream = stream
        self.on_error = on_error
        self.keywords = keywords or KeywordMapper.from_canonical()

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def error(self, text: str, line: int, col: int, message: str) -> None:
        logger.debug("skipping bad input %r at line %d, col %d", text, line, col)
        if self.on_error is not None:
            self.on_error(Token(TokenType.ERROR, text, None, line, col), message)

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def read_identifier(self, line: int, col: int) -> Token:
        ident = ""
        while not self.stream.end_of_file() and (self.peek().isalnum() or self.peek() == "_"):
            ident += self.advance()
        keyword = self.keywords.get_type(ident)
        if keyword is not None:
            return Token(keyword, ident, _BOOLEAN_LITERALS.get(keyword), line, col)
        return Token(TokenType.IDENTIFIER, ident, None, line, col)

    def read_string(self, line: int, col: int) -> Token | None:
        quote = self.advance()
        val = ""
        while not self.stream.end_of_file() and self.peek() != quote:
            val += self.advance()
        if self.stream.end_of_file():
            self.error(quote + val, line, col, "Unterminated string.")
            return None
        self.advance()
        return Token(TokenType.STRING, quote + val + quote, val, line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Unknown characters and unterminated strings are reported and skipped, so this
        always eventually returns a token; once the source is exhausted it keeps
        returning `EOF`.
        """
        while True:
            self.skip_whitespace()
            line, col = self.stream.line, self.stream.column

            if self.stream.end_of_file():
                return Token(TokenType.EOF, "", None, line, col)

            ch = self.peek()

            # 1. Identifier or keyword
            if ch.isalpha() or ch == "_":
                return self.read_identifier(line, col)

            # 2. String
            if ch in ('"', "'"):
                string_token = self.read_string(line, col)
                if string_token is not None:
                    return string_token
                continue

            # 3. Punctuation
            if ch in token_hashmap:
                return Token(token_hashmap[ch], self.advance(), None, line, col)

            # 4. Unknown character
            self.error(self.advance(), line, col, "Unexpected character.")


def tokenize(
    source: str,
    on_error: Callable[[Token, str], None] | None = None,
    keywords: KeywordMapper | None = None,
) -> list[Token]:
    """Lexes `source` completely and returns its tokens, ending with `EOF`."""
    lexer = Lexer(CharacterStream(source, 0, 1, 1), on_error=on_error, keywords=keywords)
    tokens: list[Token] = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == TokenType.EOF:
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize", "token_hashmap"]
