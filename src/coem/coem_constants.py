"""
Token vocabulary for the Coem language.

Exports:
    TokenType: Closed enumeration of every token kind the lexer can produce.
    token_hashmap: Punctuation lexemes mapped to their token types.
    CANONICAL_KEYWORDS: Built-in keyword spellings mapped to their token types.
    KEYWORD_TYPES: The token types that may be spelled by a keyword alias.
    STATEMENT_KEYWORDS: Token types that begin a declaration or statement.
    MAX_ARITY: Maximum parameters or call arguments before a diagnostic is raised.
"""

from enum import Enum


class TokenType(str, Enum):
    # Literals and names
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"

    # Punctuation
    EM_DASH = "EM_DASH"
    COMMA = "COMMA"
    COLON = "COLON"
    DOT = "DOT"
    SEMICOLON = "SEMICOLON"
    AMPERSAND = "AMPERSAND"

    # Keywords
    TO = "TO"
    LET = "LET"
    BE = "BE"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    PRINT = "PRINT"
    KNOW = "KNOW"
    SAY = "SAY"
    IS = "IS"
    AM = "AM"
    ARE = "ARE"
    NOT = "NOT"
    AND = "AND"
    OR = "OR"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NOTHING = "NOTHING"

    EOF = "EOF"
    # Lexer diagnostics only, never part of a parsed stream
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


token_hashmap: dict[str, TokenType] = {
    "—": TokenType.EM_DASH,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    "&": TokenType.AMPERSAND,
}

CANONICAL_KEYWORDS: dict[str, TokenType] = {
    "to": TokenType.TO,
    "let": TokenType.LET,
    "be": TokenType.BE,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "print": TokenType.PRINT,
    "know": TokenType.KNOW,
    "say": TokenType.SAY,
    "is": TokenType.IS,
    "am": TokenType.AM,
    "are": TokenType.ARE,
    "not": TokenType.NOT,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "nothing": TokenType.NOTHING,
}

KEYWORD_TYPES: frozenset[TokenType] = frozenset(CANONICAL_KEYWORDS.values())

STATEMENT_KEYWORDS: frozenset[TokenType] = frozenset(
    {
        TokenType.TO,
        TokenType.LET,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.KNOW,
        TokenType.SAY,
        TokenType.AMPERSAND,
    }
)

MAX_ARITY = 255
