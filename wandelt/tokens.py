"""Token kinds, source spans and tokens produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto


class TokenType(IntEnum):
    """Every kind of token the lexer can produce, in table order."""

    INVALID = 0

    # Keywords
    PACKAGE_KEYWORD = auto()
    RETURN_KEYWORD = auto()
    AS_KEYWORD = auto()
    FN_KEYWORD = auto()

    # Directives
    ENTRYPOINT_DIRECTIVE = auto()

    # Built-in types
    VOID_KEYWORD = auto()
    BOOL_KEYWORD = auto()
    CHAR_KEYWORD = auto()
    UCHAR_KEYWORD = auto()
    SHORT_KEYWORD = auto()
    USHORT_KEYWORD = auto()
    INT_KEYWORD = auto()
    UINT_KEYWORD = auto()
    LONG_KEYWORD = auto()
    ULONG_KEYWORD = auto()
    SZ_KEYWORD = auto()
    USZ_KEYWORD = auto()
    INTPTR_KEYWORD = auto()
    UINTPTR_KEYWORD = auto()
    FLOAT_KEYWORD = auto()
    DOUBLE_KEYWORD = auto()
    STRING_KEYWORD = auto()
    CSTRING_KEYWORD = auto()
    RAWPTR_KEYWORD = auto()

    # Single-character tokens
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()
    SEMICOLON = auto()
    EQUALS = auto()
    DOT = auto()

    # Double-character tokens
    BANG_BANG = auto()

    # Literals
    IDENTIFIER = auto()
    INTEGER = auto()
    FLOAT = auto()
    DOUBLE = auto()
    TRUE = auto()
    FALSE = auto()

    EOF = auto()


_TOKEN_NAMES = {
    TokenType.PACKAGE_KEYWORD: "package",
    TokenType.RETURN_KEYWORD: "return",
    TokenType.AS_KEYWORD: "as",
    TokenType.FN_KEYWORD: "fn",
    TokenType.ENTRYPOINT_DIRECTIVE: "#entrypoint",
    TokenType.VOID_KEYWORD: "void",
    TokenType.BOOL_KEYWORD: "bool",
    TokenType.CHAR_KEYWORD: "char",
    TokenType.UCHAR_KEYWORD: "uchar",
    TokenType.SHORT_KEYWORD: "short",
    TokenType.USHORT_KEYWORD: "ushort",
    TokenType.INT_KEYWORD: "int",
    TokenType.UINT_KEYWORD: "uint",
    TokenType.LONG_KEYWORD: "long",
    TokenType.ULONG_KEYWORD: "ulong",
    TokenType.SZ_KEYWORD: "sz",
    TokenType.USZ_KEYWORD: "usz",
    TokenType.INTPTR_KEYWORD: "intptr",
    TokenType.UINTPTR_KEYWORD: "uintptr",
    TokenType.FLOAT_KEYWORD: "float",
    TokenType.DOUBLE_KEYWORD: "double",
    TokenType.STRING_KEYWORD: "string",
    TokenType.CSTRING_KEYWORD: "cstring",
    TokenType.RAWPTR_KEYWORD: "rawptr",
    TokenType.OPEN_PAREN: "(",
    TokenType.CLOSE_PAREN: ")",
    TokenType.OPEN_BRACE: "{",
    TokenType.CLOSE_BRACE: "}",
    TokenType.SEMICOLON: ";",
    TokenType.EQUALS: "=",
    TokenType.DOT: ".",
    TokenType.BANG_BANG: "!!",
    TokenType.IDENTIFIER: "<identifier>",
    TokenType.INTEGER: "<integer>",
    TokenType.FLOAT: "<float>",
    TokenType.DOUBLE: "<double>",
    TokenType.TRUE: "true",
    TokenType.FALSE: "false",
    TokenType.EOF: "<eof>",
}


def token_type_name(token_type: TokenType | int) -> str:
    """Return the display text of a token type.

    Raises ValueError for the invalid token type or an unknown value.
    """
    try:
        return _TOKEN_NAMES[TokenType(token_type)]
    except (KeyError, ValueError):
        raise ValueError(f"invalid token type: {token_type!r}") from None


@dataclass(frozen=True)
class Span:
    """A half-open range of offsets into a source file."""

    begin: int
    end: int

    def extend(self, other: Span) -> Span:
        """Return a span from the start of this one to the end of ``other``."""
        return Span(self.begin, other.end)


@dataclass(frozen=True)
class Token:
    """A lexed token: its kind and where it sits in the source."""

    type: TokenType
    span: Span