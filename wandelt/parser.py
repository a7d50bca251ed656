"""Recursive-descent and Pratt parser building the syntax tree from tokens."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Callable, Iterable, NamedTuple, Optional

from wandelt.ast import (
    BlockStatement,
    CallExpression,
    ConstantExpression,
    ConstantKind,
    Declaration,
    DeclarationStatement,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    IdentifierExpression,
    PackageDeclaration,
    ReturnStatement,
    Statement,
    VariableDeclaration,
    expression_type_name,
)
from wandelt.diagnostics import Diagnostics
from wandelt.source_file import SourceFile
from wandelt.tokens import Span, Token, TokenType, token_type_name
from wandelt.types import BuiltinTypeKind, Type, get_builtin_type


@dataclass
class TranslationUnit:
    """The parsed statements of one source file, in source order."""

    file: SourceFile
    statements: list[Statement] = field(default_factory=list)


class Precedence(IntEnum):
    NONE = 0
    POSTFIX = auto()  # call()
    PRIMARY = auto()


class TokenStream:
    """A cursor over already lexed tokens of one file.

    Past the last token it keeps yielding an end-of-file token.
    """

    def __init__(self, file: SourceFile, tokens: Iterable[Token]) -> None:
        self.file = file
        self._tokens = list(tokens)
        self._position = 0
        end = len(file.content)
        self._eof = Token(TokenType.EOF, Span(end, end))

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return self._eof

    def eat(self) -> None:
        """Consume the current token."""
        if self._position < len(self._tokens):
            self._position += 1


class _ParseFailure(Exception):
    """Raised to abandon the statement being parsed."""


class _OutOfRange(ValueError):
    pass


class _Malformed(ValueError):
    pass


_TYPE_KEYWORDS = {
    TokenType.VOID_KEYWORD: BuiltinTypeKind.VOID,
    TokenType.BOOL_KEYWORD: BuiltinTypeKind.BOOL,
    TokenType.CHAR_KEYWORD: BuiltinTypeKind.CHAR,
    TokenType.UCHAR_KEYWORD: BuiltinTypeKind.UCHAR,
    TokenType.SHORT_KEYWORD: BuiltinTypeKind.SHORT,
    TokenType.USHORT_KEYWORD: BuiltinTypeKind.USHORT,
    TokenType.INT_KEYWORD: BuiltinTypeKind.INT,
    TokenType.UINT_KEYWORD: BuiltinTypeKind.UINT,
    TokenType.LONG_KEYWORD: BuiltinTypeKind.LONG,
    TokenType.ULONG_KEYWORD: BuiltinTypeKind.ULONG,
    TokenType.SZ_KEYWORD: BuiltinTypeKind.SZ,
    TokenType.USZ_KEYWORD: BuiltinTypeKind.USZ,
    TokenType.INTPTR_KEYWORD: BuiltinTypeKind.INTPTR,
    TokenType.UINTPTR_KEYWORD: BuiltinTypeKind.UINTPTR,
    TokenType.FLOAT_KEYWORD: BuiltinTypeKind.FLOAT,
    TokenType.DOUBLE_KEYWORD: BuiltinTypeKind.DOUBLE,
    TokenType.STRING_KEYWORD: BuiltinTypeKind.STRING,
    TokenType.CSTRING_KEYWORD: BuiltinTypeKind.CSTRING,
    TokenType.RAWPTR_KEYWORD: BuiltinTypeKind.RAWPTR,
}

_DECLARATION_STARTS = frozenset(
    {TokenType.PACKAGE_KEYWORD, TokenType.FN_KEYWORD, *_TYPE_KEYWORDS}
)

_U64_LIMIT = 1 << 64
_INTEGER_PREFIX = re.compile(r"[0-9]+")
_REAL_PREFIX = re.compile(r"(-?(?:[0-9]+\.?[0-9]*|\.[0-9]+))([eE][+-]?[0-9]+)?")


def _parse_integer(lexeme: str) -> int:
    match = _INTEGER_PREFIX.match(lexeme)
    if match is None:
        raise _Malformed(lexeme)
    value = int(match.group())
    if value >= _U64_LIMIT:
        raise _OutOfRange(lexeme)
    return value


def _parse_real(lexeme: str, single: bool) -> float:
    match = _REAL_PREFIX.match(lexeme)
    if match is None:
        raise _Malformed(lexeme)
    value = float(match.group())
    if math.isinf(value):
        raise _OutOfRange(lexeme)
    if single:
        try:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError:
            raise _OutOfRange(lexeme) from None
    mantissa_nonzero = any(c in "123456789" for c in match.group(1))
    if value == 0.0 and mantissa_nonzero:
        raise _OutOfRange(lexeme)
    return value


_CONSTANT_TARGETS = {
    TokenType.INTEGER: (ConstantKind.INTEGER, "integer"),
    TokenType.FLOAT: (ConstantKind.FLOAT, "float"),
    TokenType.DOUBLE: (ConstantKind.DOUBLE, "double"),
}


class _ParseRule(NamedTuple):
    prefix: Optional[Callable[["Parser"], Expression]]
    infix: Optional[Callable[["Parser", Expression], Expression]]
    precedence: Precedence


_NO_RULE = _ParseRule(None, None, Precedence.NONE)


class Parser:
    """Turns a token stream into a translation unit, reporting errors."""

    def __init__(self, tokens: TokenStream, diagnostics: Diagnostics) -> None:
        self._tokens = tokens
        self._diagnostics = diagnostics
        self._file = tokens.file

    def parse(self) -> TranslationUnit:
        """Parse every top-level statement; failed ones appear as invalid statements."""
        unit = TranslationUnit(file=self._file)
        while self._tokens.peek().type is not TokenType.EOF:
            start = self._tokens.peek()
            try:
                statement = self._parse_statement("Expected a top-level statement")
            except _ParseFailure:
                statement = Statement(span=start.span)
                self._recover_from_error()
            unit.statements.append(statement)
        return unit

    # -- errors -----------------------------------------------------------

    def _fail(self, span: Span, message: str) -> _ParseFailure:
        self._diagnostics.report_error(span, self._file, message)
        return _ParseFailure(message)

    def _recover_from_error(self) -> None:
        while (token_type := self._tokens.peek().type) is not TokenType.EOF:
            self._tokens.eat()
            if token_type in (TokenType.SEMICOLON, TokenType.CLOSE_BRACE):
                return

    # -- statements -------------------------------------------------------

    def _parse_statement(self, expectation: str) -> Statement:
        token = self._tokens.peek()
        if token.type in _DECLARATION_STARTS:
            return self._parse_declaration_statement()
        if token.type is TokenType.RETURN_KEYWORD:
            return self._parse_return_statement()
        if token.type is TokenType.IDENTIFIER:
            return self._parse_expression_statement()
        raise self._fail(token.span, f"{expectation}, but found {token_type_name(token.type)}'")

    def _parse_declaration_statement(self) -> DeclarationStatement:
        declaration = self._parse_declaration()
        return DeclarationStatement(span=declaration.span, declaration=declaration)

    def _parse_expression_statement(self) -> ExpressionStatement:
        expression = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return ExpressionStatement(span=expression.span.extend(semicolon.span), expression=expression)

    def _parse_return_statement(self) -> ReturnStatement:
        return_token = self._expect(TokenType.RETURN_KEYWORD)
        expression = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return ReturnStatement(span=return_token.span.extend(semicolon.span), expression=expression)

    def _parse_block_statement(self) -> BlockStatement:
        open_brace = self._tokens.peek()
        if open_brace.type is not TokenType.OPEN_BRACE:
            raise self._fail(
                open_brace.span,
                f"Expected a '{{' to start a scope, but got '{token_type_name(open_brace.type)}'",
            )
        self._tokens.eat()

        statements = []
        while self._tokens.peek().type is not TokenType.CLOSE_BRACE:
            statements.append(self._parse_statement("Expected a statement"))

        close_brace = self._expect(TokenType.CLOSE_BRACE)
        return BlockStatement(span=open_brace.span.extend(close_brace.span), statements=statements)

    # -- declarations -----------------------------------------------------

    def _parse_declaration(self) -> Declaration:
        token = self._tokens.peek()
        if token.type is TokenType.PACKAGE_KEYWORD:
            return self._parse_package_declaration()
        if token.type is TokenType.FN_KEYWORD:
            return self._parse_function_declaration()
        if token.type in _TYPE_KEYWORDS:
            return self._parse_variable_declaration()
        raise self._fail(
            token.span, f"Expected a declaration, but found '{token_type_name(token.type)}'"
        )

    def _parse_package_declaration(self) -> PackageDeclaration:
        package_token = self._expect(TokenType.PACKAGE_KEYWORD)
        name = self._parse_identifier()

        is_entrypoint = False
        while (directive := self._tokens.peek()).type is TokenType.ENTRYPOINT_DIRECTIVE:
            if is_entrypoint:
                raise self._fail(
                    directive.span, "Duplicate '#entrypoint' directive on package declaration"
                )
            is_entrypoint = True
            self._tokens.eat()

        semicolon = self._expect(TokenType.SEMICOLON)
        return PackageDeclaration(
            span=package_token.span.extend(semicolon.span), name=name, is_entrypoint=is_entrypoint
        )

    def _parse_variable_declaration(self) -> VariableDeclaration:
        start = self._tokens.peek()
        var_type = self._parse_type()
        name = self._parse_identifier()
        self._expect(TokenType.EQUALS)
        initializer = self._parse_expression()
        semicolon = self._expect(TokenType.SEMICOLON)
        return VariableDeclaration(
            span=start.span.extend(semicolon.span), name=name, type=var_type, initializer=initializer
        )

    def _parse_function_declaration(self) -> FunctionDeclaration:
        fn_token = self._expect(TokenType.FN_KEYWORD)
        return_type = self._parse_type()
        name = self._parse_identifier()
        self._expect(TokenType.OPEN_PAREN)
        self._expect(TokenType.CLOSE_PAREN)
        body = self._parse_block_statement()
        return FunctionDeclaration(
            span=fn_token.span.extend(body.span), name=name, return_type=return_type, body=body
        )

    # -- expressions ------------------------------------------------------

    def _parse_expression(self) -> Expression:
        return self._parse_expression_with_precedence(Precedence.NONE)

    def _parse_expression_with_precedence(self, min_precedence: Precedence) -> Expression:
        token = self._tokens.peek()
        if token.type is TokenType.INVALID:
            raise _ParseFailure()

        prefix = self._rule(token.type).prefix
        if prefix is None:
            raise self._fail(
                token.span, f"Expected an expression, but found '{token_type_name(token.type)}'"
            )

        left = prefix(self)
        self._check_not_invalid()

        while min_precedence <= (rule := self._rule(self._tokens.peek().type)).precedence:
            if rule.infix is None:
                break
            left = rule.infix(self, left)
            self._check_not_invalid()

        return left

    def _check_not_invalid(self) -> None:
        if self._tokens.peek().type is TokenType.INVALID:
            raise _ParseFailure()

    def _parse_constant_expression(self) -> ConstantExpression:
        token = self._tokens.peek()

        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self._tokens.eat()
            return ConstantExpression(
                span=token.span, kind=ConstantKind.BOOLEAN, value=token.type is TokenType.TRUE
            )

        kind, target_name = _CONSTANT_TARGETS[token.type]
        lexeme = self._lexeme(token)
        try:
            if kind is ConstantKind.INTEGER:
                value: int | float = _parse_integer(lexeme)
            else:
                value = _parse_real(lexeme, single=kind is ConstantKind.FLOAT)
        except _OutOfRange:
            raise self._fail(
                token.span, f"Numeric literal '{lexeme}' does not fit in {target_name}"
            ) from None
        except _Malformed:
            raise self._fail(
                token.span,
                f"Malformed numeric literal '{lexeme}' (could not parse as {target_name})",
            ) from None

        self._tokens.eat()
        return ConstantExpression(span=token.span, kind=kind, value=value)

    def _parse_identifier_expression(self) -> IdentifierExpression:
        token = self._tokens.peek()
        name = self._parse_identifier()
        return IdentifierExpression(span=token.span, name=name)

    def _parse_call_expression(self, left: Expression) -> CallExpression:
        if not isinstance(left, IdentifierExpression):
            raise self._fail(
                left.span,
                "Call target must be an identifier, but got a "
                f"'{expression_type_name(left.expression_type)}' expression",
            )
        self._expect(TokenType.OPEN_PAREN)
        close_paren = self._expect(TokenType.CLOSE_PAREN)
        return CallExpression(span=left.span.extend(close_paren.span), function_name=left.name)

    # -- primitives -------------------------------------------------------

    def _lexeme(self, token: Token) -> str:
        return self._file.slice(token.span.begin, token.span.end - token.span.begin)

    def _expect(self, expected: TokenType) -> Token:
        token = self._tokens.peek()
        if token.type is not expected:
            raise self._fail(
                token.span,
                f"Expected a '{token_type_name(expected)}', but got '{token_type_name(token.type)}'",
            )
        self._tokens.eat()
        return token

    def _parse_identifier(self) -> str:
        token = self._tokens.peek()
        if token.type is not TokenType.IDENTIFIER:
            raise self._fail(
                token.span, f"Expected an identifier, but got '{token_type_name(token.type)}'"
            )
        name = self._lexeme(token)
        self._tokens.eat()
        return name

    def _parse_type(self) -> Type:
        token = self._tokens.peek()
        kind = _TYPE_KEYWORDS.get(token.type)
        if kind is None:
            raise self._fail(token.span, f"Expected a type, but got '{token_type_name(token.type)}'")
        self._tokens.eat()
        return get_builtin_type(kind)

    @classmethod
    def _rule(cls, token_type: TokenType) -> _ParseRule:
        return cls._RULES.get(token_type, _NO_RULE)

    _RULES = {
        TokenType.OPEN_PAREN: _ParseRule(None, _parse_call_expression, Precedence.POSTFIX),
        TokenType.IDENTIFIER: _ParseRule(_parse_identifier_expression, None, Precedence.NONE),
        TokenType.INTEGER: _ParseRule(_parse_constant_expression, None, Precedence.NONE),
        TokenType.FLOAT: _ParseRule(_parse_constant_expression, None, Precedence.NONE),
        TokenType.DOUBLE: _ParseRule(_parse_constant_expression, None, Precedence.NONE),
        TokenType.TRUE: _ParseRule(_parse_constant_expression, None, Precedence.NONE),
        TokenType.FALSE: _ParseRule(_parse_constant_expression, None, Precedence.NONE),
    }