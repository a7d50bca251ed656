import dataclasses

import pytest

from wandelt.tokens import Span, Token, TokenType, token_type_name


@pytest.mark.parametrize(
    ("token_type", "expected"),
    [
        (TokenType.PACKAGE_KEYWORD, "package"),
        (TokenType.ENTRYPOINT_DIRECTIVE, "#entrypoint"),
        (TokenType.UINTPTR_KEYWORD, "uintptr"),
        (TokenType.OPEN_BRACE, "{"),
        (TokenType.BANG_BANG, "!!"),
        (TokenType.IDENTIFIER, "<identifier>"),
        (TokenType.DOUBLE, "<double>"),
        (TokenType.FALSE, "false"),
        (TokenType.EOF, "<eof>"),
    ],
)
def test_token_type_name(token_type, expected):
    assert token_type_name(token_type) == expected


def test_token_type_name_accepts_plain_int():
    assert token_type_name(int(TokenType.SEMICOLON)) == ";"


def test_invalid_token_type_has_no_name():
    with pytest.raises(ValueError):
        token_type_name(TokenType.INVALID)


def test_out_of_range_token_type_has_no_name():
    with pytest.raises(ValueError):
        token_type_name(len(TokenType) + 5)


def test_every_valid_token_type_has_a_distinct_name():
    names = [token_type_name(t) for t in TokenType if t is not TokenType.INVALID]
    assert len(set(names)) == len(TokenType) - 1


def test_zero_has_no_name_and_last_is_eof():
    with pytest.raises(ValueError):
        token_type_name(0)
    assert token_type_name(max(TokenType)) == "<eof>"


def test_keyword_names_match_member_names():
    keywords = [t for t in TokenType if t.name.endswith("_KEYWORD")]
    for keyword in keywords:
        assert token_type_name(keyword) == keyword.name[: -len("_KEYWORD")].lower()


def test_span_extend_takes_begin_of_first_and_end_of_second():
    first = Span(2, 5)
    second = Span(9, 12)
    assert first.extend(second) == Span(first.begin, second.end)


def test_span_extend_with_itself_is_identity():
    span = Span(3, 7)
    assert span.extend(span) == span


def test_token_is_immutable_and_comparable():
    token = Token(TokenType.INTEGER, Span(0, 3))
    assert token == Token(TokenType.INTEGER, Span(0, 3))
    with pytest.raises(dataclasses.FrozenInstanceError):
        token.type = TokenType.FLOAT  # type: ignore[misc]