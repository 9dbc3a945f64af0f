"""Tests for the Lark-backed scanner and the Token Source contract."""

import pytest

from minicc.lexer import LexError, Token, TokenKind, TokenStream, tokenize


def _kinds(source):
    return [t.kind for t in tokenize(source)[:-1]]


def _lexemes(source):
    return [t.lexeme for t in tokenize(source)[:-1]]


# ── basics ────────────────────────────────────────────────────────────────────

def test_declaration_tokens():
    assert _kinds("int x;") == [TokenKind.INT, TokenKind.IDENTIFIER, TokenKind.SEMICOLON]
    assert _lexemes("int x;") == ["int", "x", ";"]


def test_empty_input_is_just_eof():
    tokens = tokenize("")
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.EOF
    assert tokens[0].line == 1


@pytest.mark.parametrize(
    ("word", "kind"),
    [
        ("if", TokenKind.IF),
        ("else", TokenKind.ELSE),
        ("repeat", TokenKind.REPEAT),
        ("until", TokenKind.UNTIL),
        ("for", TokenKind.FOR),
        ("while", TokenKind.WHILE),
        ("break", TokenKind.BREAK),
        ("print", TokenKind.PRINT),
        ("factorial", TokenKind.FACTORIAL),
        ("return", TokenKind.RETURN),
        ("void", TokenKind.VOID),
        ("const", TokenKind.CONST),
        ("int", TokenKind.INT),
        ("float", TokenKind.FLOAT),
        ("char", TokenKind.CHAR),
    ],
)
def test_keywords(word, kind):
    assert _kinds(word) == [kind]


@pytest.mark.parametrize("name", ["x", "integer", "_tmp1", "printer", "xYz_123"])
def test_identifiers_that_look_like_keywords(name):
    assert _kinds(name) == [TokenKind.IDENTIFIER]


def test_operators_and_comparisons():
    source = "+ - * / = == != <= >= < > !"
    assert _kinds(source) == (
        [TokenKind.OPERATOR] * 4 + [TokenKind.EQUALS] + [TokenKind.COMPARISON] * 7
    )
    assert _lexemes(source)[5:] == ["==", "!=", "<=", ">=", "<", ">", "!"]


def test_delimiters():
    assert _kinds("{ } ( ) [ ] ;") == [
        TokenKind.LBRACE, TokenKind.RBRACE, TokenKind.LPAREN, TokenKind.RPAREN,
        TokenKind.LBRACK, TokenKind.RBRACK, TokenKind.SEMICOLON,
    ]


def test_string_literal_escapes_are_decoded():
    (tok,) = tokenize('"a\\tb\\n"')[:-1]
    assert tok.kind is TokenKind.STRING_LITERAL
    assert tok.lexeme == "a\tb\n"
    assert not tok.is_error


# ── comments & lines ──────────────────────────────────────────────────────────

def test_line_comment_is_skipped():
    tokens = tokenize("// header\nint x; // trailing\n")
    assert [t.kind for t in tokens[:-1]] == [TokenKind.INT, TokenKind.IDENTIFIER, TokenKind.SEMICOLON]
    assert tokens[0].line == 2


def test_block_comment_spanning_lines():
    tokens = tokenize("/* one\n two */ x")
    assert [t.kind for t in tokens[:-1]] == [TokenKind.IDENTIFIER]
    assert tokens[0].line == 2


def test_unterminated_block_comment_runs_to_end():
    assert _kinds("x /* never closed\n y") == [TokenKind.IDENTIFIER]


def test_line_numbers():
    tokens = tokenize("int x;\nx = 42;\n\nprint x;")
    lines = {t.lexeme: t.line for t in tokens if t.kind is not TokenKind.SEMICOLON}
    assert lines["int"] == 1
    assert lines["42"] == 2
    assert lines["print"] == 4


# ── lexical errors ────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    ("source", "lexeme", "error"),
    [
        ("@", "@", LexError.INVALID_CHAR),
        ("123abc", "123abc", LexError.INVALID_NUMBER),
        ("+-", "+-", LexError.CONSECUTIVE_OPERATORS),
        ("*/", "*/", LexError.CONSECUTIVE_OPERATORS),
        ('"open', "open", LexError.UNTERMINATED_STRING),
    ],
)
def test_error_tokens(source, lexeme, error):
    (tok,) = tokenize(source)[:-1]
    assert tok.kind is TokenKind.ERROR
    assert tok.lexeme == lexeme
    assert tok.error is error
    assert tok.is_error


def test_unknown_escape_keeps_string_kind():
    (tok,) = tokenize('"a\\qb"')[:-1]
    assert tok.kind is TokenKind.STRING_LITERAL
    assert tok.error is LexError.UNKNOWN_ESCAPE_SEQUENCE
    assert tok.lexeme == "aqb"


def test_error_token_does_not_stop_scanning():
    assert _kinds("x@ + 4;") == [
        TokenKind.IDENTIFIER, TokenKind.ERROR, TokenKind.OPERATOR,
        TokenKind.NUMBER, TokenKind.SEMICOLON,
    ]


# ── Token Source contract ─────────────────────────────────────────────────────

def test_eof_is_idempotent():
    stream = TokenStream.from_source("x")
    assert stream.next().kind is TokenKind.IDENTIFIER
    first_eof = stream.next()
    assert first_eof.kind is TokenKind.EOF
    for _ in range(3):
        assert stream.next() == first_eof


def test_eof_line_is_last_line():
    tokens = tokenize("int x;\nx = 1;\n")
    assert tokens[-1].kind is TokenKind.EOF
    assert tokens[-1].line == 3


def test_from_tokens_synthesises_eof():
    stream = TokenStream.from_tokens([Token(TokenKind.NUMBER, "1", 4)])
    assert stream.next().lexeme == "1"
    eof = stream.next()
    assert eof.kind is TokenKind.EOF
    assert eof.line == 4


def test_from_tokens_keeps_given_eof():
    given = Token(TokenKind.EOF, "EOF", 9)
    stream = TokenStream.from_tokens([given, Token(TokenKind.NUMBER, "1", 10)])
    assert stream.next() is given
    assert stream.next() is given


def test_streams_are_independent():
    a = TokenStream.from_source("a b")
    b = TokenStream.from_source("c")
    assert a.next().lexeme == "a"
    assert b.next().lexeme == "c"
    assert a.next().lexeme == "b"
    assert b.next().kind is TokenKind.EOF
