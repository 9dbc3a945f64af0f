import pytest

from minicc.lexer import Token, TokenKind, TokenStream
from minicc.parser import parse
from minicc.pipeline import MiniFrontend
from minicc.semantic.analyzer import SemanticAnalyzer


@pytest.fixture(scope="session")
def frontend():
    return MiniFrontend()


@pytest.fixture
def check():
    """Parse + analyze source text; returns (verdict, diagnostics, analyzer)."""
    def _check(source: str):
        analyzer = SemanticAnalyzer()
        verdict = analyzer.analyze(parse(source))
        return verdict, analyzer.diag, analyzer
    return _check


@pytest.fixture
def stream():
    """Build a Token Source from (kind, lexeme[, line]) tuples."""
    def _stream(*items):
        tokens = []
        for item in items:
            kind, lexeme, *rest = item
            tokens.append(Token(kind, lexeme, rest[0] if rest else 1))
        return TokenStream.from_tokens(tokens)
    return _stream
