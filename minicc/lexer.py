"""
minicc 词法分析器
=================
将源码文本转换为 Token 流。

实际扫描交给 Lark 的 basic lexer（由 TOKEN_GRAMMAR 驱动）；语法分析器
看不到 Lark，只依赖 Token Source 约定：

    stream = TokenStream.from_source("int x;")
    stream.next()   # Token(INT, 'int', 1:1)
    ...
    stream.next()   # Token(EOF, 'EOF', 1:0)，之后每次调用都返回它

非法输入在这里不会抛异常，而是变成 ERROR token（或带转义错误的
STRING_LITERAL），`error` 字段说明原因；语法分析器拒绝这类 token。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import Iterable, Iterator, Optional

from lark import Lark


class TokenKind(Enum):
    # 字面量与名字
    NUMBER         = auto()
    IDENTIFIER     = auto()
    STRING_LITERAL = auto()

    # 运算符
    OPERATOR   = auto()     # + - * /
    COMPARISON = auto()     # == != <= >= < > !
    EQUALS     = auto()     # =

    # 分隔符
    SEMICOLON = auto()
    LPAREN    = auto()
    RPAREN    = auto()
    LBRACE    = auto()
    RBRACE    = auto()
    LBRACK    = auto()
    RBRACK    = auto()

    # 关键字
    IF        = auto()
    ELSE      = auto()
    REPEAT    = auto()
    UNTIL     = auto()
    FOR       = auto()
    WHILE     = auto()
    BREAK     = auto()
    PRINT     = auto()
    FACTORIAL = auto()
    RETURN    = auto()
    VOID      = auto()
    CONST     = auto()
    INT       = auto()
    FLOAT     = auto()
    CHAR      = auto()

    EOF   = auto()
    ERROR = auto()


class LexError(Enum):
    NONE                    = "no error"
    INVALID_CHAR            = "invalid character"
    INVALID_NUMBER          = "invalid number format"
    CONSECUTIVE_OPERATORS   = "consecutive operators not allowed"
    UNTERMINATED_STRING     = "unterminated string"
    UNKNOWN_ESCAPE_SEQUENCE = "unknown escape sequence"


TYPE_KEYWORDS = frozenset({TokenKind.INT, TokenKind.FLOAT, TokenKind.CHAR})


@dataclass(frozen=True)
class Token:
    kind:   TokenKind
    lexeme: str
    line:   int
    column: int = 0
    error:  LexError = LexError.NONE

    @property
    def is_error(self) -> bool:
        return self.error is not LexError.NONE

    def __repr__(self):
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"


# ──────────────────────────────────────────────────────────────────────────────
# Lark 词法文法
# ──────────────────────────────────────────────────────────────────────────────

# `start` 只是为了让 Lark 保留全部终结符，并不用它做语法分析。
# 终结符名即 TokenKind 名，BAD_* 映射为 ERROR。
TOKEN_GRAMMAR = r"""
start: _token*

_token: NUMBER | BAD_NUMBER | IDENTIFIER | STRING_LITERAL | BAD_STRING
      | OPERATOR | BAD_OPERATOR | COMPARISON | EQUALS
      | SEMICOLON | LPAREN | RPAREN | LBRACE | RBRACE | LBRACK | RBRACK
      | IF | ELSE | REPEAT | UNTIL | FOR | WHILE | BREAK
      | PRINT | FACTORIAL | RETURN | VOID | CONST | INT | FLOAT | CHAR
      | BAD_CHAR

IF:        "if"
ELSE:      "else"
REPEAT:    "repeat"
UNTIL:     "until"
FOR:       "for"
WHILE:     "while"
BREAK:     "break"
PRINT:     "print"
FACTORIAL: "factorial"
RETURN:    "return"
VOID:      "void"
CONST:     "const"
INT:       "int"
FLOAT:     "float"
CHAR:      "char"

IDENTIFIER: /[A-Za-z_][A-Za-z0-9_]*/
NUMBER:     /[0-9]+/
BAD_NUMBER: /[0-9]+[A-Za-z_][A-Za-z0-9_]*/

STRING_LITERAL: /"(\\.|[^"\\])*"/
BAD_STRING:     /"(\\.|[^"\\])*/

OPERATOR:     /[+\-*\/]/
BAD_OPERATOR: /[+\-*][+\-*\/]|\/[+\-]/
COMPARISON:   /==|!=|<=|>=|[<>!]/
EQUALS:       "="

SEMICOLON: ";"
LPAREN:    "("
RPAREN:    ")"
LBRACE:    "{"
RBRACE:    "}"
LBRACK:    "["
RBRACK:    "]"

BAD_CHAR.-1: /./

LINE_COMMENT:  /\/\/[^\n]*/
BLOCK_COMMENT: /\/\*[\s\S]*?(\*\/|\Z)/

%import common.WS
%ignore WS
%ignore LINE_COMMENT
%ignore BLOCK_COMMENT
"""

_BAD_TERMINALS = {
    'BAD_NUMBER':   LexError.INVALID_NUMBER,
    'BAD_STRING':   LexError.UNTERMINATED_STRING,
    'BAD_OPERATOR': LexError.CONSECUTIVE_OPERATORS,
    'BAD_CHAR':     LexError.INVALID_CHAR,
}

_ESCAPES = {'n': '\n', 't': '\t', '\\': '\\', '"': '"'}


def _decode_string(body: str) -> tuple[str, LexError]:
    """处理字符串字面量内部的转义（引号已去掉）"""
    out = []
    error = LexError.NONE
    chars = iter(body)
    for c in chars:
        if c != '\\':
            out.append(c)
            continue
        esc = next(chars, '')
        if esc in _ESCAPES:
            out.append(_ESCAPES[esc])
        else:
            error = LexError.UNKNOWN_ESCAPE_SEQUENCE
            out.append(esc)
    return ''.join(out), error


class Scanner:
    """
    编译好的词法文法。构造后不再改变，一个实例可供任意多个
    独立的 TokenStream 使用。
    """

    def __init__(self, grammar_text: Optional[str] = None):
        self._lark = Lark(
            grammar_text or TOKEN_GRAMMAR,
            parser='lalr',
            lexer='basic',
        )

    def tokens(self, source: str) -> Iterator[Token]:
        """逐个产出 `source` 的 token，不含结尾 EOF"""
        for lt in self._lark.lex(source):
            yield self._convert(lt)

    @staticmethod
    def _convert(lt) -> Token:
        line, column = lt.line, lt.column
        text = str(lt)

        if lt.type in _BAD_TERMINALS:
            error = _BAD_TERMINALS[lt.type]
            if error is LexError.UNTERMINATED_STRING:
                text, _ = _decode_string(text[1:])
            return Token(TokenKind.ERROR, text, line, column, error)

        if lt.type == 'STRING_LITERAL':
            text, error = _decode_string(text[1:-1])
            return Token(TokenKind.STRING_LITERAL, text, line, column, error)

        return Token(TokenKind[lt.type], text, line, column)


@lru_cache(maxsize=None)
def default_scanner() -> Scanner:
    return Scanner()


# ──────────────────────────────────────────────────────────────────────────────
# Token Source
# ──────────────────────────────────────────────────────────────────────────────

class TokenStream:
    """
    拉取式 token 源。

    `next()` 依次返回 token，之后每次都返回同一个 EOF。
    读取位置由流自己持有，不同流之间不共享任何状态。
    """

    def __init__(self, tokens: Iterable[Token], eof_line: Optional[int] = None):
        self._pending   = iter(tokens)
        self._eof: Optional[Token] = None
        self._eof_line  = eof_line
        self._last_line = 1

    @classmethod
    def from_source(cls, source: str, scanner: Optional[Scanner] = None) -> 'TokenStream':
        scanner = scanner or default_scanner()
        return cls(scanner.tokens(source), eof_line=source.count('\n') + 1)

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> 'TokenStream':
        """包装手工构造的 token；没有 EOF 时自动补一个"""
        return cls(tokens)

    def next(self) -> Token:
        if self._eof is not None:
            return self._eof
        tok = next(self._pending, None)
        if tok is None:
            line = self._eof_line if self._eof_line is not None else self._last_line
            tok = Token(TokenKind.EOF, 'EOF', line)
        if tok.kind is TokenKind.EOF:
            self._eof = tok
        else:
            self._last_line = tok.line
        return tok

    def __iter__(self) -> Iterator[Token]:
        """一直读到 EOF（含）"""
        while True:
            tok = self.next()
            yield tok
            if tok.kind is TokenKind.EOF:
                return


def tokenize(source: str, scanner: Optional[Scanner] = None) -> list[Token]:
    """`source` 的全部 token，以 EOF 结尾"""
    return list(TokenStream.from_source(source, scanner))
