"""
minicc 语法分析器
=================
递归下降分析：Token Source → AST。

文法（每种语句一条产生式）：

    Program       := Statement*  EOF
    Statement     := VarDecl | Assign | Block | If | While | Repeat
                   | Print | Factorial | ExprStatement
    VarDecl       := ("int" | "float" | "char") IDENTIFIER ";"
    Assign        := IDENTIFIER "=" Expression ";"
    Block         := "{" Statement* "}"
    If            := "if" "(" Expression ")" Statement
    While         := "while" "(" Expression ")" Statement
    Repeat        := "repeat" Block "until" "(" Expression ")" ";"
    Print         := "print" Expression ";"
    Factorial     := "factorial" "(" Expression ")" ";"
    ExprStatement := Expression ";"
    Expression    := Primary ((OPERATOR | COMPARISON) Primary)*
    Primary       := NUMBER | IDENTIFIER | "(" Expression ")"

所有二元运算符同一优先级、左结合：`3 + 7 * 2` 即 ((3 + 7) * 2)。
语句形式只看当前 token 决定，不回溯。

遇到第一个语法错误即抛出 ParseError，不做错误恢复。
"""

from __future__ import annotations

import logging
from typing import Union

from .error import ParseError, ParseErrorKind
from .lexer import TYPE_KEYWORDS, Token, TokenKind, TokenStream
from .tree.nodes import (
    Assign, BinOp, Block, Comparison, Condition, Factorial, Identifier, If,
    Number, Print, Program, Repeat, VarDecl, While,
)

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = frozenset({'<', '>', '==', '!=', '<=', '>='})

# 可以开始一个表达式语句的 token
_EXPR_START = frozenset({TokenKind.OPERATOR, TokenKind.NUMBER, TokenKind.LPAREN})


class Parser:
    """
    从一个 Token Source 构建一棵 Program。

    `source` 只需提供 `next() -> Token`，且输入耗尽后一直返回 EOF
    （见 lexer.TokenStream）。
    """

    def __init__(self, source):
        self._source = source
        self.current: Token = source.next()

        self._statement_parsers = {
            TokenKind.IDENTIFIER: self.parse_assignment,
            TokenKind.LBRACE:     self.parse_block,
            TokenKind.IF:         self.parse_if_statement,
            TokenKind.WHILE:      self.parse_while_statement,
            TokenKind.REPEAT:     self.parse_repeat_statement,
            TokenKind.PRINT:      self.parse_print_statement,
            TokenKind.FACTORIAL:  self.parse_factorial,
        }
        for kind in TYPE_KEYWORDS:
            self._statement_parsers[kind] = self.parse_declaration
        for kind in _EXPR_START:
            self._statement_parsers[kind] = self.parse_expression_statement

    # ── token 辅助 ─────────────────────────────────────────────────────────

    def advance(self) -> Token:
        """消耗当前 token 并返回它"""
        tok = self.current
        self.current = self._source.next()
        return tok

    def check(self, kind: TokenKind) -> bool:
        return self.current.kind is kind and not self.current.is_error

    def expect(self, kind: TokenKind, error: ParseErrorKind) -> Token:
        if not self.check(kind):
            self.fail(error)
        return self.advance()

    def fail(self, error: ParseErrorKind):
        """在当前 token 处中止。词法错误优先报告。"""
        tok = self.current
        if tok.is_error:
            raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, tok, tok.error.value)
        raise ParseError(error, tok)

    # ── 顶层 ───────────────────────────────────────────────────────────────

    def parse(self) -> Program:
        first = self.current
        statements = []
        try:
            while not self.check(TokenKind.EOF):
                statements.append(self.parse_statement())
        except RecursionError:
            # 括号、if/while 嵌套过深
            raise ParseError(ParseErrorKind.UNEXPECTED_TOKEN, self.current,
                             'nesting too deep') from None
        return Program(first, tuple(statements))

    # ── 语句 ───────────────────────────────────────────────────────────────

    def parse_statement(self):
        tok = self.current
        logger.debug("statement at line %d starting with %r", tok.line, tok.lexeme)
        handler = None if tok.is_error else self._statement_parsers.get(tok.kind)
        if handler is None:
            self.fail(ParseErrorKind.INVALID_STATEMENT)
        return handler()

    def parse_declaration(self) -> VarDecl:
        type_tok = self.advance()
        name_tok = self.expect(TokenKind.IDENTIFIER, ParseErrorKind.MISSING_IDENTIFIER)
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return VarDecl(name_tok, type_tok)

    def parse_assignment(self) -> Assign:
        name_tok = self.advance()
        self.expect(TokenKind.EQUALS, ParseErrorKind.MISSING_EQUALS)
        value = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return Assign(name_tok, Identifier(name_tok), value)

    def parse_block(self) -> Block:
        """
        `{ ... }`。直接嵌套的块用显式栈处理，不递归，
        栈中每项是 (左花括号, 已解析的语句列表)。
        """
        lbrace = self.expect(TokenKind.LBRACE, ParseErrorKind.MISSING_LBRACE)
        open_blocks = [(lbrace, [])]
        while True:
            lbrace, statements = open_blocks[-1]
            if self.check(TokenKind.RBRACE):
                self.advance()
                open_blocks.pop()
                block = Block(lbrace, tuple(statements))
                if not open_blocks:
                    return block
                open_blocks[-1][1].append(block)
            elif self.check(TokenKind.EOF):
                self.fail(ParseErrorKind.MISSING_RBRACE)
            elif self.check(TokenKind.LBRACE):
                open_blocks.append((self.advance(), []))
            else:
                statements.append(self.parse_statement())

    def _parse_guard(self) -> tuple[Token, object]:
        """if / while 共用的 `keyword ( Expression )`"""
        keyword = self.advance()
        self.expect(TokenKind.LPAREN, ParseErrorKind.MISSING_LPAREN)
        condition = self.parse_expression()
        self.expect(TokenKind.RPAREN, ParseErrorKind.MISSING_RPAREN)
        return keyword, condition

    def _parse_body(self):
        # 块或单条语句
        if self.check(TokenKind.LBRACE):
            return self.parse_block()
        return self.parse_statement()

    def parse_if_statement(self) -> If:
        keyword, condition = self._parse_guard()
        return If(keyword, condition, self._parse_body())

    def parse_while_statement(self) -> While:
        keyword, condition = self._parse_guard()
        return While(keyword, condition, self._parse_body())

    def parse_repeat_statement(self) -> Repeat:
        keyword = self.advance()
        if not self.check(TokenKind.LBRACE):
            self.fail(ParseErrorKind.MISSING_LBRACE)
        body = self.parse_block()
        self.expect(TokenKind.UNTIL, ParseErrorKind.MISSING_UNTIL)
        self.expect(TokenKind.LPAREN, ParseErrorKind.MISSING_LPAREN)
        cond_tok = self.current
        condition = Condition(cond_tok, self.parse_expression())
        self.expect(TokenKind.RPAREN, ParseErrorKind.MISSING_RPAREN)
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return Repeat(keyword, body, condition)

    def parse_print_statement(self) -> Print:
        keyword = self.advance()
        value = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return Print(keyword, value)

    def parse_factorial(self) -> Factorial:
        keyword = self.advance()
        self.expect(TokenKind.LPAREN, ParseErrorKind.MISSING_LPAREN)
        argument = self.parse_expression()
        self.expect(TokenKind.RPAREN, ParseErrorKind.MISSING_RPAREN)
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return Factorial(keyword, argument)

    def parse_expression_statement(self):
        expr = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, ParseErrorKind.MISSING_SEMICOLON)
        return expr

    # ── 表达式 ─────────────────────────────────────────────────────────────

    def parse_expression(self):
        node = self.parse_primary()
        while self.check(TokenKind.OPERATOR) or self.check(TokenKind.COMPARISON):
            op = self.current
            if op.kind is TokenKind.COMPARISON:
                if op.lexeme not in COMPARISON_OPERATORS:
                    self.fail(ParseErrorKind.INVALID_COMPARISON)
                self.advance()
                node = Condition(op, Comparison(op, node, self.parse_primary()))
            else:
                self.advance()
                node = BinOp(op, node, self.parse_primary())
        return node

    def parse_primary(self):
        if self.check(TokenKind.LPAREN):
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenKind.RPAREN, ParseErrorKind.MISSING_RPAREN)
            return expr
        if self.check(TokenKind.NUMBER):
            return Number(self.advance())
        if self.check(TokenKind.IDENTIFIER):
            return Identifier(self.advance())
        self.fail(ParseErrorKind.INVALID_EXPRESSION)


def parse(source: Union[str, TokenStream]) -> Program:
    """
    解析整个程序。`source` 可以是源码文本，也可以是 Token Source。
    第一个语法错误处抛出 ParseError。
    """
    if isinstance(source, str):
        source = TokenStream.from_source(source)
    return Parser(source).parse()
