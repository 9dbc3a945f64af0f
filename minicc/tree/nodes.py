"""
minicc AST 节点定义
==================
每种节点一个 frozen dataclass。语法分析器只构建一次，之后整棵树只读，
多个使用者（分析器、打印器）可以同时遍历。

每个节点保留产生它的 token：诊断用它的行号；Number / Identifier /
VarDecl 的字面值或名字也取自它。子节点放在具名字段里（condition、body、
left、right …），语句序列是按源码顺序排列的 tuple。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Tuple, Union

from ..lexer import Token, TokenKind


class NodeKind(Enum):
    PROGRAM    = auto()
    VARDECL    = auto()
    ASSIGN     = auto()
    PRINT      = auto()
    NUMBER     = auto()
    IDENTIFIER = auto()
    IF         = auto()
    CONDITION  = auto()
    WHILE      = auto()
    REPEAT     = auto()
    BLOCK      = auto()
    FACTORIAL  = auto()
    BINOP      = auto()
    COMPARISON = auto()


# ──────────────────────────────────────────────────────────────────────────────
# 基类
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ASTNode:
    """
    所有节点的公共基类。

    Attributes:
        token: 来源 token（位置；叶子节点还包括文本）
    """
    token: Token

    KIND = None

    @property
    def kind(self) -> NodeKind:
        return self.KIND

    @property
    def line(self) -> int:
        return self.token.line

    def children(self) -> Iterator['ASTNode']:
        """按求值顺序返回子节点"""
        return iter(())

    def __repr__(self):
        return f"{self.__class__.__name__}@{self.line}"


# ──────────────────────────────────────────────────────────────────────────────
# 表达式
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, repr=False)
class Number(ASTNode):
    KIND = NodeKind.NUMBER

    @property
    def value(self) -> int:
        return int(self.token.lexeme)


@dataclass(frozen=True, repr=False)
class Identifier(ASTNode):
    KIND = NodeKind.IDENTIFIER

    @property
    def name(self) -> str:
        return self.token.lexeme

    def __repr__(self):
        return f"Id({self.name})"


@dataclass(frozen=True, repr=False)
class BinOp(ASTNode):
    """算术运算；`token` 是运算符"""
    KIND = NodeKind.BINOP
    left:  'Expression' = None
    right: 'Expression' = None

    @property
    def op(self) -> str:
        return self.token.lexeme

    def children(self):
        yield self.left
        yield self.right


@dataclass(frozen=True, repr=False)
class Comparison(ASTNode):
    """关系运算；总是包在 Condition 里"""
    KIND = NodeKind.COMPARISON
    left:  'Expression' = None
    right: 'Expression' = None

    @property
    def op(self) -> str:
        return self.token.lexeme

    def children(self):
        yield self.left
        yield self.right


@dataclass(frozen=True, repr=False)
class Condition(ASTNode):
    """Comparison（或 repeat 的 until 表达式）外层的布尔包装"""
    KIND = NodeKind.CONDITION
    expr: 'Expression' = None

    def children(self):
        yield self.expr


Expression = Union[Number, Identifier, BinOp, Condition]


# ──────────────────────────────────────────────────────────────────────────────
# 语句
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True, repr=False)
class VarDecl(ASTNode):
    """`int x;`：`token` 是变量名，`type_token` 是类型关键字"""
    KIND = NodeKind.VARDECL
    type_token: Token = None

    @property
    def name(self) -> str:
        return self.token.lexeme

    @property
    def type_kind(self) -> TokenKind:
        return self.type_token.kind

    @property
    def type_name(self) -> str:
        return self.type_token.lexeme

    def __repr__(self):
        return f"VarDecl({self.type_name} {self.name})@{self.line}"


@dataclass(frozen=True, repr=False)
class Assign(ASTNode):
    KIND = NodeKind.ASSIGN
    target: Identifier = None
    value:  'Expression' = None

    def children(self):
        yield self.target
        yield self.value


@dataclass(frozen=True, repr=False)
class Print(ASTNode):
    KIND = NodeKind.PRINT
    value: 'Expression' = None

    def children(self):
        yield self.value


@dataclass(frozen=True, repr=False)
class Factorial(ASTNode):
    KIND = NodeKind.FACTORIAL
    argument: 'Expression' = None

    def children(self):
        yield self.argument


@dataclass(frozen=True, repr=False)
class Block(ASTNode):
    KIND = NodeKind.BLOCK
    statements: Tuple['Statement', ...] = ()

    def children(self):
        yield from self.statements


@dataclass(frozen=True, repr=False)
class If(ASTNode):
    KIND = NodeKind.IF
    condition: 'Expression' = None
    body:      'Statement' = None

    def children(self):
        yield self.condition
        yield self.body


@dataclass(frozen=True, repr=False)
class While(ASTNode):
    KIND = NodeKind.WHILE
    condition: 'Expression' = None
    body:      'Statement' = None

    def children(self):
        yield self.condition
        yield self.body


@dataclass(frozen=True, repr=False)
class Repeat(ASTNode):
    """`repeat { ... } until (cond);`，循环体一定是 Block"""
    KIND = NodeKind.REPEAT
    body:      Block = None
    condition: Condition = None

    def children(self):
        yield self.body
        yield self.condition


@dataclass(frozen=True, repr=False)
class Program(ASTNode):
    """根节点；顶层语句处于第 0 层作用域"""
    KIND = NodeKind.PROGRAM
    statements: Tuple['Statement', ...] = ()

    def children(self):
        yield from self.statements


# 单独的表达式也是合法语句（ExprStatement）
Statement = Union[VarDecl, Assign, Print, Factorial, Block, If, While, Repeat, Expression]
