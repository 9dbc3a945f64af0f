"""
minicc 类型系统
===============
只有两种值类型：整数与字符；另有一个用于错误恢复的 ERROR_T。

转换是单向的：char 可以拓宽为 int，反之不行。
布尔结果（比较、条件）用 int 表示。
"""

from dataclasses import dataclass

from ..lexer import TokenKind


class GType:
    """所有类型的基类；具体类型都是不可变的值对象"""


@dataclass(frozen=True)
class BasicType(GType):
    name: str

    def __repr__(self):
        return self.name


@dataclass(frozen=True)
class ErrorType(GType):
    """
    已经报过错的表达式的类型。
    上层看到它就静默放弃，不再重复报错。
    """
    def __repr__(self):
        return '<error>'


# ──────────────────────────────────────────────────────────────────────────────
# 预定义类型
# ──────────────────────────────────────────────────────────────────────────────

INT     = BasicType('int')
CHAR    = BasicType('char')
ERROR_T = ErrorType()

# float 没有独立类型，按 int 处理
KEYWORD_TYPES: dict = {
    TokenKind.INT:   INT,
    TokenKind.FLOAT: INT,
    TokenKind.CHAR:  CHAR,
}


# ──────────────────────────────────────────────────────────────────────────────
# 辅助函数
# ──────────────────────────────────────────────────────────────────────────────

def type_from_keyword(kind: TokenKind) -> GType:
    return KEYWORD_TYPES[kind]


def is_error(t: GType) -> bool:
    return isinstance(t, ErrorType)


def can_assign(dst: GType, src: GType) -> bool:
    """
    `src` 类型的值能否存入 `dst` 类型的变量？

    - 同类型：可以
    - char → int：可以（拓宽）
    - int → char：不行
    - 任一侧为 ErrorType：可以（错误已经报过）
    """
    if is_error(dst) or is_error(src):
        return True
    if dst == src:
        return True
    return dst == INT and src == CHAR


def widen(ltype: GType, rtype: GType) -> GType:
    """算术运算的结果类型：任一侧为 int 则为 int"""
    if is_error(ltype) or is_error(rtype):
        return ERROR_T
    return INT if INT in (ltype, rtype) else CHAR
