"""
minicc 语义分析器
=================
自顶向下遍历 AST，检查：
  1. 声明（同一作用域内不可重复声明，允许遮蔽外层）
  2. 使用（名字必须可见；赋值前使用只给警告）
  3. 类型（int/char 推导，禁止 int → char 收窄，factorial 需要 int）
  4. 块作用域（Block 开启新作用域，离开时丢弃其中的符号）

设计：
  - 遇到错误不中断，每条语句都检查，结论是所有语句结果的 AND
  - 诊断信息写入 DiagnosticBag，不抛异常
  - 出错的表达式求值为 ERROR_T，上层不再重复报错
"""

from __future__ import annotations

import logging
from typing import Optional

from ..error import DiagnosticBag, SemanticErrorKind
from ..tree.nodes import (
    ASTNode, Assign, BinOp, Block, Comparison, Condition, Factorial,
    Identifier, If, Number, Print, Program, Repeat, VarDecl, While,
)
from .symbol import RedeclarationError, SymbolTable
from .type import CHAR, ERROR_T, INT, GType, can_assign, is_error, type_from_keyword, widen

logger = logging.getLogger(__name__)


class SemanticAnalyzer:
    """
    对一个程序做一遍语义分析。

    用法：
        analyzer = SemanticAnalyzer()
        ok = analyzer.analyze(program)
        print(analyzer.diag.report())
    """

    def __init__(self, table: Optional[SymbolTable] = None):
        self.diag  = DiagnosticBag()
        self.table = table if table is not None else SymbolTable()

    # ══════════════════════════════════════════════════════════════════════
    # 入口
    # ══════════════════════════════════════════════════════════════════════

    def analyze(self, root: Program) -> bool:
        start_level = self.table.level
        try:
            verdict = self._check(root)
        except RecursionError:
            # if/while 或表达式嵌套过深；作用域退回到开始时的层次
            while self.table.level > start_level:
                self.table.exit_scope()
            self._error(SemanticErrorKind.SEMANTIC_ERROR, 'nesting too deep', root.line)
            verdict = False
        logger.info("analysis %s: %d error(s), %d warning(s)",
                    'passed' if verdict else 'failed',
                    len(self.diag.errors), len(self.diag.warnings))
        return verdict

    # ══════════════════════════════════════════════════════════════════════
    # 分派
    # ══════════════════════════════════════════════════════════════════════

    def _check(self, node: ASTNode) -> bool:
        """
        检查一条语句。处理函数返回 False，或检查期间新增了错误
        （警告不算），该语句即失败。
        """
        errors_before = len(self.diag.errors)
        handler = getattr(self, '_check_' + type(node).__name__, self._check_expression_statement)
        ok = handler(node)
        return ok and len(self.diag.errors) == errors_before

    def _type_of(self, node: ASTNode) -> GType:
        """表达式求类型。ERROR_T 表示错误已经报告过。"""
        handler = getattr(self, '_type_' + type(node).__name__, self._type_default)
        return handler(node)

    def _error(self, kind: SemanticErrorKind, name: str, line: int):
        diag = self.diag.error(kind, name, line)
        logger.debug("%s", diag)

    def _warning(self, kind: SemanticErrorKind, name: str, line: int):
        diag = self.diag.warning(kind, name, line)
        logger.debug("%s", diag)

    # ══════════════════════════════════════════════════════════════════════
    # 语句（合法时返回 True）
    # ══════════════════════════════════════════════════════════════════════

    def _check_Program(self, node: Program) -> bool:
        # 顶层就是第 0 层，不另开作用域
        result = True
        for stmt in node.statements:
            result = self._check(stmt) and result
        return result

    def _check_Block(self, node: Block) -> bool:
        """
        直接嵌套的 Block 用显式栈展开，不递归。
        栈中每项是 [剩余语句的迭代器, 到目前为止的结果]。
        """
        self.table.enter_scope()
        frames = [[iter(node.statements), True]]
        while True:
            frame = frames[-1]
            stmt = next(frame[0], None)
            if stmt is None:
                self.table.exit_scope()
                frames.pop()
                if not frames:
                    return frame[1]
                frames[-1][1] = frame[1] and frames[-1][1]
            elif isinstance(stmt, Block):
                self.table.enter_scope()
                frames.append([iter(stmt.statements), True])
            else:
                frame[1] = self._check(stmt) and frame[1]

    def _check_VarDecl(self, node: VarDecl) -> bool:
        try:
            self.table.declare(node.name, type_from_keyword(node.type_kind), node.line)
        except RedeclarationError:
            self._error(SemanticErrorKind.REDECLARED_VARIABLE, node.name, node.line)
            return False
        return True

    def _check_Assign(self, node: Assign) -> bool:
        name = node.target.name
        sym = self.table.lookup(name)
        if sym is None:
            self._error(SemanticErrorKind.UNDECLARED_VARIABLE, name, node.line)
            return False

        value_type = self._type_of(node.value)
        if is_error(value_type):
            return False
        if not can_assign(sym.type, value_type):
            self._error(SemanticErrorKind.TYPE_MISMATCH, name, node.line)
            return False

        return self.table.mark_initialized(name)

    def _check_Print(self, node: Print) -> bool:
        return not is_error(self._type_of(node.value))

    def _check_Factorial(self, node: Factorial) -> bool:
        return not is_error(self._type_of(node))

    def _check_If(self, node: If) -> bool:
        cond_ok = not is_error(self._type_of(node.condition))
        # 只有 body 是 Block 时才开新作用域
        body_ok = self._check(node.body)
        return cond_ok and body_ok

    def _check_While(self, node: While) -> bool:
        cond_ok = not is_error(self._type_of(node.condition))
        body_ok = self._check(node.body)
        return cond_ok and body_ok

    def _check_Repeat(self, node: Repeat) -> bool:
        body_ok = self._check(node.body)
        cond_ok = not is_error(self._type_of(node.condition))
        return body_ok and cond_ok

    def _check_expression_statement(self, node: ASTNode) -> bool:
        return not is_error(self._type_of(node))

    # ══════════════════════════════════════════════════════════════════════
    # 表达式（返回 GType）
    # ══════════════════════════════════════════════════════════════════════

    def _type_Number(self, node: Number) -> GType:
        return INT

    def _type_Identifier(self, node: Identifier) -> GType:
        sym = self.table.lookup(node.name)
        if sym is None:
            self._error(SemanticErrorKind.UNDECLARED_VARIABLE, node.name, node.line)
            return ERROR_T
        if not sym.initialized:
            self._warning(SemanticErrorKind.UNINITIALIZED_VARIABLE, node.name, node.line)
        return sym.type

    def _type_BinOp(self, node: BinOp) -> GType:
        ltype = self._type_of(node.left)
        rtype = self._type_of(node.right)
        return widen(ltype, rtype)

    def _type_Comparison(self, node: Comparison) -> GType:
        # 两侧求类型只为产生诊断
        self._type_of(node.left)
        self._type_of(node.right)
        return INT

    def _type_Condition(self, node: Condition) -> GType:
        self._type_of(node.expr)
        return INT

    def _type_Factorial(self, node: Factorial) -> GType:
        arg_type = self._type_of(node.argument)
        if is_error(arg_type):
            return ERROR_T
        if arg_type == CHAR:
            self._error(SemanticErrorKind.TYPE_MISMATCH, _describe(node.argument), node.line)
            return ERROR_T
        return INT

    def _type_default(self, node: ASTNode) -> GType:
        self._error(SemanticErrorKind.SEMANTIC_ERROR, _describe(node), getattr(node, 'line', -1))
        return ERROR_T


def _describe(node: ASTNode) -> str:
    """诊断中用来指代 `node` 的名字"""
    if isinstance(node, Identifier):
        return node.name
    token = getattr(node, 'token', None)
    return token.lexeme if token is not None else type(node).__name__


def analyze(root: Program) -> tuple[bool, DiagnosticBag]:
    """
    用一张新的符号表检查整个程序。
    返回 (verdict, diagnostics)。
    """
    analyzer = SemanticAnalyzer()
    verdict = analyzer.analyze(root)
    return verdict, analyzer.diag
