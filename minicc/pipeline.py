"""
minicc 前端流水线
=================
把 词法 → 语法 → 语义分析 串成一次调用。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .error import DiagnosticBag, ParseError
from .lexer import Scanner, TokenStream
from .parser import Parser
from .semantic.analyzer import SemanticAnalyzer
from .semantic.symbol import SymbolTable
from .tree.nodes import Program

logger = logging.getLogger(__name__)


# ─── 结果 ─────────────────────────────────────────────────────────────────────

@dataclass
class FrontendResult:
    """一次运行的输出"""
    ast:          Optional[Program]        # None：语法分析失败
    diags:        DiagnosticBag
    verdict:      bool = False
    parse_error:  Optional[ParseError] = None
    symbol_table: Optional[SymbolTable] = None   # None：没有进行语义分析
    error:        str = ''                 # 语言之外的问题（I/O）

    @property
    def success(self) -> bool:
        return self.ast is not None and self.verdict


# ─── 流水线 ───────────────────────────────────────────────────────────────────

class MiniFrontend:
    """
    mini 语言前端。

      1. 基于 Lark 的 Scanner → Token Source
      2. Parser              → AST（遇到第一个语法错误即失败）
      3. SemanticAnalyzer    → 结论 + 诊断信息

    用法::

        frontend = MiniFrontend()
        result = frontend.process_file("prog.mc")
        print(result.diags.report())
    """

    def __init__(self, grammar_text: Optional[str] = None):
        """
        Args:
            grammar_text: 替换用的 Lark 词法文法（默认
                          lexer.TOKEN_GRAMMAR）
        """
        self._scanner = Scanner(grammar_text)

    # ── 入口 ───────────────────────────────────────────────────────────

    def process_file(self, path: Union[str, Path]) -> FrontendResult:
        path = Path(path)
        if not path.exists():
            return FrontendResult(ast=None, diags=DiagnosticBag(),
                                  error=f"file not found: {path}")
        try:
            source = path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            # 目录、无读权限等
            logger.info("%s: %s", path, e)
            return FrontendResult(ast=None, diags=DiagnosticBag(),
                                  error=f"cannot read {path}: {e.strerror or e}")
        return self.process_string(source, source_name=str(path))

    def process_string(self, source: str, source_name: str = '<input>') -> FrontendResult:
        # 每次运行都有自己的 token 流、语法树和符号表
        try:
            ast = self.parse_only(source)
        except ParseError as e:
            logger.info("%s: %s", source_name, e)
            return FrontendResult(ast=None, diags=DiagnosticBag(), parse_error=e)

        analyzer = SemanticAnalyzer()
        verdict = analyzer.analyze(ast)
        return FrontendResult(
            ast=ast,
            diags=analyzer.diag,
            verdict=verdict,
            symbol_table=analyzer.table,
        )

    # ── 调试 ──────────────────────────────────────────────────────────────

    def parse_only(self, source: str) -> Program:
        """只做语法分析。出错时抛出 ParseError。"""
        return Parser(TokenStream.from_source(source, self._scanner)).parse()
