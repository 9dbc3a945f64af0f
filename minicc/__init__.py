"""
minicc - 小型命令式教学语言的编译器前端
=========================================
模块结构：
  minicc/
    __init__.py          本文件：公共 API
    error.py             语法错误与语义诊断
    lexer.py             基于 Lark 的词法分析与 Token Source
    parser.py            递归下降语法分析器
    tree/
      nodes.py           AST 节点定义
      printer.py         语法树的文本输出
    semantic/
      type.py            int / char 类型规则
      symbol.py          作用域符号表
      analyzer.py        语义分析器
    pipeline.py          源码 → 结论，一次调用
    cli.py               命令行入口

快速使用示例：

    from minicc import parse, analyze

    program = parse("int x; x = 5; print x;")
    ok, diags = analyze(program)
    if not ok:
        print(diags.report())
"""

from .error import (
    DiagnosticBag, ParseError, ParseErrorKind, SemanticDiag, SemanticErrorKind, Severity,
)
from .lexer import LexError, Scanner, Token, TokenKind, TokenStream, tokenize
from .parser import Parser, parse
from .pipeline import FrontendResult, MiniFrontend
from .semantic.analyzer import SemanticAnalyzer, analyze
from .semantic.symbol import RedeclarationError, Symbol, SymbolTable
from .semantic.type import CHAR, INT
from .tree.printer import format_tree

__all__ = [
    'parse', 'analyze', 'tokenize',
    'Parser', 'SemanticAnalyzer', 'MiniFrontend', 'FrontendResult',
    'Token', 'TokenKind', 'LexError', 'Scanner', 'TokenStream',
    'ParseError', 'ParseErrorKind',
    'DiagnosticBag', 'SemanticDiag', 'SemanticErrorKind', 'Severity',
    'Symbol', 'SymbolTable', 'RedeclarationError',
    'INT', 'CHAR',
    'format_tree',
]
