"""
minicc 诊断信息系统
===================
两条错误通道，传播方式不同：

  - ParseError 直接抛出。第一个语法错误即中止解析，不交出半棵树。
  - 语义问题收集到 DiagnosticBag 中，从不抛出，
    一次分析尽可能报告所有互相独立的问题。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lexer import Token


class Severity(Enum):
    WARNING = auto()
    ERROR   = auto()


# ──────────────────────────────────────────────────────────────────────────────
# 语法错误（致命）
# ──────────────────────────────────────────────────────────────────────────────

class ParseErrorKind(Enum):
    UNEXPECTED_TOKEN   = "Unexpected token '{}'"
    MISSING_SEMICOLON  = "Missing semicolon after '{}'"
    MISSING_IDENTIFIER = "Expected identifier after '{}'"
    MISSING_EQUALS     = "Expected '=' after '{}'"
    INVALID_EXPRESSION = "Invalid expression after '{}'"
    MISSING_LPAREN     = "Expected '(' after '{}'"
    MISSING_RPAREN     = "Expected ')' after '{}'"
    MISSING_LBRACE     = "Expected '{{' after '{}'"
    MISSING_RBRACE     = "Expected '}}' after '{}'"
    MISSING_LBRACK     = "Expected '[' after '{}'"
    MISSING_RBRACK     = "Expected ']' after '{}'"
    INVALID_STATEMENT  = "Invalid statement after '{}'"
    MISSING_UNTIL      = "Expected 'until' after '{}'"
    INVALID_COMPARISON = "Invalid comparison at '{}'"


class ParseError(Exception):
    """
    语法分析器遇到第一个语法错误时抛出。

    Attributes:
        kind:   ParseErrorKind
        token:  出错的 token（用它的行号和文本定位）
        detail: 可选的补充说明，例如该 token 背后的词法错误
    """
    def __init__(self, kind: ParseErrorKind, token: Token, detail: str = ''):
        self.kind   = kind
        self.token  = token
        self.detail = detail
        super().__init__(str(self))

    @property
    def line(self) -> int:
        return self.token.line

    @property
    def lexeme(self) -> str:
        return self.token.lexeme

    def __str__(self):
        text = f"Parse Error at line {self.line}: {self.kind.value.format(self.lexeme)}"
        if self.detail:
            text += f" ({self.detail})"
        return text


# ──────────────────────────────────────────────────────────────────────────────
# 语义诊断（累积）
# ──────────────────────────────────────────────────────────────────────────────

class SemanticErrorKind(Enum):
    UNDECLARED_VARIABLE    = "Undeclared variable '{}'"
    REDECLARED_VARIABLE    = "Variable '{}' already declared in this scope"
    TYPE_MISMATCH          = "Type mismatch involving '{}'"
    UNINITIALIZED_VARIABLE = "Variable '{}' may be used uninitialized"
    INVALID_OPERATION      = "Invalid operation involving '{}'"
    SEMANTIC_ERROR         = "Unknown semantic error with '{}'"


@dataclass(frozen=True)
class SemanticDiag:
    """一条诊断：什么错误、涉及哪个名字、在哪一行"""
    kind:     SemanticErrorKind
    name:     str
    line:     int = -1
    severity: Severity = Severity.ERROR

    @property
    def message(self) -> str:
        return self.kind.value.format(self.name)

    def __str__(self):
        tag = 'Semantic Error' if self.severity is Severity.ERROR else 'Warning'
        loc = str(self.line) if self.line > 0 else '?'
        return f"{tag} at line {loc}: {self.message}"


class DiagnosticBag:
    """
    诊断信息收集袋。
    分析器遇错继续，分析结束后统一输出。
    """
    def __init__(self):
        self._diags: list[SemanticDiag] = []

    # ── 添加 ──────────────────────────────────────────────────────────────

    def error(self, kind: SemanticErrorKind, name: str, line: int = -1) -> SemanticDiag:
        return self._add(SemanticDiag(kind, name, line, Severity.ERROR))

    def warning(self, kind: SemanticErrorKind, name: str, line: int = -1) -> SemanticDiag:
        return self._add(SemanticDiag(kind, name, line, Severity.WARNING))

    def _add(self, diag: SemanticDiag) -> SemanticDiag:
        self._diags.append(diag)
        return diag

    # ── 查询 ─────────────────────────────────────────────────────────────

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._diags)

    @property
    def count(self) -> int:
        return len(self._diags)

    @property
    def errors(self):
        return [d for d in self._diags if d.severity is Severity.ERROR]

    @property
    def warnings(self):
        return [d for d in self._diags if d.severity is Severity.WARNING]

    def kinds(self) -> list[SemanticErrorKind]:
        return [d.kind for d in self._diags]

    def __iter__(self):
        return iter(self._diags)

    def __len__(self):
        return len(self._diags)

    # ── 输出 ──────────────────────────────────────────────────────────────

    def report(self) -> str:
        if not self._diags:
            return "No diagnostics."
        lines = [str(d) for d in sorted(self._diags, key=lambda d: d.line)]
        summary = (f"\n{'─' * 60}\n"
                   f"{len(self.errors)} error(s), {len(self.warnings)} warning(s)")
        return '\n'.join(lines) + summary
