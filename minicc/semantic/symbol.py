"""
minicc 符号表
=============
按作用域层次组织的 名字 → Symbol 映射，每层一个 dict：

  第 0 层      程序顶层
  第 1..n 层   每个外层 Block 一层

查找从最内层向外进行，所以内层声明会遮蔽外层同名声明，直到内层块结束。
离开块时，该块内声明的所有符号一起丢弃。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from .type import GType

logger = logging.getLogger(__name__)


@dataclass
class Symbol:
    """
    符号表条目。

    Attributes:
        name:        变量名
        type:        声明类型（INT 或 CHAR）
        scope_level: 声明所在的作用域层次
        line:        声明所在行
        initialized: 被赋值过之后置为 True
    """
    name:        str
    type:        GType
    scope_level: int
    line:        int = -1
    initialized: bool = False

    def __repr__(self):
        state = 'init' if self.initialized else 'uninit'
        return f"Symbol({self.type} {self.name!r} L{self.scope_level} {state})"


class RedeclarationError(Exception):
    """`name` 已在当前作用域中声明"""
    def __init__(self, existing: Symbol):
        super().__init__(existing.name)
        self.existing = existing


class SymbolTable:
    """
    嵌套作用域符号表。

    `_scopes[i]` 是第 i 层作用域的 dict，按声明顺序保存符号；
    列表末尾是当前（最内层）作用域。
    """

    def __init__(self):
        self._scopes: list[dict[str, Symbol]] = [{}]

    # ── 作用域管理 ─────────────────────────────────────────────────────────

    @property
    def level(self) -> int:
        return len(self._scopes) - 1

    def enter_scope(self):
        self._scopes.append({})
        logger.debug("enter scope %d", self.level)

    def exit_scope(self):
        """丢弃最内层作用域及其全部符号。第 0 层时什么也不做。"""
        if self.level > 0:
            dropped = self._scopes.pop()
            logger.debug("exit scope %d (%d symbol(s) dropped)", self.level + 1, len(dropped))

    # ── 符号 ───────────────────────────────────────────────────────────────

    def declare(self, name: str, gtype: GType, line: int = -1) -> Symbol:
        """
        在当前作用域声明 `name`（未初始化）。
        当前作用域已有同名符号时抛出 RedeclarationError；
        外层作用域的同名符号只是被遮蔽，不算重复声明。
        """
        scope = self._scopes[-1]
        if name in scope:
            raise RedeclarationError(scope[name])
        sym = scope[name] = Symbol(name, gtype, self.level, line)
        return sym

    def lookup(self, name: str) -> Optional[Symbol]:
        """最内层可见的 `name` 声明，没有则为 None"""
        for scope in reversed(self._scopes):
            if name in scope:
                return scope[name]
        return None

    def lookup_local(self, name: str) -> Optional[Symbol]:
        """只查当前作用域（用于重复声明检查）"""
        return self._scopes[-1].get(name)

    def mark_initialized(self, name: str) -> bool:
        sym = self.lookup(name)
        if sym is None:
            return False
        sym.initialized = True
        return True

    def __iter__(self) -> Iterator[Symbol]:
        """当前存活的符号，内层在前、后声明的在前"""
        for scope in reversed(self._scopes):
            yield from reversed(list(scope.values()))

    def __len__(self):
        return sum(len(scope) for scope in self._scopes)

    # ── 调试 ───────────────────────────────────────────────────────────────

    def dump(self) -> str:
        lines = []
        for level, scope in enumerate(self._scopes):
            indent = '  ' * level
            lines.append(f"{indent}[scope {level}]")
            for sym in scope.values():
                lines.append(f"{indent}  {sym}")
        return '\n'.join(lines)
