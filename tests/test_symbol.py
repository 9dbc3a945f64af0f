import random

import pytest

from minicc.lexer import TokenKind
from minicc.semantic.symbol import RedeclarationError, SymbolTable
from minicc.semantic.type import CHAR, ERROR_T, INT, can_assign, type_from_keyword, widen


# ── symbol table ──────────────────────────────────────────────────────────────

def test_declare_and_lookup():
    table = SymbolTable()
    sym = table.declare("x", INT, line=3)
    assert table.lookup("x") is sym
    assert sym.scope_level == 0
    assert sym.line == 3
    assert not sym.initialized


def test_lookup_missing():
    assert SymbolTable().lookup("nope") is None


def test_redeclaration_in_same_scope():
    table = SymbolTable()
    first = table.declare("x", INT)
    with pytest.raises(RedeclarationError) as excinfo:
        table.declare("x", CHAR)
    assert excinfo.value.existing is first
    assert table.lookup("x").type == INT
    assert len(table) == 1


def test_redeclaration_error_is_not_a_lookup_error():
    table = SymbolTable()
    table.declare("x", INT)
    with pytest.raises(RedeclarationError) as excinfo:
        table.declare("x", INT)
    assert not isinstance(excinfo.value, LookupError)
    assert str(excinfo.value) == "x"


def test_shadowing_and_restore():
    table = SymbolTable()
    outer = table.declare("x", INT)
    table.enter_scope()
    inner = table.declare("x", CHAR)
    assert table.lookup("x") is inner
    assert inner.scope_level == 1
    table.exit_scope()
    assert table.lookup("x") is outer


def test_exit_scope_forgets_inner_symbols():
    table = SymbolTable()
    table.enter_scope()
    table.declare("y", INT)
    table.exit_scope()
    assert table.lookup("y") is None
    assert len(table) == 0


def test_exit_scope_at_top_level_is_noop():
    table = SymbolTable()
    table.declare("x", INT)
    table.exit_scope()
    table.exit_scope()
    assert table.level == 0
    assert table.lookup("x") is not None


def test_lookup_local_ignores_outer_scopes():
    table = SymbolTable()
    table.declare("x", INT)
    table.enter_scope()
    assert table.lookup_local("x") is None
    assert table.lookup("x") is not None


def test_mark_initialized():
    table = SymbolTable()
    table.declare("x", INT)
    assert table.mark_initialized("x")
    assert table.lookup("x").initialized
    assert not table.mark_initialized("missing")


def test_iteration_order_innermost_first():
    table = SymbolTable()
    table.declare("a", INT)
    table.declare("b", INT)
    table.enter_scope()
    table.declare("c", CHAR)
    assert [s.name for s in table] == ["c", "b", "a"]


def test_dump_lists_scopes():
    table = SymbolTable()
    table.declare("a", INT)
    table.enter_scope()
    table.declare("b", CHAR)
    text = table.dump()
    assert "[scope 0]" in text
    assert "  [scope 1]" in text
    assert "'a'" in text and "'b'" in text


def test_random_scope_walk_matches_model():
    """Scopes behave as a stack of dicts under any enter/declare/exit sequence."""
    rng = random.Random(1234)
    table = SymbolTable()
    model = [{}]
    names = ["a", "b", "c", "d"]

    for _ in range(500):
        action = rng.choice(["enter", "exit", "declare", "declare"])
        if action == "enter":
            table.enter_scope()
            model.append({})
        elif action == "exit":
            table.exit_scope()
            if len(model) > 1:
                model.pop()
        else:
            name = rng.choice(names)
            if name in model[-1]:
                with pytest.raises(RedeclarationError):
                    table.declare(name, INT)
            else:
                model[-1][name] = table.declare(name, INT)

        assert table.level == len(model) - 1
        for name in names:
            expected = next((scope[name] for scope in reversed(model) if name in scope), None)
            assert table.lookup(name) is expected


# ── types ─────────────────────────────────────────────────────────────────────

def test_keyword_types():
    assert type_from_keyword(TokenKind.INT) == INT
    assert type_from_keyword(TokenKind.FLOAT) == INT
    assert type_from_keyword(TokenKind.CHAR) == CHAR


@pytest.mark.parametrize(
    ("dst", "src", "ok"),
    [
        (INT, INT, True),
        (CHAR, CHAR, True),
        (INT, CHAR, True),
        (CHAR, INT, False),
        (CHAR, ERROR_T, True),
    ],
)
def test_can_assign(dst, src, ok):
    assert can_assign(dst, src) is ok


def test_widen():
    assert widen(CHAR, CHAR) == CHAR
    assert widen(CHAR, INT) == INT
    assert widen(INT, CHAR) == INT
    assert widen(INT, ERROR_T) == ERROR_T
