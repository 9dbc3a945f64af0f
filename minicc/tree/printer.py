"""把 AST 渲染成缩进文本：每个节点一行，每层深度一个 `--`。"""

from .nodes import ASTNode, BinOp, Comparison, Identifier, NodeKind, Number, VarDecl

_LABELS = {
    NodeKind.PROGRAM:   'Program',
    NodeKind.ASSIGN:    'Assign',
    NodeKind.PRINT:     'Print',
    NodeKind.IF:        'If',
    NodeKind.CONDITION: 'Condition',
    NodeKind.WHILE:     'While',
    NodeKind.REPEAT:    'Repeat-Until',
    NodeKind.BLOCK:     'Block',
    NodeKind.FACTORIAL: 'Factorial',
}


def node_label(node: ASTNode) -> str:
    if isinstance(node, VarDecl):
        return f"VarDecl: {node.name}"
    if isinstance(node, Number):
        return f"Number: {node.token.lexeme}"
    if isinstance(node, Identifier):
        return f"Identifier: {node.name}"
    if isinstance(node, BinOp):
        return f"BinaryOp: {node.op}"
    if isinstance(node, Comparison):
        return f"Comparison: {node.op}"
    return _LABELS.get(node.kind, 'Unknown node type')


def format_tree(node: ASTNode, level: int = 0) -> str:
    # 先序遍历，用显式栈避免深层嵌套时递归溢出
    lines = []
    stack = [(node, level)]
    while stack:
        current, depth = stack.pop()
        lines.append('--' * depth + node_label(current))
        children = list(current.children())
        stack.extend((child, depth + 1) for child in reversed(children))
    return '\n'.join(lines)
