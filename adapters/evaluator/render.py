"""
render.py — Tree → text, with minimal parentheses.

Reduced nodes (already evaluated during a walk) are printed as their value,
which is how a step shows "2 + 12" after "3 * 4" was reduced. Values are
rounded to the display precision here and nowhere else.
"""
from __future__ import annotations

from typing import Mapping, Optional

from contracts import (
    Associativity,
    BinaryOpNode,
    ExpressionNode,
    FunctionCallNode,
    LiteralNode,
    UnaryOpNode,
)
from registry import ATOM_BP, OPERATORS, UNARY_BP


def format_number(value: float, precision: int = 12) -> str:
    if value == 0:
        return "0"   # also -0.0
    return f"{value:.{precision}g}"


def children(node: ExpressionNode) -> tuple[ExpressionNode, ...]:
    if isinstance(node, BinaryOpNode):
        return (node.left, node.right)
    if isinstance(node, UnaryOpNode):
        return (node.operand,)
    if isinstance(node, FunctionCallNode):
        return node.args
    if isinstance(node, LiteralNode):
        return ()
    raise TypeError(f"Unknown expression node type: {type(node)}")


class Renderer:
    def __init__(self, precision: int = 12, reduced: Optional[Mapping[int, float]] = None) -> None:
        self._precision = precision
        self._reduced = reduced if reduced is not None else {}

    def render(self, node: ExpressionNode) -> str:
        # explicit stack: a long flat sum is a left spine as deep as it is long
        done: dict[int, tuple[str, int]] = {}
        stack = [(node, False)]
        while stack:
            current, ready = stack.pop()
            pending = () if id(current) in self._reduced else children(current)
            if pending and not ready:
                stack.append((current, True))
                stack.extend((child, False) for child in reversed(pending))
                continue
            done[id(current)] = self._combine(current, [done.pop(id(c)) for c in pending])
        return done[id(node)][0]

    def _number(self, value: float) -> tuple[str, int]:
        text = format_number(value, self._precision)
        return text, UNARY_BP if text.startswith("-") else ATOM_BP

    def _combine(self, node: ExpressionNode, parts: list[tuple[str, int]]) -> tuple[str, int]:
        if id(node) in self._reduced:
            return self._number(self._reduced[id(node)])

        if isinstance(node, LiteralNode):
            if node.symbol:
                return node.symbol, ATOM_BP
            return self._number(node.value)

        if isinstance(node, UnaryOpNode):
            text, bp = parts[0]
            # "-(5)" keeps a pending negation visible once its operand is reduced
            if bp <= UNARY_BP or id(node.operand) in self._reduced:
                text = f"({text})"
            return f"-{text}", UNARY_BP

        if isinstance(node, BinaryOpNode):
            bp, assoc = OPERATORS[node.op]
            (left, left_bp), (right, right_bp) = parts
            if left_bp < bp or (left_bp == bp and assoc == Associativity.RIGHT):
                left = f"({left})"
            if right_bp < bp or (right_bp == bp and assoc == Associativity.LEFT):
                right = f"({right})"
            return f"{left} {node.op} {right}", bp

        args = ", ".join(text for text, _ in parts)
        return f"{node.name}({args})", ATOM_BP


def render(node: ExpressionNode, precision: int = 12) -> str:
    return Renderer(precision).render(node)
