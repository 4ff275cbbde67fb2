"""
StepRecorder — collects EvaluationStep records for one evaluation.

Created per evaluate() call and thrown away with it. record() is called right
after a node is reduced; the node's text is taken before the reduction is
registered, the whole-expression text after it.
"""
from __future__ import annotations

from contracts import EvaluationStep, ExpressionNode
from adapters.evaluator.render import Renderer, format_number


class StepRecorder:
    def __init__(self, root: ExpressionNode, precision: int = 12) -> None:
        self._root = root
        self._precision = precision
        self._reduced: dict[int, float] = {}
        self._renderer = Renderer(precision, self._reduced)
        self.steps: list[EvaluationStep] = []

    def record(self, node: ExpressionNode, value: float) -> None:
        before = self._renderer.render(node)
        self._reduced[id(node)] = value
        self.steps.append(EvaluationStep(
            description=f"{before} = {format_number(value, self._precision)}",
            expression=self._renderer.render(self._root),
            value=value,
        ))

    def fold(self, node: ExpressionNode, value: float) -> None:
        """Marks a node as reduced without a step (negated literal)."""
        self._reduced[id(node)] = value

    def render(self, node: ExpressionNode) -> str:
        return self._renderer.render(node)
