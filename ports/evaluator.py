"""
Port: Evaluator
Responsibility: deterministic evaluation of an expression tree with a step log.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import CalculationResult, ExpressionNode


@runtime_checkable
class Evaluator(Protocol):
    def evaluate(
        self,
        tree: ExpressionNode,
        expression: Optional[str] = None,
    ) -> CalculationResult:
        """
        Walks the tree bottom-up in double precision.
        expression: original input text; rendered from the tree when omitted.
        Returns CalculationResult with:
          - result: final float value (never Inf/NaN)
          - steps: one EvaluationStep per reduced operator/function node
        Raises EvalError on a domain violation (division by zero, sqrt of a
        negative number, non-finite result, ...). No partial result is returned.
        """
        ...
