"""
Adapter: TreeEvaluator
Implements the Evaluator port — post-order walk of the expression tree in
IEEE-754 double precision.

Every operator/function node is checked for its domain BEFORE it is combined,
and every result is checked for finiteness AFTER; both failures raise
EvalError with a distinct reason and the offending node. Inf and NaN never
leave this module.

Steps: one per reduced BinaryOp / UnaryOp / FunctionCall. A literal, and a
minus applied directly to a literal, reduce silently.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from contracts import (
    AngleUnit,
    BinaryOpNode,
    CalculationResult,
    ExpressionNode,
    FunctionCallNode,
    LiteralNode,
    UnaryOpNode,
)
from errors import EvalError
from registry import (
    COMPLEX_RESULT,
    DIVISION_BY_ZERO,
    MODULO_BY_ZERO,
    NUMERIC_OVERFLOW,
    FunctionSpec,
    lookup_function,
)
from adapters.evaluator.render import children
from adapters.evaluator.step_recorder import StepRecorder

logger = logging.getLogger("mathsteps.evaluator")


def _power(node: BinaryOpNode, base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        raise EvalError(DIVISION_BY_ZERO, node)
    try:
        return math.pow(base, exponent)
    except ValueError:
        # negative base with a fractional exponent
        raise EvalError(COMPLEX_RESULT, node)
    except OverflowError:
        raise EvalError(NUMERIC_OVERFLOW, node)


def _divide(node: BinaryOpNode, a: float, b: float) -> float:
    if b == 0:
        raise EvalError(DIVISION_BY_ZERO, node)
    return a / b


def _modulo(node: BinaryOpNode, a: float, b: float) -> float:
    if b == 0:
        raise EvalError(MODULO_BY_ZERO, node)
    return math.fmod(a, b)


_BINARY = {
    "+": lambda node, a, b: a + b,
    "-": lambda node, a, b: a - b,
    "*": lambda node, a, b: a * b,
    "/": _divide,
    "%": _modulo,
    "^": _power,
}


def _finite(node: ExpressionNode, value: float) -> float:
    if not math.isfinite(value):
        raise EvalError(NUMERIC_OVERFLOW, node)
    return value


class TreeEvaluator:
    """Stateless between calls; each evaluate() owns its own StepRecorder."""

    def __init__(self, angle_unit: AngleUnit = AngleUnit.RAD, precision: int = 12) -> None:
        self._angle_unit = AngleUnit(angle_unit)
        self._precision = precision

    # -- Evaluator protocol ------------------------------------------------

    def evaluate(
        self,
        tree: ExpressionNode,
        expression: Optional[str] = None,
    ) -> CalculationResult:
        recorder = StepRecorder(tree, self._precision)
        if expression is None:
            expression = recorder.render(tree)
        value = self._eval(tree, recorder)
        logger.debug("Evaluated %r in %d step(s)", expression, len(recorder.steps))
        return CalculationResult(
            expression=expression,
            result=value,
            steps=tuple(recorder.steps),
        )

    # -- Private -----------------------------------------------------------

    def _eval(self, root: ExpressionNode, recorder: StepRecorder) -> float:
        # post-order with an explicit stack; tree depth is bounded by input length, not recursion
        values: dict[int, float] = {}
        stack = [(root, False)]
        while stack:
            node, ready = stack.pop()
            pending = children(node)
            if pending and not ready:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(pending))
                continue
            values[id(node)] = self._reduce(node, [values.pop(id(c)) for c in pending], recorder)
        return values[id(root)]

    def _reduce(self, node: ExpressionNode, operands: list[float], recorder: StepRecorder) -> float:
        if isinstance(node, LiteralNode):
            return node.value

        if isinstance(node, UnaryOpNode):
            value = -operands[0]
            if isinstance(node.operand, LiteralNode):
                recorder.fold(node, value)
            else:
                recorder.record(node, value)
            return value

        if isinstance(node, BinaryOpNode):
            left, right = operands
            value = _finite(node, _BINARY[node.op](node, left, right))
        else:
            value = _finite(node, self._call(lookup_function(node.name), node, operands))
        recorder.record(node, value)
        return value

    def _call(self, spec: FunctionSpec, node: FunctionCallNode, args: list[float]) -> float:
        if spec.domain is not None:
            reason = spec.domain(*args)
            if reason:
                raise EvalError(reason, node)
        if spec.angle == "input" and self._angle_unit == AngleUnit.DEG:
            args = [math.radians(a) for a in args]
        try:
            value = float(spec.impl(*args))
        except OverflowError:
            raise EvalError(NUMERIC_OVERFLOW, node)
        except ValueError:
            raise EvalError(f"invalid argument for {spec.name}", node)
        if spec.angle == "output" and self._angle_unit == AngleUnit.DEG:
            value = math.degrees(value)
        return value


def evaluate(tree: ExpressionNode, expression: Optional[str] = None) -> CalculationResult:
    return TreeEvaluator().evaluate(tree, expression)
