"""
engine.py — Calculation pipeline and its external boundary.

    text → Lexer → tokens → Parser → tree → Evaluator → CalculationResult

Calculator.calculate() never raises: LexError / ParseError / EvalError and a
malformed request are all converted into CalculationResponse(success=False).
The API router and the CLI only talk to this module.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from adapters.evaluator.render import format_number
from adapters.evaluator.tree_evaluator import TreeEvaluator
from adapters.lexer import RegexLexer
from adapters.parser.precedence_parser import PrecedenceParser
from contracts import (
    AngleUnit,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    CalculationType,
    ErrorInfo,
)
from errors import CalculationError, ParseError
from ports.expression_parser import ExpressionParser
from ports.lexer import Lexer

logger = logging.getLogger("mathsteps.engine")


def _coerce(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = "|".join(member.value for member in enum_cls)
        raise ParseError(
            f"invalid request field '{field}': {value!r} is not one of {allowed}",
            expected=allowed,
            found=str(value),
        )


class Calculator:
    """Stateless facade; safe to share between concurrent requests."""

    def __init__(
        self,
        lexer: Optional[Lexer] = None,
        parser: Optional[ExpressionParser] = None,
        max_expression_length: int = 1000,
        display_precision: int = 12,
    ) -> None:
        self._lexer = lexer or RegexLexer()
        self._parser = parser or PrecedenceParser()
        self._max_length = max_expression_length
        self._precision = display_precision

    @classmethod
    def from_settings(cls, settings: Any) -> "Calculator":
        return cls(
            parser=PrecedenceParser(max_depth=settings.max_nesting_depth),
            max_expression_length=settings.max_expression_length,
            display_precision=settings.display_precision,
        )

    # -- Pipeline ------------------------------------------------------------

    def run(
        self,
        expression: str,
        calc_type: CalculationType = CalculationType.BASIC,
        angle_unit: AngleUnit = AngleUnit.RAD,
    ) -> CalculationResult:
        """Raises LexError / ParseError / EvalError at the first problem."""
        if not isinstance(expression, str):
            raise ParseError(
                "invalid request field 'expression': expected text",
                expected="text",
                found=type(expression).__name__,
            )
        calc_type = _coerce(CalculationType, calc_type, "type")
        angle_unit = _coerce(AngleUnit, angle_unit, "angle_unit")
        if len(expression) > self._max_length:
            raise ParseError(
                "expression too long",
                position=self._max_length,
                expected=f"at most {self._max_length} characters",
                found=f"{len(expression)} characters",
            )
        tokens = self._lexer.tokenize(expression)
        tree = self._parser.parse(tokens, calc_type)
        evaluator = TreeEvaluator(angle_unit=angle_unit, precision=self._precision)
        return evaluator.evaluate(tree, expression)

    # -- Boundary ------------------------------------------------------------

    def calculate(
        self,
        expression: str,
        calc_type: CalculationType = CalculationType.BASIC,
        angle_unit: AngleUnit = AngleUnit.RAD,
        show_steps: bool = True,
        trace: bool = False,
    ) -> CalculationResponse:
        try:
            result = self.run(expression, calc_type, angle_unit)
        except CalculationError as exc:
            logger.info("Calculation failed [%s]: %s", exc.kind, exc)
            return CalculationResponse(success=False, error=exc.to_info())

        return CalculationResponse(
            success=True,
            expression=result.expression,
            result=result.result,
            formatted_result=format_number(result.result, self._precision),
            steps=[step.description for step in result.steps] if show_steps else [],
            trace=list(result.steps) if trace else None,
        )

    def handle(self, request: CalculationRequest) -> CalculationResponse:
        return self.calculate(
            request.expression,
            request.type,
            request.angle_unit,
            show_steps=request.show_steps,
            trace=request.trace,
        )

    def calculate_payload(self, payload: Mapping[str, Any]) -> dict:
        """Mapping in, mapping out: {expression, type, ...} → success/failure dict."""
        if not isinstance(payload, Mapping):
            logger.info("Rejected request payload of type %s", type(payload).__name__)
            return CalculationResponse(
                success=False,
                error=ErrorInfo(kind="ParseError", message="invalid request: expected a mapping"),
            ).to_payload()
        try:
            request = CalculationRequest.model_validate(dict(payload))
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "request"
            logger.info("Rejected request payload: %s", exc)
            response = CalculationResponse(
                success=False,
                error=ErrorInfo(
                    kind="ParseError",
                    message=f"invalid request field '{field}': {first['msg']}",
                ),
            )
            return response.to_payload()
        return self.handle(request).to_payload()
