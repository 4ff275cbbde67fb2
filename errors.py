"""
errors.py — Error taxonomy of the calculation engine.

  LexError    — unrecognized character in the input text
  ParseError  — structural problem: parentheses, unknown identifier, arity,
                trailing or missing tokens, malformed literal
  EvalError   — domain problem: division by zero, invalid function input,
                non-finite result

Each stage raises at the first problem. The engine converts the exception into
the structured ErrorInfo shape; nothing above the engine sees these classes.
"""
from __future__ import annotations

from typing import Any, Optional

from contracts import ErrorInfo


class CalculationError(Exception):
    kind = "CalculationError"

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(kind=self.kind, message=self.message, position=self.position)

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class LexError(CalculationError):
    kind = "LexError"

    def __init__(self, character: str, position: int) -> None:
        super().__init__(f"unexpected character {character!r}", position)
        self.character = character


class ParseError(CalculationError):
    kind = "ParseError"

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ) -> None:
        super().__init__(message, position)
        self.expected = expected
        self.found = found

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(
            kind=self.kind,
            message=self.message,
            position=self.position,
            expected=self.expected,
            found=self.found,
        )


class EvalError(CalculationError):
    kind = "EvalError"

    def __init__(self, reason: str, node: Any = None) -> None:
        super().__init__(reason, getattr(node, "position", None))
        self.reason = reason
        self.node = node
