"""
contracts.py — Single source of truth for every data type in MathSteps.
All modules import data models ONLY from here. Do not change without a version bump.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTRACTS_VERSION = "1.0.0"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ─────────────────────────── Calculation modes ───────────────────────────

class CalculationType(str, Enum):
    BASIC = "basic"              # + - * / ^ % only
    SCIENTIFIC = "scientific"    # adds functions and constants


class AngleUnit(str, Enum):
    RAD = "rad"
    DEG = "deg"


class Associativity(str, Enum):
    LEFT = "left"
    RIGHT = "right"


# ─────────────────────────── Lexer tokens ────────────────────────────────

class NumberToken(_Frozen):
    kind: Literal["number"] = "number"
    text: str          # raw spelling, validated by the parser
    position: int


class OperatorToken(_Frozen):
    kind: Literal["operator"] = "operator"
    symbol: Literal["+", "-", "*", "/", "^", "%"]
    precedence: int
    associativity: Associativity
    position: int


class IdentifierToken(_Frozen):
    kind: Literal["identifier"] = "identifier"
    name: str
    position: int


class LeftParenToken(_Frozen):
    kind: Literal["lparen"] = "lparen"
    position: int


class RightParenToken(_Frozen):
    kind: Literal["rparen"] = "rparen"
    position: int


class CommaToken(_Frozen):
    kind: Literal["comma"] = "comma"
    position: int


Token = Annotated[
    Union[NumberToken, OperatorToken, IdentifierToken,
          LeftParenToken, RightParenToken, CommaToken],
    Field(discriminator="kind"),
]


# ─────────────────────────── Expression tree ─────────────────────────────

class LiteralNode(_Frozen):
    node_type: Literal["literal"] = "literal"
    value: float
    symbol: Optional[str] = None   # "pi", "e" for named constants
    position: int = 0


class BinaryOpNode(_Frozen):
    node_type: Literal["binop"] = "binop"
    op: Literal["+", "-", "*", "/", "^", "%"]
    left: "ExpressionNode"
    right: "ExpressionNode"
    position: int = 0


class UnaryOpNode(_Frozen):
    node_type: Literal["unary"] = "unary"
    op: Literal["-"] = "-"
    operand: "ExpressionNode"
    position: int = 0


class FunctionCallNode(_Frozen):
    node_type: Literal["call"] = "call"
    name: str
    args: tuple["ExpressionNode", ...]
    position: int = 0


ExpressionNode = Annotated[
    Union[LiteralNode, BinaryOpNode, UnaryOpNode, FunctionCallNode],
    Field(discriminator="node_type"),
]
BinaryOpNode.model_rebuild()
UnaryOpNode.model_rebuild()
FunctionCallNode.model_rebuild()


# ─────────────────────────── Evaluation ──────────────────────────────────

class EvaluationStep(_Frozen):
    description: str     # "3 * 4 = 12"
    expression: str      # whole expression after the reduction: "2 + 12"
    value: float


class CalculationResult(_Frozen):
    expression: str
    result: float
    steps: tuple[EvaluationStep, ...] = ()
    success: bool = True


# ─────────────────────────── Registry listing ────────────────────────────

class FunctionInfo(BaseModel):
    name: str
    arity: int
    description: str


class ConstantInfo(BaseModel):
    name: str
    value: float


# ─────────────────────────── Engine boundary ─────────────────────────────

ErrorKind = Literal["LexError", "ParseError", "EvalError"]


class ErrorInfo(BaseModel):
    kind: ErrorKind
    message: str
    position: Optional[int] = None
    expected: Optional[str] = None
    found: Optional[str] = None


class CalculationRequest(BaseModel):
    expression: str
    type: CalculationType = CalculationType.BASIC
    angle_unit: AngleUnit = AngleUnit.RAD
    show_steps: bool = True
    trace: bool = False   # include full EvaluationStep records


class CalculationResponse(BaseModel):
    success: bool
    expression: Optional[str] = None
    result: Optional[float] = None
    formatted_result: Optional[str] = None
    steps: list[str] = Field(default_factory=list)
    trace: Optional[list[EvaluationStep]] = None
    error: Optional[ErrorInfo] = None

    def to_payload(self) -> dict:
        """Success and failure shapes only carry their own fields."""
        if not self.success:
            return {
                "success": False,
                "error": self.error.model_dump(exclude_none=True) if self.error else None,
            }
        payload = self.model_dump(exclude={"error", "trace"})
        if self.trace is not None:
            payload["trace"] = [step.model_dump() for step in self.trace]
        return payload
