"""
schemas.py — FastAPI request/response models.
Kept apart from contracts.py so the HTTP surface can evolve on its own.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from contracts import (
    AngleUnit,
    CalculationType,
    ConstantInfo,
    ErrorInfo,
    EvaluationStep,
    FunctionInfo,
)


# ─────────────────────────── /calculate ──────────────────────────────

class CalculateRequest(BaseModel):
    expression: str
    type: Optional[CalculationType] = None        # settings.default_calc_type
    angle_unit: Optional[AngleUnit] = None        # settings.default_angle_unit
    show_steps: bool = True
    trace: bool = False


class CalculateSuccess(BaseModel):
    success: bool = True
    expression: str
    result: float
    formatted_result: str
    steps: list[str]
    trace: Optional[list[EvaluationStep]] = None


class CalculateFailure(BaseModel):
    success: bool = False
    error: ErrorInfo


# ─────────────────────────── /functions ──────────────────────────────

class FunctionsResponse(BaseModel):
    type: CalculationType
    operators: list[str] = Field(default_factory=lambda: ["+", "-", "*", "/", "^", "%"])
    functions: list[FunctionInfo]
    constants: list[ConstantInfo]


# ─────────────────────────── /health ─────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
