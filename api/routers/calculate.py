"""
Router: POST /calculate
Runs the expression through the engine and maps the failure kind to a status:
  LexError / ParseError → 400
  EvalError             → 422
The body is always the engine payload, success or failure.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_calculator, get_settings
from api.schemas import CalculateFailure, CalculateRequest, CalculateSuccess
from config import Settings
from engine import Calculator

logger = logging.getLogger("mathsteps.api")

router = APIRouter(prefix="/calculate", tags=["calculate"])

_STATUS_BY_KIND = {
    "LexError": 400,
    "ParseError": 400,
    "EvalError": 422,
}


@router.post(
    "",
    response_model=CalculateSuccess,
    responses={400: {"model": CalculateFailure}, 422: {"model": CalculateFailure}},
)
async def calculate(
    body: CalculateRequest,
    calculator: Calculator = Depends(get_calculator),
    settings: Settings = Depends(get_settings),
):
    response = calculator.calculate(
        body.expression,
        body.type or settings.default_calc_type,
        body.angle_unit or settings.default_angle_unit,
        show_steps=body.show_steps,
        trace=body.trace,
    )
    payload = response.to_payload()
    if not response.success:
        kind = response.error.kind if response.error else "ParseError"
        logger.info("POST /calculate %r → %s", body.expression, kind)
        return JSONResponse(status_code=_STATUS_BY_KIND.get(kind, 400), content=payload)
    return JSONResponse(status_code=200, content=payload)
