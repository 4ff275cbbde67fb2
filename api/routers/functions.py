"""
Router: GET /functions
Lists operators, functions and constants available to a calculation type.
"""
from fastapi import APIRouter, Query

from api.schemas import FunctionsResponse
from contracts import CalculationType
from registry import list_constants, list_functions

router = APIRouter(prefix="/functions", tags=["functions"])


@router.get("", response_model=FunctionsResponse)
async def get_functions(
    type: CalculationType = Query(CalculationType.SCIENTIFIC, description="basic|scientific"),
) -> FunctionsResponse:
    return FunctionsResponse(
        type=type,
        functions=list_functions(type),
        constants=list_constants(type),
    )
