"""
api/main.py — FastAPI entry point.

Lifespan:
  - Builds the Calculator from Settings and puts it on app.state
  - Nothing to close on shutdown: the engine holds no connections

Run with any ASGI server, e.g. `uvicorn api.main:app`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.routers import calculate, functions
from api.schemas import HealthResponse
from config import Settings
from engine import Calculator

logger = logging.getLogger("mathsteps")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    app.state.calculator = Calculator.from_settings(settings)
    logger.info(
        "MathSteps API ready (max length %d, precision %d).",
        settings.max_expression_length,
        settings.display_precision,
    )
    yield
    logger.info("Shutting down.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Routers
    app.include_router(calculate.router)
    app.include_router(functions.router)

    # Health
    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse(status="ok", version=settings.app_version)

    # Malformed bodies get the same failure shape as engine errors
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {"loc": (), "msg": "invalid request"}
        field = ".".join(str(part) for part in first["loc"] if part != "body") or "body"
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "kind": "ParseError",
                    "message": f"invalid request field '{field}': {first['msg']}",
                },
            },
        )

    return app


app = create_app()
