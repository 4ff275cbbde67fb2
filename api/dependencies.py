"""
dependencies.py — FastAPI dependency injection.
Each dependency hands out what the lifespan put on Request.app.state.
"""
from __future__ import annotations

from fastapi import Request

from config import Settings
from engine import Calculator


def get_calculator(request: Request) -> Calculator:
    return request.app.state.calculator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
