"""
config.py — Application settings from environment variables.
Every variable carries the MATHSTEPS_ prefix (e.g. MATHSTEPS_LOG_LEVEL=DEBUG).
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

from contracts import AngleUnit, CalculationType


class Settings(BaseSettings):
    # Engine limits
    max_expression_length: int = 1000
    max_nesting_depth: int = 64
    display_precision: int = 12

    # Request defaults
    default_calc_type: CalculationType = CalculationType.BASIC
    default_angle_unit: AngleUnit = AngleUnit.RAD

    # Logging
    log_level: str = "INFO"

    # App
    app_title: str = "MathSteps"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="MATHSTEPS_", env_file=".env", extra="ignore")
