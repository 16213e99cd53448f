"""Solver configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class SolverSettings(BaseSettings):
    """Solver settings loaded from environment variables."""

    round_step: float = Field(default=5.0, gt=0)
    target_min_grams: float = Field(default=40.0, ge=0)
    min_bias_weight: float = Field(default=30.0, ge=0)
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="MEAL_SOLVER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
