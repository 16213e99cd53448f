"""Tests for solver settings."""

import pytest
from pydantic import ValidationError

from meal_balancer.config import SolverSettings


def test_defaults() -> None:
    settings = SolverSettings()

    assert settings.round_step == 5
    assert settings.target_min_grams == 40
    assert settings.min_bias_weight == 30


def test_reads_prefixed_environment(monkeypatch) -> None:
    monkeypatch.setenv("MEAL_SOLVER_ROUND_STEP", "10")
    monkeypatch.setenv("MEAL_SOLVER_DEBUG", "true")

    settings = SolverSettings()

    assert settings.round_step == 10
    assert settings.debug is True


def test_rejects_non_positive_round_step() -> None:
    with pytest.raises(ValidationError):
        SolverSettings(round_step=0)
