"""Tests for the nutrient model."""

import pytest

from meal_balancer.domain.nutrition import (
    MacroProfile,
    derived_energy,
    portion_macros,
    round_quantity,
    target_from_energy_split,
    target_from_macro_energy,
)
from tests.conftest import RICE


def test_derived_energy_uses_physiological_constants() -> None:
    assert derived_energy(10, 10, 10) == 170


def test_portion_macros_ignore_stored_calories() -> None:
    portion = portion_macros(RICE, 200)

    assert RICE.per_100g.calories == 130
    assert portion.carbs_g == pytest.approx(56)
    assert portion.protein_g == pytest.approx(5.4)
    assert portion.fat_g == pytest.approx(0.6)
    assert portion.calories == pytest.approx(4 * 56 + 4 * 5.4 + 9 * 0.6)


def test_portion_macros_zero_for_non_positive_grams() -> None:
    assert portion_macros(RICE, 0) == MacroProfile(0.0, 0.0, 0.0, 0.0)
    assert portion_macros(RICE, -10) == MacroProfile(0.0, 0.0, 0.0, 0.0)


def test_with_derived_energy_replaces_calories() -> None:
    profile = MacroProfile(calories=999, carbs_g=10, protein_g=5, fat_g=2)

    assert profile.with_derived_energy().calories == 78


def test_round_quantity_rounds_half_up_to_step() -> None:
    assert round_quantity(12.5) == 15
    assert round_quantity(12.4) == 10
    assert round_quantity(2.4) == 0
    assert round_quantity(0) == 0
    assert round_quantity(-7) == 0
    assert round_quantity(6.3, step=2.5) == 7.5


def test_target_from_energy_split() -> None:
    target = target_from_energy_split(600, 40, 30, 30)

    assert target.calories == pytest.approx(600)
    assert target.carbs_g == 60
    assert target.protein_g == 45
    assert target.fat_g == 20


def test_target_from_macro_energy_rounds_grams() -> None:
    target = target_from_macro_energy(242, 150, 100)

    assert target.calories == 492
    assert target.carbs_g == 61
    assert target.protein_g == 38
    assert target.fat_g == 11
