"""Tests for scores and diagnostics."""

import pytest

from meal_balancer.domain.nutrition import MacroProfile, MealTarget
from meal_balancer.domain.solver import CategoryTotals, Macro
from meal_balancer.services.scoring import (
    Precision,
    category_rollup,
    closeness,
    match_score,
    most_deficient_macro,
    needs_improvement,
    precision,
)
from tests.conftest import BALANCED_TARGET, CHICKEN, EGGS, OLIVE_OIL, RICE


def test_closeness_is_full_for_zero_target() -> None:
    assert closeness(12, 0) == 100


def test_closeness_drops_linearly_and_floors_at_zero() -> None:
    assert closeness(90, 100) == pytest.approx(90)
    assert closeness(110, 100) == pytest.approx(90)
    assert closeness(350, 100) == 0


def test_precision_per_quantity() -> None:
    actual = MacroProfile(calories=570, carbs_g=60, protein_g=30, fat_g=22)

    result = precision(BALANCED_TARGET, actual)

    assert result.calories == pytest.approx(95)
    assert result.carbs == pytest.approx(100)
    assert result.protein == pytest.approx(75)
    assert result.fat == pytest.approx(90)


def test_needs_improvement_thresholds() -> None:
    assert not needs_improvement(Precision(95, 90, 90, 90))
    assert needs_improvement(Precision(94.9, 100, 100, 100))
    assert needs_improvement(Precision(100, 100, 89.9, 100))


def test_match_score_perfect_and_zero_target() -> None:
    assert match_score(BALANCED_TARGET, BALANCED_TARGET) == 100
    assert match_score(MealTarget(0, 0, 0, 0), MacroProfile(50, 5, 5, 1)) == 100


def test_match_score_weights_energy_and_macros() -> None:
    actual = MacroProfile(calories=540, carbs_g=60, protein_g=40, fat_g=10)

    # energy 90, macros 1 - (0 + 0 + 0.5) / 3
    assert match_score(BALANCED_TARGET, actual) == round(0.6 * 90 + 0.4 * 83.333)


def test_most_deficient_macro_picks_largest_gap() -> None:
    actual = MacroProfile(calories=400, carbs_g=50, protein_g=20, fat_g=19.5)

    assert most_deficient_macro(BALANCED_TARGET, actual) is Macro.PROTEIN


def test_most_deficient_macro_ignores_small_gaps() -> None:
    actual = MacroProfile(calories=590, carbs_g=59.5, protein_g=39.2, fat_g=25)

    assert most_deficient_macro(BALANCED_TARGET, actual) is None


def test_category_rollup_counts_each_significant_macro() -> None:
    rollup = category_rollup([RICE, CHICKEN, OLIVE_OIL, EGGS], [200, 100, 0, 50])

    assert rollup.carbs == CategoryTotals(count=1, total_grams=200)
    assert rollup.protein == CategoryTotals(count=2, total_grams=150)
    assert rollup.fat == CategoryTotals(count=2, total_grams=150)
