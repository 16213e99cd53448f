"""Scores and diagnostics for solved meals."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from meal_balancer.domain.nutrition import FoodItem, MacroProfile, MealTarget
from meal_balancer.domain.solver import CategoryRollup, CategoryTotals, Macro
from meal_balancer.services.classifier import (
    MACRO_CLASSIFICATION_THRESHOLD,
    energy_shares,
)

ENERGY_PRECISION_THRESHOLD = 95.0
MACRO_PRECISION_THRESHOLD = 90.0
UNBALANCED_SCORE = 80
DEFICIT_MARGIN_G = 1.0


@dataclass(frozen=True)
class Precision:
    """Per-quantity closeness to target, 0 to 100."""

    calories: float
    carbs: float
    protein: float
    fat: float

    def for_macro(self, macro: Macro) -> float:
        return getattr(self, macro.value)


def macro_grams(profile: MacroProfile, macro: Macro) -> float:
    """Return the grams of one macro in a profile."""
    return getattr(profile, f"{macro.value}_g")


def closeness(actual: float, target: float) -> float:
    """Return 100 for a perfect match, falling linearly to 0 at 100% error."""
    if target <= 0:
        return 100.0
    return max(0.0, 100.0 * (1.0 - min(1.0, abs(actual - target) / target)))


def precision(target: MealTarget, actual: MacroProfile) -> Precision:
    return Precision(
        calories=closeness(actual.calories, target.calories),
        carbs=closeness(actual.carbs_g, target.carbs_g),
        protein=closeness(actual.protein_g, target.protein_g),
        fat=closeness(actual.fat_g, target.fat_g),
    )


def needs_improvement(result: Precision) -> bool:
    """Return True while any quantity misses its precision threshold."""
    return (
        result.calories < ENERGY_PRECISION_THRESHOLD
        or result.carbs < MACRO_PRECISION_THRESHOLD
        or result.protein < MACRO_PRECISION_THRESHOLD
        or result.fat < MACRO_PRECISION_THRESHOLD
    )


def match_score(target: MealTarget, actual: MacroProfile) -> int:
    """Return the 0-100 caller-facing score, weighting energy at 60%."""
    if target.calories <= 0:
        return 100
    energy_error = abs(actual.calories - target.calories) / max(target.calories, 1.0)
    energy_score = max(0.0, 1.0 - energy_error) * 100.0
    errors = [
        abs(value - goal) / goal if goal > 0 else 0.0
        for value, goal in (
            (actual.carbs_g, target.carbs_g),
            (actual.protein_g, target.protein_g),
            (actual.fat_g, target.fat_g),
        )
    ]
    if target.carbs_g + target.protein_g + target.fat_g > 0:
        macro_score = max(0.0, 1.0 - sum(errors) / 3.0) * 100.0
    else:
        macro_score = 100.0
    return math.floor(0.6 * energy_score + 0.4 * macro_score + 0.5)


def most_deficient_macro(target: MealTarget, actual: MacroProfile) -> Macro | None:
    """Return the macro furthest below target, ignoring gaps up to 1 g."""
    gaps = {
        Macro.CARBS: target.carbs_g - actual.carbs_g,
        Macro.PROTEIN: target.protein_g - actual.protein_g,
        Macro.FAT: target.fat_g - actual.fat_g,
    }
    missing = [(gap, macro) for macro, gap in gaps.items() if gap > DEFICIT_MARGIN_G]
    if not missing:
        return None
    return max(missing, key=lambda pair: pair[0])[1]


def category_rollup(
    foods: Sequence[FoodItem], grams: Sequence[float]
) -> CategoryRollup:
    """Count items and grams for every macro supplying over 20% of an item's energy."""
    counts = {macro: 0 for macro in Macro}
    totals = {macro: 0.0 for macro in Macro}
    for food, quantity in zip(foods, grams, strict=True):
        if quantity <= 0:
            continue
        for macro, share in energy_shares(food).items():
            if share > MACRO_CLASSIFICATION_THRESHOLD:
                counts[macro] += 1
                totals[macro] += quantity
    return CategoryRollup(
        protein=CategoryTotals(counts[Macro.PROTEIN], float(round(totals[Macro.PROTEIN]))),
        carbs=CategoryTotals(counts[Macro.CARBS], float(round(totals[Macro.CARBS]))),
        fat=CategoryTotals(counts[Macro.FAT], float(round(totals[Macro.FAT]))),
    )
