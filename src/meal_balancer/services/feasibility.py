"""Structural feasibility checks run before optimizing."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from meal_balancer.domain.nutrition import KCAL_PER_GRAM_PROTEIN, FoodItem, MealTarget
from meal_balancer.domain.solver import CategoryPartition, Macro
from meal_balancer.services.classifier import energy_shares

MIN_REASONABLE_GRAMS = 30.0
PROTEIN_DENSITY_SLACK = 1.15


@dataclass(frozen=True)
class FeasibilityReport:
    """Outcome of the feasibility checks."""

    is_feasible: bool = True
    warnings: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()


def check_feasibility(
    foods: Sequence[FoodItem], target: MealTarget, partition: CategoryPartition
) -> FeasibilityReport:
    """Detect crowded categories and unreachable protein density.

    Over-crowding is a hard failure: splitting a macro's target across every
    source of that macro would leave each source with less than a reasonable
    portion. An unreachable protein density only adds a warning.
    """
    if target.calories <= 0:
        return FeasibilityReport()

    warnings: list[str] = []
    suggestions: list[str] = []
    if partition.protein:
        finding = _protein_crowding(foods, target, partition.protein)
        if finding:
            warnings.append(finding[0])
            suggestions.append(finding[1])
    if partition.carbs and target.carbs_g > 0:
        finding = _carbs_crowding(foods, target, partition.carbs)
        if finding:
            warnings.append(finding[0])
            suggestions.append(finding[1])
    if suggestions:
        return FeasibilityReport(
            is_feasible=False,
            warnings=(
                "A balanced meal cannot be composed with these foods. "
                "Try removing something.",
                *warnings,
            ),
            suggestions=tuple(suggestions),
        )

    ceiling = max(energy_shares(food)[Macro.PROTEIN] for food in foods)
    required = target.protein_g * KCAL_PER_GRAM_PROTEIN / max(target.calories, 1.0)
    if required > ceiling * PROTEIN_DENSITY_SLACK:
        reduced = math.floor(target.calories * ceiling / KCAL_PER_GRAM_PROTEIN)
        return FeasibilityReport(
            warnings=(
                f"The target asks for {target.protein_g:g} g of protein in "
                f"{target.calories:g} kcal ({round(required * 100)}% of energy "
                "from protein), but no selected food is that protein dense.",
            ),
            suggestions=(
                f"Reduce the protein target to about {reduced} g "
                "or add foods richer in protein.",
            ),
        )
    return FeasibilityReport()


def _grams_per_source(target_g: float, count: int, first_density: float) -> float:
    return (target_g / count) * (100.0 / (first_density or 1.0))


def _protein_crowding(
    foods: Sequence[FoodItem], target: MealTarget, members: tuple[int, ...]
) -> tuple[str, str] | None:
    count = len(members)
    first = foods[members[0]].per_100g.protein_g
    if _grams_per_source(target.protein_g, count, first) >= MIN_REASONABLE_GRAMS:
        return None
    remove = count - max(1, math.floor(target.protein_g / 20))
    return (
        f"{count} protein sources share a protein target of "
        f"{target.protein_g:g} g, leaving each under "
        f"{MIN_REASONABLE_GRAMS:g} g.",
        f"Remove {remove} protein sources or raise the protein target "
        f"to about {count * 25} g.",
    )


def _carbs_crowding(
    foods: Sequence[FoodItem], target: MealTarget, members: tuple[int, ...]
) -> tuple[str, str] | None:
    count = len(members)
    first = foods[members[0]].per_100g.carbs_g
    if _grams_per_source(target.carbs_g, count, first) >= MIN_REASONABLE_GRAMS:
        return None
    return (
        f"{count} carbohydrate sources share a carbohydrate target of "
        f"{target.carbs_g:g} g, leaving each under "
        f"{MIN_REASONABLE_GRAMS:g} g.",
        f"Remove {count - 1} carbohydrate sources or raise the carbohydrate "
        f"target to about {count * 30} g.",
    )
