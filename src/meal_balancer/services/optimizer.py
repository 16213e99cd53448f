"""Weighted least squares distribution of grams across free foods."""

import math
from collections.abc import Sequence

from meal_balancer.config import SolverSettings
from meal_balancer.domain.nutrition import FoodItem, MealTarget
from meal_balancer.domain.solver import CategoryPartition, FoodCategory
from meal_balancer.services.linear import solve_linear_system

# Row weights for energy, carbs, protein and fat. Energy dominates.
ROW_WEIGHTS = (20.0, math.sqrt(60.0), math.sqrt(80.0), math.sqrt(40.0))

CATEGORY_FAIRNESS_WEIGHTS = {
    FoodCategory.PROTEIN: 60.0,
    FoodCategory.CARBS: 60.0,
    FoodCategory.FAT: 30.0,
    FoodCategory.MIXED: 15.0,
}


def build_system(foods: Sequence[FoodItem]) -> list[list[float]]:
    """Return the 4 x n composition matrix (energy, carbs, protein, fat per 100 g)."""
    return [
        [food.energy_per_100g for food in foods],
        [food.per_100g.carbs_g for food in foods],
        [food.per_100g.protein_g for food in foods],
        [food.per_100g.fat_g for food in foods],
    ]


def scaled_rhs(remaining: MealTarget) -> list[float]:
    """Return the right-hand side so that unknowns come out in grams."""
    return [
        remaining.calories * 100.0,
        remaining.carbs_g * 100.0,
        remaining.protein_g * 100.0,
        remaining.fat_g * 100.0,
    ]


def weighted_least_squares(
    matrix: Sequence[Sequence[float]],
    rhs: Sequence[float],
    partition: CategoryPartition,
    settings: SolverSettings,
) -> list[float]:
    """Solve the regularised normal equations for the free foods.

    On top of ``AᵀW²A x = AᵀW²b`` two terms are added: a fairness term that
    pulls foods of the same category toward an equal share, and a weak bias
    that pulls every food toward ``settings.target_min_grams``.
    """
    n = len(matrix[0]) if matrix else 0
    squared = [w * w for w in ROW_WEIGHTS]
    normal = [[0.0] * n for _ in range(n)]
    projected = [0.0] * n
    for i in range(n):
        for j in range(n):
            normal[i][j] = sum(
                matrix[r][i] * squared[r] * matrix[r][j] for r in range(len(squared))
            )
        projected[i] = sum(matrix[r][i] * squared[r] * rhs[r] for r in range(len(squared)))

    for category, beta in CATEGORY_FAIRNESS_WEIGHTS.items():
        members = partition.members(category)
        if len(members) <= 1:
            continue
        share = 1.0 / len(members)
        for i in members:
            for j in members:
                normal[i][j] += beta * ((1.0 if i == j else 0.0) - share)

    for i in range(n):
        normal[i][i] += settings.min_bias_weight
        projected[i] += settings.min_bias_weight * settings.target_min_grams

    return solve_linear_system(normal, projected)


def distribute(
    foods: Sequence[FoodItem],
    remaining: MealTarget,
    partition: CategoryPartition,
    settings: SolverSettings,
) -> tuple[float, ...]:
    """Return unrounded grams for the free foods.

    Negative grams are clamped to zero and the vector is then rescaled as a
    whole so its energy matches the remaining target energy.
    """
    matrix = build_system(foods)
    grams = [
        max(0.0, x)
        for x in weighted_least_squares(matrix, scaled_rhs(remaining), partition, settings)
    ]
    energy = sum(matrix[0][j] / 100.0 * grams[j] for j in range(len(grams)))
    if energy <= 0:
        return tuple(grams)
    scale = max(0.0, remaining.calories) / energy
    return tuple(max(0.0, x * scale) for x in grams)
