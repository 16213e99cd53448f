"""Food classification by dominant macro."""

from collections.abc import Sequence

from meal_balancer.domain.nutrition import (
    KCAL_PER_GRAM_CARBS,
    KCAL_PER_GRAM_FAT,
    KCAL_PER_GRAM_PROTEIN,
    FoodItem,
)
from meal_balancer.domain.solver import CategoryPartition, FoodCategory, Macro

MACRO_CLASSIFICATION_THRESHOLD = 0.2


def energy_shares(food: FoodItem) -> dict[Macro, float]:
    """Return the share of derived energy contributed by each macro."""
    base = food.per_100g
    total = max(food.energy_per_100g, 1.0)
    return {
        Macro.CARBS: base.carbs_g * KCAL_PER_GRAM_CARBS / total,
        Macro.PROTEIN: base.protein_g * KCAL_PER_GRAM_PROTEIN / total,
        Macro.FAT: base.fat_g * KCAL_PER_GRAM_FAT / total,
    }


def classify_food(food: FoodItem) -> FoodCategory:
    """Return the category of a single food."""
    shares = energy_shares(food)
    top = max(shares.values())
    if top < MACRO_CLASSIFICATION_THRESHOLD:
        return FoodCategory.MIXED
    if shares[Macro.PROTEIN] == top:
        return FoodCategory.PROTEIN
    if shares[Macro.CARBS] == top:
        return FoodCategory.CARBS
    return FoodCategory.FAT


def classify_foods(foods: Sequence[FoodItem]) -> CategoryPartition:
    """Partition food indices by dominant macro."""
    groups: dict[FoodCategory, list[int]] = {category: [] for category in FoodCategory}
    for index, food in enumerate(foods):
        groups[classify_food(food)].append(index)
    return CategoryPartition(
        protein=tuple(groups[FoodCategory.PROTEIN]),
        carbs=tuple(groups[FoodCategory.CARBS]),
        fat=tuple(groups[FoodCategory.FAT]),
        mixed=tuple(groups[FoodCategory.MIXED]),
    )
