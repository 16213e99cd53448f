"""Nutrition domain models."""

import math
from dataclasses import dataclass, replace

KCAL_PER_GRAM_CARBS = 4.0
KCAL_PER_GRAM_PROTEIN = 4.0
KCAL_PER_GRAM_FAT = 9.0


def derived_energy(carbs_g: float, protein_g: float, fat_g: float) -> float:
    """Return kcal derived from macro grams."""
    return (
        KCAL_PER_GRAM_CARBS * carbs_g
        + KCAL_PER_GRAM_PROTEIN * protein_g
        + KCAL_PER_GRAM_FAT * fat_g
    )


@dataclass(frozen=True)
class MacroProfile:
    """Energy and macronutrient amounts."""

    calories: float
    carbs_g: float
    protein_g: float
    fat_g: float

    def with_derived_energy(self) -> "MacroProfile":
        """Return a copy whose calories are re-derived from the macros."""
        return replace(
            self, calories=derived_energy(self.carbs_g, self.protein_g, self.fat_g)
        )

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories + other.calories,
            carbs_g=self.carbs_g + other.carbs_g,
            protein_g=self.protein_g + other.protein_g,
            fat_g=self.fat_g + other.fat_g,
        )

    def __sub__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories - other.calories,
            carbs_g=self.carbs_g - other.carbs_g,
            protein_g=self.protein_g - other.protein_g,
            fat_g=self.fat_g - other.fat_g,
        )


ZERO_PROFILE = MacroProfile(0.0, 0.0, 0.0, 0.0)

# A meal target has the same shape as a macro profile.
MealTarget = MacroProfile


@dataclass(frozen=True)
class FoodItem:
    """A catalog food with its composition per 100 g."""

    id: str
    name: str
    per_100g: MacroProfile

    @property
    def energy_per_100g(self) -> float:
        """Energy per 100 g derived from the macros, ignoring stored calories."""
        return derived_energy(
            self.per_100g.carbs_g, self.per_100g.protein_g, self.per_100g.fat_g
        )


def portion_macros(food: FoodItem, grams: float) -> MacroProfile:
    """Return the macros of a portion, with energy derived from the macros."""
    if grams <= 0:
        return ZERO_PROFILE
    factor = grams / 100.0
    base = food.per_100g
    return MacroProfile(
        calories=food.energy_per_100g * factor,
        carbs_g=base.carbs_g * factor,
        protein_g=base.protein_g * factor,
        fat_g=base.fat_g * factor,
    )


def round_quantity(grams: float, step: float = 5.0) -> float:
    """Round grams half-up to the nearest step; non-positive grams become 0."""
    if grams <= 0:
        return 0.0
    return float(max(0, math.floor(grams / step + 0.5)) * step)


def target_from_macro_energy(
    carbs_kcal: float, protein_kcal: float, fat_kcal: float
) -> MealTarget:
    """Build a target from the energy assigned to each macro."""
    return MealTarget(
        calories=carbs_kcal + protein_kcal + fat_kcal,
        carbs_g=float(_round_half_up(carbs_kcal / KCAL_PER_GRAM_CARBS)),
        protein_g=float(_round_half_up(protein_kcal / KCAL_PER_GRAM_PROTEIN)),
        fat_g=float(_round_half_up(fat_kcal / KCAL_PER_GRAM_FAT)),
    )


def target_from_energy_split(
    calories: float, carbs_pct: float, protein_pct: float, fat_pct: float
) -> MealTarget:
    """Build a target from total energy and a percentage split per macro."""
    return target_from_macro_energy(
        calories * carbs_pct / 100.0,
        calories * protein_pct / 100.0,
        calories * fat_pct / 100.0,
    )


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
