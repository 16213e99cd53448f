"""Shared test fixtures."""

import pytest

from meal_balancer.config import SolverSettings
from meal_balancer.domain.nutrition import FoodItem, MacroProfile, MealTarget
from meal_balancer.services.solver import MealSolverService


def make_food(
    food_id: str,
    name: str,
    carbs_g: float,
    protein_g: float,
    fat_g: float,
    calories: float | None = None,
) -> FoodItem:
    """Build a food from its composition per 100 g."""
    profile = MacroProfile(
        calories=calories or 0.0, carbs_g=carbs_g, protein_g=protein_g, fat_g=fat_g
    )
    if calories is None:
        profile = profile.with_derived_energy()
    return FoodItem(id=food_id, name=name, per_100g=profile)


RICE = make_food("rice", "Rice", carbs_g=28, protein_g=2.7, fat_g=0.3, calories=130)
PASTA = make_food("pasta", "Pasta", carbs_g=25, protein_g=5, fat_g=0.9, calories=131)
CHICKEN = make_food(
    "chicken", "Chicken breast", carbs_g=0, protein_g=31, fat_g=3.6, calories=165
)
TUNA = make_food("tuna", "Tuna", carbs_g=0, protein_g=30, fat_g=1, calories=132)
TURKEY = make_food("turkey", "Turkey", carbs_g=0, protein_g=29, fat_g=1.5)
COD = make_food("cod", "Cod", carbs_g=0, protein_g=18, fat_g=0.7)
OLIVE_OIL = make_food(
    "oil", "Extra virgin olive oil", carbs_g=0, protein_g=0, fat_g=100, calories=884
)
EGGS = make_food("eggs", "Eggs", carbs_g=1.1, protein_g=12.6, fat_g=9.5, calories=155)
CHEESE = make_food("cheese", "Cheese", carbs_g=0, protein_g=10, fat_g=20)
WATER = make_food("water", "Water", carbs_g=0, protein_g=0, fat_g=0)

BALANCED_TARGET = MealTarget(calories=600, carbs_g=60, protein_g=40, fat_g=20)


def macro_energy(profile: MacroProfile) -> float:
    return 4 * profile.carbs_g + 4 * profile.protein_g + 9 * profile.fat_g


@pytest.fixture
def settings() -> SolverSettings:
    return SolverSettings(debug=False)


@pytest.fixture
def solver_service(settings: SolverSettings) -> MealSolverService:
    return MealSolverService(settings=settings)
