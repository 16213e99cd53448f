"""Tests for food classification."""

from meal_balancer.domain.solver import CategoryPartition, FoodCategory
from meal_balancer.services.classifier import classify_food, classify_foods
from tests.conftest import CHICKEN, EGGS, OLIVE_OIL, PASTA, RICE, WATER


def test_classify_food_by_dominant_energy_share() -> None:
    assert classify_food(RICE) is FoodCategory.CARBS
    assert classify_food(CHICKEN) is FoodCategory.PROTEIN
    assert classify_food(OLIVE_OIL) is FoodCategory.FAT
    assert classify_food(EGGS) is FoodCategory.FAT


def test_food_without_energy_is_mixed() -> None:
    assert classify_food(WATER) is FoodCategory.MIXED


def test_classify_foods_partitions_every_index_once() -> None:
    foods = [RICE, CHICKEN, PASTA, OLIVE_OIL, WATER]

    partition = classify_foods(foods)

    assert partition == CategoryPartition(
        protein=(1,), carbs=(0, 2), fat=(3,), mixed=(4,)
    )
    indices = sorted(
        index for category in FoodCategory for index in partition.members(category)
    )
    assert indices == list(range(len(foods)))
