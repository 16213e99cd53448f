"""Tests for request and response models."""

import pytest
from pydantic import ValidationError

from meal_balancer.api.handlers import handle_solve, handle_suggestion
from meal_balancer.api.models import FoodPayload, SolveRequest, SuggestionRequest
from meal_balancer.domain.solver import Macro
from meal_balancer.services.solver import MealSolverService


def _request() -> dict[str, object]:
    return {
        "target": {"calories": 600, "carbs_g": 60, "protein_g": 40, "fat_g": 20},
        "candidates": [
            {"food": {"id": "rice", "name": "Rice", "carbs_g": 28, "protein_g": 2.7, "fat_g": 0.3}},
            {
                "food": {"id": "chicken", "name": "Chicken", "carbs_g": 0, "protein_g": 31, "fat_g": 3.6},
                "fixed_grams": 100,
            },
            {"food": {"id": "oil", "name": "Olive oil", "carbs_g": 0, "protein_g": 0, "fat_g": 100}},
        ],
    }


def test_food_payload_derives_missing_calories() -> None:
    food = FoodPayload(id="x", name="X", carbs_g=10, protein_g=5, fat_g=2).to_domain()

    assert food.per_100g.calories == 78


def test_food_payload_keeps_stored_calories() -> None:
    food = FoodPayload(
        id="rice", name="Rice", carbs_g=28, protein_g=2.7, fat_g=0.3, calories=130
    ).to_domain()

    assert food.per_100g.calories == 130
    assert food.energy_per_100g == pytest.approx(125.5)


def test_request_converts_to_domain() -> None:
    target, candidates = SolveRequest.model_validate(_request()).to_domain()

    assert target.calories == 600
    assert [c.locked for c in candidates] == [False, True, False]
    assert candidates[1].fixed_grams == 100


def test_negative_values_are_rejected() -> None:
    payload = _request()
    payload["target"] = {"calories": -1, "carbs_g": 60, "protein_g": 40, "fat_g": 20}

    with pytest.raises(ValidationError):
        SolveRequest.model_validate(payload)


def test_negative_fixed_grams_are_rejected(solver_service: MealSolverService) -> None:
    payload = _request()
    payload["candidates"][1]["fixed_grams"] = -5

    with pytest.raises(ValidationError):
        handle_solve(solver_service, payload)


def test_handle_solve_returns_response(solver_service: MealSolverService) -> None:
    response = handle_solve(solver_service, _request())

    assert response.success
    assert [item.food_id for item in response.items] == ["rice", "chicken", "oil"]
    assert response.items[1].grams == 100
    assert response.items[1].locked
    assert response.category_rollup is not None
    dumped = response.model_dump()
    assert dumped["actual"]["calories"] == pytest.approx(response.actual.calories)


def test_handle_suggestion_uses_catalog(solver_service: MealSolverService) -> None:
    catalog = [{"id": "p1", "name": "Whole wheat pasta", "carbs_g": 25, "protein_g": 5, "fat_g": 1}]

    food = handle_suggestion(solver_service, "carbs", catalog)

    assert food is not None
    assert food.id == "p1"


def test_handle_suggestion_without_macro(solver_service: MealSolverService) -> None:
    assert handle_suggestion(solver_service, None, []) is None


def test_handle_suggestion_rejects_unknown_macro(solver_service: MealSolverService) -> None:
    with pytest.raises(ValidationError):
        handle_suggestion(solver_service, "sugar", [])


def test_suggestion_request_parses_macro_value() -> None:
    oil = {"id": "oil", "name": "Olive oil", "carbs_g": 0, "protein_g": 0, "fat_g": 100}
    request = SuggestionRequest.model_validate({"macro": "fat", "catalog": [oil]})

    macro, foods = request.to_domain()
    assert macro is Macro.FAT
    assert foods[0].per_100g.calories == 900
