"""Entry points for callers that exchange plain mappings."""

from collections.abc import Mapping

from meal_balancer.api.models import SolveRequest, SolveResponse, SuggestionRequest
from meal_balancer.domain.nutrition import FoodItem
from meal_balancer.services.solver import MealSolverService


def handle_solve(service: MealSolverService, payload: Mapping[str, object]) -> SolveResponse:
    """Validate a raw request, solve it and return the response model.

    Raises ``pydantic.ValidationError`` for malformed or negative input.
    """
    request = SolveRequest.model_validate(payload)
    target, candidates = request.to_domain()
    return SolveResponse.from_result(service.solve(target, candidates))


def handle_suggestion(
    service: MealSolverService,
    macro: str | None,
    catalog: list[Mapping[str, object]],
) -> FoodItem | None:
    """Return a food to add for a missing macro named by its value.

    Raises ``pydantic.ValidationError`` for an unknown macro or a bad catalog entry.
    """
    request = SuggestionRequest.model_validate({"macro": macro or None, "catalog": catalog})
    missing, foods = request.to_domain()
    return service.suggest(missing, foods)
