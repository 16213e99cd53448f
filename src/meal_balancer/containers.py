"""Dependency container wiring for the solver."""

from dataclasses import dataclass

from meal_balancer.app_logging import configure_logging
from meal_balancer.config import SolverSettings
from meal_balancer.services.solver import MealSolverService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: SolverSettings
    meal_solver: MealSolverService


def build_container(settings: SolverSettings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or SolverSettings()
    configure_logging()
    return AppContainer(
        settings=resolved_settings,
        meal_solver=MealSolverService(settings=resolved_settings),
    )
