"""Meal solver entry point and application service."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from meal_balancer.config import SolverSettings
from meal_balancer.domain.nutrition import (
    ZERO_PROFILE,
    FoodItem,
    MacroProfile,
    MealTarget,
    portion_macros,
    round_quantity,
)
from meal_balancer.domain.solver import (
    CandidateEntry,
    Macro,
    SolvedItem,
    SolveResult,
)
from meal_balancer.services.classifier import classify_foods
from meal_balancer.services.feasibility import check_feasibility
from meal_balancer.services.optimizer import distribute
from meal_balancer.services.refinement import RefinementContext, refine
from meal_balancer.services.scoring import (
    UNBALANCED_SCORE,
    category_rollup,
    match_score,
    most_deficient_macro,
)
from meal_balancer.services.suggestions import suggest_food_for_macro

# Locked foods may exceed a target component by this much before it counts as overflow.
OVERFLOW_TOLERANCE = 0.01

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealComposition:
    """Candidates split once into locked and free entries."""

    candidates: tuple[CandidateEntry, ...]
    locked_positions: tuple[int, ...]
    locked_grams: tuple[float, ...]
    free_positions: tuple[int, ...]

    @classmethod
    def split(
        cls, candidates: Sequence[CandidateEntry], round_step: float
    ) -> "MealComposition":
        locked_positions: list[int] = []
        locked_grams: list[float] = []
        free_positions: list[int] = []
        for position, entry in enumerate(candidates):
            if entry.fixed_grams is None:
                free_positions.append(position)
                continue
            locked_positions.append(position)
            locked_grams.append(round_quantity(entry.fixed_grams, round_step))
        return cls(
            candidates=tuple(candidates),
            locked_positions=tuple(locked_positions),
            locked_grams=tuple(locked_grams),
            free_positions=tuple(free_positions),
        )

    @property
    def free_foods(self) -> tuple[FoodItem, ...]:
        return tuple(self.candidates[i].food for i in self.free_positions)

    @property
    def locked_totals(self) -> MacroProfile:
        total = ZERO_PROFILE
        for position, grams in zip(self.locked_positions, self.locked_grams, strict=True):
            total = total + portion_macros(self.candidates[position].food, grams)
        return total

    def assemble(self, free_grams: Sequence[float] | None = None) -> list[float]:
        """Return grams in candidate order; free entries default to 0."""
        grams = [0.0] * len(self.candidates)
        for position, value in zip(self.locked_positions, self.locked_grams, strict=True):
            grams[position] = value
        if free_grams is not None:
            for position, value in zip(self.free_positions, free_grams, strict=True):
                grams[position] = value
        return grams

    def totals(self, grams: Sequence[float]) -> MacroProfile:
        total = ZERO_PROFILE
        for entry, value in zip(self.candidates, grams, strict=True):
            total = total + portion_macros(entry.food, value)
        return total

    def items(self, grams: Sequence[float]) -> tuple[SolvedItem, ...]:
        return tuple(
            SolvedItem(
                food_id=entry.food.id,
                name=entry.food.name,
                grams=value,
                locked=entry.locked,
            )
            for entry, value in zip(self.candidates, grams, strict=True)
        )


def solve_meal(
    target: MealTarget,
    candidates: Sequence[CandidateEntry],
    settings: SolverSettings | None = None,
) -> SolveResult:
    """Assign grams to candidate foods so the meal totals approach the target.

    Failures are returned as results with ``success=False``; nothing is raised
    for unsolvable inputs.
    """
    resolved = settings or SolverSettings()
    if not candidates:
        return SolveResult(
            success=False,
            items=(),
            actual=ZERO_PROFILE,
            match_score=0,
            precision_score=0,
            message="Add at least one food.",
        )

    composition = MealComposition.split(candidates, resolved.round_step)
    foods = [entry.food for entry in composition.candidates]

    if not composition.free_positions:
        grams = composition.assemble()
        return _evaluated(composition, target, grams, foods)

    free_foods = composition.free_foods
    partition = classify_foods(free_foods)
    feasibility = check_feasibility(free_foods, target, partition)
    if not feasibility.is_feasible:
        grams = composition.assemble()
        return SolveResult(
            success=False,
            items=composition.items(grams),
            actual=composition.totals(grams),
            match_score=0,
            precision_score=0,
            message=" ".join(feasibility.warnings).strip(),
            suggestions=feasibility.suggestions,
        )

    locked_totals = composition.locked_totals
    remaining = target - locked_totals
    exceeded = [
        label
        for label, value in (
            ("energy", remaining.calories),
            ("carbohydrate", remaining.carbs_g),
            ("protein", remaining.protein_g),
            ("fat", remaining.fat_g),
        )
        if value < -OVERFLOW_TOLERANCE
    ]
    if exceeded:
        grams = composition.assemble()
        actual = composition.totals(grams)
        score = match_score(target, actual)
        return SolveResult(
            success=False,
            items=composition.items(grams),
            actual=actual,
            match_score=score,
            precision_score=score,
            message=(
                f"The fixed foods already exceed the {', '.join(exceeded)} target. "
                "The other foods were set to 0 g."
            ),
            suggestions=("Reduce the fixed quantities or raise the meal target.",),
        )

    context = RefinementContext(
        foods=free_foods,
        partition=partition,
        target=target,
        locked_totals=locked_totals,
        round_step=resolved.round_step,
    )
    free_grams = context.round_all(distribute(free_foods, remaining, partition, resolved))
    free_grams = refine(context, free_grams)
    grams = composition.assemble(free_grams)
    return _evaluated(
        composition,
        target,
        grams,
        foods,
        warnings=feasibility.warnings,
        suggestions=feasibility.suggestions,
    )


def _evaluated(
    composition: MealComposition,
    target: MealTarget,
    grams: list[float],
    foods: list[FoodItem],
    warnings: tuple[str, ...] = (),
    suggestions: tuple[str, ...] = (),
) -> SolveResult:
    actual = composition.totals(grams)
    score = match_score(target, actual)
    parts = [" ".join(warnings).strip()] if warnings else []
    missing: Macro | None = None
    if score < UNBALANCED_SCORE:
        parts.append(f"Unbalanced composition (match score: {score}%).")
        missing = most_deficient_macro(target, actual)
    return SolveResult(
        success=True,
        items=composition.items(grams),
        actual=actual,
        match_score=score,
        precision_score=score,
        message=" ".join(parts) or None,
        most_deficient_macro=missing,
        suggestions=suggestions,
        category_rollup=category_rollup(foods, grams),
    )


@dataclass
class MealSolverService:
    """Application service around the meal solver."""

    settings: SolverSettings = field(default_factory=SolverSettings)

    def solve(
        self, target: MealTarget, candidates: Sequence[CandidateEntry]
    ) -> SolveResult:
        """Solve a meal and log a summary when debugging."""
        result = solve_meal(target, candidates, self.settings)
        if self.settings.debug:
            _logger.info(
                "Meal solve: candidates=%s locked=%s success=%s score=%s missing=%s",
                len(candidates),
                sum(1 for entry in candidates if entry.locked),
                result.success,
                result.match_score,
                result.most_deficient_macro.value if result.most_deficient_macro else None,
            )
        if self.settings.debug and not result.success:
            _logger.warning("Meal solve failed: %s", result.message)
        return result

    def suggest(self, macro: Macro | None, catalog: Iterable[FoodItem]) -> FoodItem | None:
        """Return a food to add for a missing macro."""
        suggestion = suggest_food_for_macro(macro, catalog)
        if self.settings.debug and suggestion is not None:
            _logger.info("Meal suggestion: macro=%s food=%s", macro, suggestion.id)
        return suggestion
