"""Heuristic refinement passes applied after the least squares solve.

Every pass takes the free-food gram vector as a tuple and returns a new one.
A pass leaves its input untouched when the target has no energy or when the
precision thresholds are already met, so re-running a pass on a converged
solution is a no-op.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from meal_balancer.domain.nutrition import (
    FoodItem,
    MacroProfile,
    MealTarget,
    portion_macros,
    round_quantity,
)
from meal_balancer.domain.solver import CategoryPartition, Macro
from meal_balancer.services.scoring import (
    ENERGY_PRECISION_THRESHOLD,
    MACRO_PRECISION_THRESHOLD,
    closeness,
    macro_grams,
    needs_improvement,
    precision,
)

Grams = tuple[float, ...]
RefinementPass = Callable[["RefinementContext", Grams], Grams]

ENERGY_TOLERANCE = 0.02
REFINE_SCALE_BOUNDS = (0.7, 1.5)
AGGRESSIVE_SCALE_BOUNDS = (0.5, 2.0)
REINTRODUCE_GRAMS = 10.0
CARB_STEP_GRAMS = 10.0
SWAP_MIN_GRAMS = 5.0
SWAP_MAX_REDUCE_GRAMS = 30.0
SWAP_MAX_ADD_GRAMS = 60.0
NUDGE_GRAMS = 5.0


@dataclass(frozen=True)
class RefinementContext:
    """Fixed inputs shared by the refinement passes."""

    foods: tuple[FoodItem, ...]
    partition: CategoryPartition
    target: MealTarget
    locked_totals: MacroProfile
    round_step: float = 5.0

    def totals(self, grams: Sequence[float]) -> MacroProfile:
        """Return locked totals plus the totals of the free foods."""
        total = self.locked_totals
        for food, quantity in zip(self.foods, grams, strict=True):
            total = total + portion_macros(food, quantity)
        return total

    def round(self, grams: float) -> float:
        return round_quantity(grams, self.round_step)

    def round_all(self, grams: Sequence[float]) -> Grams:
        return tuple(self.round(quantity) for quantity in grams)

    def settled(self, grams: Sequence[float]) -> bool:
        """Return True when there is nothing left for a pass to do."""
        if self.target.calories <= 0:
            return True
        return not needs_improvement(precision(self.target, self.totals(grams)))


def correct_energy_within_tolerance(context: RefinementContext, grams: Grams) -> Grams:
    """Rescale free foods until energy is within 2% of target."""
    if context.settled(grams):
        return grams
    scaled = _scale_toward_energy(
        context,
        grams,
        iterations=4,
        under_bias=1.005,
        bounds=REFINE_SCALE_BOUNDS,
        done=lambda actual: _within_tolerance(context.target, actual),
    )
    return context.round_all(scaled)


def reintroduce_starved_macros(context: RefinementContext, grams: Grams) -> Grams:
    """Bring back near-zero foods for macros that are short of target."""
    if context.settled(grams):
        return grams
    target = context.target
    quantities = list(grams)
    for macro in (Macro.FAT, Macro.CARBS, Macro.PROTEIN):
        goal = macro_grams(target, macro)
        if goal < 1:
            continue
        if goal - macro_grams(context.totals(quantities), macro) < 1:
            continue
        for index in context.partition.category_for(macro):
            if quantities[index] >= REINTRODUCE_GRAMS:
                continue
            quantities[index] = context.round(quantities[index] + REINTRODUCE_GRAMS)
            after = context.totals(quantities)
            if after.calories <= 0:
                break
            scale = _clamp(target.calories / after.calories, REFINE_SCALE_BOUNDS)
            quantities = [context.round(q * scale) for q in quantities]
            break

    settled = _scale_toward_energy(
        context,
        tuple(quantities),
        iterations=3,
        under_bias=1.0,
        bounds=REFINE_SCALE_BOUNDS,
        done=lambda actual: _within_tolerance(target, actual),
    )
    return context.round_all(settled)


def correct_energy_aggressively(context: RefinementContext, grams: Grams) -> Grams:
    """Rescale free foods with wider bounds until energy precision reaches 95."""
    if context.settled(grams):
        return grams
    target = context.target
    scaled = _scale_toward_energy(
        context,
        grams,
        iterations=8,
        under_bias=1.008,
        bounds=AGGRESSIVE_SCALE_BOUNDS,
        done=lambda actual: closeness(actual.calories, target.calories)
        >= ENERGY_PRECISION_THRESHOLD,
    )
    return context.round_all(scaled)


def correct_carbohydrate_and_energy(context: RefinementContext, grams: Grams) -> Grams:
    """Grow the best carbohydrate source while both carbs and energy are short."""
    target = context.target
    carb_sources = context.partition.carbs
    if context.settled(grams) or target.carbs_g < 1 or not carb_sources:
        return grams

    quantities = list(grams)
    best = _richest(
        context,
        carb_sources,
        lambda food: food.per_100g.carbs_g * 0.4 + food.energy_per_100g / 100.0 * 0.6,
    )
    for _ in range(12):
        actual = context.totals(quantities)
        current = precision(target, actual)
        if (
            current.calories >= ENERGY_PRECISION_THRESHOLD
            and current.carbs >= MACRO_PRECISION_THRESHOLD
        ):
            break
        under_energy = actual.calories < target.calories - 10
        under_carbs = actual.carbs_g < target.carbs_g - 2
        if not under_energy and not under_carbs:
            break
        if under_energy and under_carbs:
            quantities[best] = context.round(quantities[best] + CARB_STEP_GRAMS)

        after = context.totals(quantities)
        if after.calories <= 0:
            break
        if after.calories < target.calories - 5:
            scale = min(target.calories / after.calories, AGGRESSIVE_SCALE_BOUNDS[1])
            quantities = [q * scale for q in quantities]
    return context.round_all(quantities)


def swap_compensated_macros(context: RefinementContext, grams: Grams) -> Grams:
    """Trade grams between an over-target and an under-target macro at equal energy."""
    if context.settled(grams):
        return grams
    target = context.target
    quantities = list(grams)
    order = (Macro.FAT, Macro.CARBS, Macro.PROTEIN)
    for over in order:
        for under in order:
            if over == under:
                continue
            goal_over = macro_grams(target, over)
            goal_under = macro_grams(target, under)
            if goal_over < 1 or goal_under < 1:
                continue
            actual = context.totals(quantities)
            excess = macro_grams(actual, over) - goal_over
            deficit = goal_under - macro_grams(actual, under)
            if excess < 0.5 or deficit < 0.5:
                continue

            donor = _densest(
                context,
                context.partition.category_for(over),
                _macro_density(over),
                eligible=lambda index: quantities[index] >= SWAP_MIN_GRAMS,
            )
            receiver = _densest(
                context,
                context.partition.category_for(under),
                lambda food: food.energy_per_100g / 100.0,
            )
            if donor is None or receiver is None or donor == receiver:
                continue

            donor_food = context.foods[donor]
            density = macro_grams(donor_food.per_100g, over)
            to_remove = excess * 100.0 / density if density > 0 else 0.0
            reduce = min(
                max(SWAP_MIN_GRAMS, context.round(to_remove) or SWAP_MIN_GRAMS),
                quantities[donor],
                SWAP_MAX_REDUCE_GRAMS,
            )
            if reduce < SWAP_MIN_GRAMS:
                continue
            energy_to_replace = reduce / 100.0 * donor_food.energy_per_100g
            add_raw = (
                energy_to_replace
                * 100.0
                / max(1.0, context.foods[receiver].energy_per_100g)
            )
            add = context.round(min(add_raw, SWAP_MAX_ADD_GRAMS))
            if add < SWAP_MIN_GRAMS:
                continue

            quantities[donor] = context.round(max(0.0, quantities[donor] - reduce))
            quantities[receiver] = context.round(quantities[receiver] + add)
    return tuple(quantities)


def nudge_macros(context: RefinementContext, grams: Grams) -> Grams:
    """Nudge each imprecise macro by a few grams, then restore energy."""
    if context.settled(grams):
        return grams
    target = context.target
    quantities = list(grams)
    for macro in (Macro.CARBS, Macro.PROTEIN, Macro.FAT):
        actual = context.totals(quantities)
        if precision(target, actual).for_macro(macro) >= MACRO_PRECISION_THRESHOLD:
            continue
        goal = macro_grams(target, macro)
        if goal < 1:
            continue
        members = context.partition.category_for(macro)
        if not members:
            continue

        value = macro_grams(actual, macro)
        if value < goal - 0.5:
            index = _richest(context, members, _macro_density(macro))
            quantities[index] = context.round(quantities[index] + NUDGE_GRAMS)
        elif value > goal + 0.5:
            index = _richest(
                context,
                members,
                _macro_density(macro),
                eligible=lambda i: quantities[i] >= NUDGE_GRAMS,
            )
            if quantities[index] < NUDGE_GRAMS:
                continue
            quantities[index] = context.round(max(0.0, quantities[index] - NUDGE_GRAMS))

        after = context.totals(quantities)
        if after.calories <= 0:
            continue
        # Scale up only when energy was not already short before the nudge.
        was_under = actual.calories < target.calories - 5
        if after.calories > target.calories:
            scale = _clamp(target.calories / after.calories, AGGRESSIVE_SCALE_BOUNDS)
            quantities = [context.round(q * scale) for q in quantities]
        elif not was_under and after.calories < target.calories - 5:
            scale = min(target.calories / after.calories, AGGRESSIVE_SCALE_BOUNDS[1])
            quantities = [context.round(q * scale) for q in quantities]
    return tuple(quantities)


REFINEMENT_PASSES: tuple[RefinementPass, ...] = (
    correct_energy_within_tolerance,
    reintroduce_starved_macros,
    correct_energy_aggressively,
    correct_carbohydrate_and_energy,
    swap_compensated_macros,
    nudge_macros,
)


def refine(context: RefinementContext, grams: Grams) -> Grams:
    """Run the passes in order, stopping as soon as the thresholds are met."""
    for refinement_pass in REFINEMENT_PASSES:
        if context.settled(grams):
            break
        grams = refinement_pass(context, grams)
    return grams


def _scale_toward_energy(
    context: RefinementContext,
    grams: Sequence[float],
    *,
    iterations: int,
    under_bias: float,
    bounds: tuple[float, float],
    done: Callable[[MacroProfile], bool],
) -> list[float]:
    target = context.target.calories
    quantities = list(grams)
    for _ in range(iterations):
        actual = context.totals(quantities)
        if done(actual) or actual.calories <= 0:
            break
        scale = target / actual.calories
        if actual.calories < target:
            scale *= under_bias
        scale = _clamp(scale, bounds)
        quantities = [q * scale for q in quantities]
    return quantities


def _within_tolerance(target: MealTarget, actual: MacroProfile) -> bool:
    return abs(actual.calories - target.calories) / target.calories <= ENERGY_TOLERANCE


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    return max(bounds[0], min(bounds[1], value))


def _richest(
    context: RefinementContext,
    members: Sequence[int],
    score: Callable[[FoodItem], float],
    eligible: Callable[[int], bool] | None = None,
) -> int:
    """Return the eligible member with the highest positive score, else the first."""
    best = members[0]
    best_score = 0.0
    for index in members:
        if eligible is not None and not eligible(index):
            continue
        value = score(context.foods[index])
        if value > best_score:
            best_score = value
            best = index
    return best


def _densest(
    context: RefinementContext,
    members: Sequence[int],
    density: Callable[[FoodItem], float],
    eligible: Callable[[int], bool] | None = None,
) -> int | None:
    """Return the eligible member with the highest positive density, if any."""
    best: int | None = None
    best_density = 0.0
    for index in members:
        if eligible is not None and not eligible(index):
            continue
        value = density(context.foods[index])
        if value > best_density:
            best_density = value
            best = index
    return best


def _macro_density(macro: Macro) -> Callable[[FoodItem], float]:
    return lambda food: macro_grams(food.per_100g, macro)
