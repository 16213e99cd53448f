"""Domain models for meal solving."""

from dataclasses import dataclass
from enum import Enum

from meal_balancer.domain.nutrition import FoodItem, MacroProfile


class Macro(str, Enum):
    """A macronutrient tracked by the solver."""

    CARBS = "carbs"
    PROTEIN = "protein"
    FAT = "fat"


class FoodCategory(str, Enum):
    """Dominant macro of a food by energy share."""

    PROTEIN = "protein"
    CARBS = "carbs"
    FAT = "fat"
    MIXED = "mixed"


@dataclass(frozen=True)
class CandidateEntry:
    """A food offered to the solver, optionally locked to fixed grams."""

    food: FoodItem
    fixed_grams: float | None = None

    @property
    def locked(self) -> bool:
        return self.fixed_grams is not None


@dataclass(frozen=True)
class CategoryPartition:
    """Free-entry indices grouped by food category."""

    protein: tuple[int, ...] = ()
    carbs: tuple[int, ...] = ()
    fat: tuple[int, ...] = ()
    mixed: tuple[int, ...] = ()

    def members(self, category: FoodCategory) -> tuple[int, ...]:
        """Return the indices assigned to a category."""
        return getattr(self, category.value)

    def category_for(self, macro: Macro) -> tuple[int, ...]:
        """Return the indices of foods dominated by a macro."""
        return getattr(self, macro.value)


@dataclass(frozen=True)
class SolvedItem:
    """Assigned quantity for one candidate."""

    food_id: str
    name: str
    grams: float
    locked: bool


@dataclass(frozen=True)
class CategoryTotals:
    """Count and grams of items contributing to one macro."""

    count: int
    total_grams: float


@dataclass(frozen=True)
class CategoryRollup:
    """Per-macro breakdown of a solved meal."""

    protein: CategoryTotals
    carbs: CategoryTotals
    fat: CategoryTotals


@dataclass(frozen=True)
class SolveResult:
    """Outcome of a meal solve."""

    success: bool
    items: tuple[SolvedItem, ...]
    actual: MacroProfile
    match_score: int
    precision_score: int
    message: str | None = None
    most_deficient_macro: Macro | None = None
    suggestions: tuple[str, ...] = ()
    category_rollup: CategoryRollup | None = None
