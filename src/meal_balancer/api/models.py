"""Pydantic models for solver requests and responses."""

from pydantic import BaseModel, Field

from meal_balancer.domain.nutrition import FoodItem, MacroProfile, MealTarget
from meal_balancer.domain.solver import CandidateEntry, Macro, SolveResult


class MealTargetPayload(BaseModel):
    """Target energy and macros for one meal."""

    calories: float = Field(ge=0.0)
    carbs_g: float = Field(ge=0.0)
    protein_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)

    def to_domain(self) -> MealTarget:
        return MealTarget(
            calories=self.calories,
            carbs_g=self.carbs_g,
            protein_g=self.protein_g,
            fat_g=self.fat_g,
        )


class FoodPayload(BaseModel):
    """Catalog food with composition per 100 g."""

    id: str
    name: str
    carbs_g: float = Field(ge=0.0)
    protein_g: float = Field(ge=0.0)
    fat_g: float = Field(ge=0.0)
    calories: float | None = Field(default=None, ge=0.0)

    def to_domain(self) -> FoodItem:
        profile = MacroProfile(
            calories=self.calories or 0.0,
            carbs_g=self.carbs_g,
            protein_g=self.protein_g,
            fat_g=self.fat_g,
        )
        if self.calories is None:
            profile = profile.with_derived_energy()
        return FoodItem(id=self.id, name=self.name, per_100g=profile)


class CandidatePayload(BaseModel):
    """Food offered to the solver, optionally with fixed grams."""

    food: FoodPayload
    fixed_grams: float | None = Field(default=None, ge=0.0)

    def to_domain(self) -> CandidateEntry:
        return CandidateEntry(food=self.food.to_domain(), fixed_grams=self.fixed_grams)


class SolveRequest(BaseModel):
    """Request to balance one meal."""

    target: MealTargetPayload
    candidates: list[CandidatePayload]

    def to_domain(self) -> tuple[MealTarget, list[CandidateEntry]]:
        return (
            self.target.to_domain(),
            [candidate.to_domain() for candidate in self.candidates],
        )


class SuggestionRequest(BaseModel):
    """Request for a food that covers a missing macro."""

    macro: Macro | None = None
    catalog: list[FoodPayload] = Field(default_factory=list)

    def to_domain(self) -> tuple[Macro | None, list[FoodItem]]:
        return self.macro, [food.to_domain() for food in self.catalog]


class SolvedItemPayload(BaseModel):
    food_id: str
    name: str
    grams: float
    locked: bool


class CategoryTotalsPayload(BaseModel):
    count: int
    total_grams: float


class CategoryRollupPayload(BaseModel):
    protein: CategoryTotalsPayload
    carbs: CategoryTotalsPayload
    fat: CategoryTotalsPayload


class SolveResponse(BaseModel):
    """Solver outcome as plain data."""

    success: bool
    items: list[SolvedItemPayload]
    actual: MealTargetPayload
    match_score: int = Field(ge=0, le=100)
    precision_score: int = Field(ge=0, le=100)
    message: str | None = None
    most_deficient_macro: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    category_rollup: CategoryRollupPayload | None = None

    @classmethod
    def from_result(cls, result: SolveResult) -> "SolveResponse":
        rollup = result.category_rollup
        return cls(
            success=result.success,
            items=[
                SolvedItemPayload(
                    food_id=item.food_id,
                    name=item.name,
                    grams=item.grams,
                    locked=item.locked,
                )
                for item in result.items
            ],
            actual=MealTargetPayload(
                calories=result.actual.calories,
                carbs_g=result.actual.carbs_g,
                protein_g=result.actual.protein_g,
                fat_g=result.actual.fat_g,
            ),
            match_score=result.match_score,
            precision_score=result.precision_score,
            message=result.message,
            most_deficient_macro=(
                result.most_deficient_macro.value
                if result.most_deficient_macro
                else None
            ),
            suggestions=list(result.suggestions),
            category_rollup=(
                CategoryRollupPayload(
                    protein=CategoryTotalsPayload(
                        count=rollup.protein.count,
                        total_grams=rollup.protein.total_grams,
                    ),
                    carbs=CategoryTotalsPayload(
                        count=rollup.carbs.count, total_grams=rollup.carbs.total_grams
                    ),
                    fat=CategoryTotalsPayload(
                        count=rollup.fat.count, total_grams=rollup.fat.total_grams
                    ),
                )
                if rollup
                else None
            ),
        )
