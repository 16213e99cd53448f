"""Representative foods to propose when a macro is missing."""

from collections.abc import Iterable

from meal_balancer.domain.nutrition import FoodItem, MacroProfile
from meal_balancer.domain.solver import Macro

SUGGESTED_FOODS_BY_MACRO: dict[Macro, tuple[tuple[str, MacroProfile], ...]] = {
    Macro.CARBS: (
        ("Rice", MacroProfile(calories=130, carbs_g=28, protein_g=2.7, fat_g=0.3)),
        ("Pasta", MacroProfile(calories=131, carbs_g=25, protein_g=5, fat_g=0.9)),
        ("Potatoes", MacroProfile(calories=77, carbs_g=17, protein_g=2, fat_g=0.1)),
    ),
    Macro.PROTEIN: (
        (
            "Chicken breast",
            MacroProfile(calories=165, carbs_g=0, protein_g=31, fat_g=3.6),
        ),
        ("Tuna", MacroProfile(calories=132, carbs_g=0, protein_g=30, fat_g=1)),
        ("Eggs", MacroProfile(calories=155, carbs_g=1.1, protein_g=12.6, fat_g=9.5)),
    ),
    Macro.FAT: (
        (
            "Extra virgin olive oil",
            MacroProfile(calories=884, carbs_g=0, protein_g=0, fat_g=100),
        ),
        ("Avocado", MacroProfile(calories=160, carbs_g=8.5, protein_g=2, fat_g=15)),
    ),
}


def suggest_food_for_macro(
    macro: Macro | None, catalog: Iterable[FoodItem]
) -> FoodItem | None:
    """Return a food that supplies ``macro``, preferring one already in the catalog.

    Representatives are tried in order against catalog names with a
    case-insensitive substring match. When nothing matches, a stand-in is
    built from the first representative's composition.
    """
    if macro is None:
        return None
    options = SUGGESTED_FOODS_BY_MACRO.get(macro)
    if not options:
        return None
    known = list(catalog)
    for name, _ in options:
        needle = name.lower()
        for food in known:
            if needle in food.name.lower():
                return food
    name, composition = options[0]
    slug = "-".join(name.lower().split())
    return FoodItem(id=f"suggested-{macro.value}-{slug}", name=name, per_100g=composition)
