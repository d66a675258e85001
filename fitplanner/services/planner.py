import enum
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..errors import InsufficientCatalog, InvalidProfile
from ..models import MAX_MEALS_PER_DAY, MIN_MEALS_PER_DAY, Meal

logger = logging.getLogger(__name__)


class AllergenPolicy(str, enum.Enum):
    """How a restriction keyword is matched against a meal's name and tags.

    SUBSTRING matches anywhere in the text, so "egg" also excludes
    "Eggplant". TOKEN only matches whole words.
    """
    SUBSTRING = "substring"
    TOKEN = "token"


def _meal_text(meal: Meal) -> str:
    return (meal.name + " " + " ".join(meal.tags)).lower()


def matches_allergen(meal: Meal, allergen: str, policy: AllergenPolicy = AllergenPolicy.SUBSTRING) -> bool:
    text = _meal_text(meal)
    if policy is AllergenPolicy.TOKEN:
        return re.search(r"\b" + re.escape(allergen) + r"\b", text) is not None
    return allergen in text


def filter_by_preference(meals: Iterable[Meal], pref: str) -> List[Meal]:
    return [m for m in meals if pref in m.tags]


def exclude_allergens(meals: Iterable[Meal], allergens: Sequence[str],
                      policy: AllergenPolicy = AllergenPolicy.SUBSTRING) -> List[Meal]:
    allergens = [a.strip().lower() for a in allergens if a and a.strip()]
    return [m for m in meals if not any(matches_allergen(m, a, policy) for a in allergens)]


def filter_meals(meals: Iterable[Meal], pref: str, allergens: Sequence[str] = (),
                 policy: AllergenPolicy = AllergenPolicy.SUBSTRING) -> List[Meal]:
    """Meals tagged with `pref` and free of every allergen, in catalog order."""
    selected = exclude_allergens(filter_by_preference(meals, pref), allergens, policy)
    logger.debug("filter_meals pref=%s allergens=%s -> %d meals", pref, list(allergens), len(selected))
    return selected


@dataclass(frozen=True)
class MacroTotals:
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0

    def to_dict(self) -> dict:
        return {"calories": self.calories, "protein": self.protein,
                "carbs": self.carbs, "fat": self.fat}


def _totals(picks: Sequence[Meal]) -> MacroTotals:
    return MacroTotals(
        calories=sum(m.calories for m in picks),
        protein=sum(m.protein for m in picks),
        carbs=sum(m.carbs for m in picks),
        fat=sum(m.fat for m in picks),
    )


@dataclass(frozen=True)
class MealPlan:
    meals: Tuple[Meal, ...]
    per_meal_target: float
    totals: MacroTotals

    def macro_breakdown(self) -> List[Tuple[str, float]]:
        return [
            ("Protein (g)", self.totals.protein),
            ("Carbs (g)", self.totals.carbs),
            ("Fat (g)", self.totals.fat),
        ]

    def to_dict(self) -> dict:
        return {
            "meals": [m.to_dict() for m in self.meals],
            "per_meal_target": self.per_meal_target,
            "totals": self.totals.to_dict(),
        }


def build_meal_plan(meals: Sequence[Meal], total_calories: float, meals_per_day: int) -> MealPlan:
    """Pick `meals_per_day` meals whose calories sit closest to an equal share of the day.

    Greedy and without replacement: each round takes the pool meal nearest
    to the per-meal share (first one wins a tie) and removes it from the pool.
    """
    if not MIN_MEALS_PER_DAY <= meals_per_day <= MAX_MEALS_PER_DAY:
        raise InvalidProfile(
            "meals_per_day", f"must be between {MIN_MEALS_PER_DAY} and {MAX_MEALS_PER_DAY}"
        )
    if len(meals) < meals_per_day:
        raise InsufficientCatalog(available=len(meals), requested=meals_per_day)

    per_meal = total_calories / meals_per_day
    pool = list(meals)
    picks: List[Meal] = []
    for _ in range(meals_per_day):
        best = min(range(len(pool)), key=lambda j: abs(pool[j].calories - per_meal))
        picks.append(pool.pop(best))
    return MealPlan(meals=tuple(picks), per_meal_target=per_meal, totals=_totals(picks))
