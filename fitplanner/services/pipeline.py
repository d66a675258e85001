"""Profile in, complete plan out."""
import logging
from dataclasses import dataclass
from typing import Tuple

from ..models import Profile
from .catalog_loader import Catalog
from .macros import CalorieTargets, daily_calorie_target
from .planner import AllergenPolicy, MealPlan, build_meal_plan, filter_meals
from .workouts import WorkoutSelection, select_workouts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanResult:
    profile: Profile
    targets: CalorieTargets
    meal_plan: MealPlan
    workouts: WorkoutSelection
    allergens: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "profile": self.profile.as_form(),
            "metrics": self.targets.to_dict(),
            "allergens": list(self.allergens),
            "meal_plan": self.meal_plan.to_dict(),
            "workouts": self.workouts.to_dict(),
        }


class FitnessPlanner:
    """Runs the calorie, meal and workout steps against one injected catalog."""

    def __init__(self, catalog: Catalog, allergen_policy: AllergenPolicy = AllergenPolicy.SUBSTRING):
        self.catalog = catalog
        self.allergen_policy = AllergenPolicy(allergen_policy)

    def targets(self, profile: Profile) -> CalorieTargets:
        return daily_calorie_target(
            sex=profile.sex,
            age=profile.age,
            height_cm=profile.height_cm,
            weight_kg=profile.weight_kg,
            activity=profile.activity,
            target_weight_kg=profile.target_weight_kg,
            weeks=profile.weeks,
            goal=profile.goal,
        )

    def plan(self, profile: Profile) -> PlanResult:
        """Raises InsufficientCatalog when too few meals survive the filters."""
        targets = self.targets(profile)
        allergens = tuple(profile.allergens)
        pool = filter_meals(self.catalog.meals, profile.diet_pref, allergens, self.allergen_policy)
        meal_plan = build_meal_plan(pool, targets.target_calories, profile.meals_per_day)
        workouts = select_workouts(self.catalog.workouts, profile.goal, profile.weeks)
        logger.debug(
            "planned target=%d kcal meals=%d workouts=%d (tier=%s)",
            targets.target_calories, len(meal_plan.meals), len(workouts.plans), workouts.tier,
        )
        return PlanResult(
            profile=profile,
            targets=targets,
            meal_plan=meal_plan,
            workouts=workouts,
            allergens=allergens,
        )
