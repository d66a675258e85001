from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..models import WorkoutPlan

# Catalog tag for goals that are stored under a different name
GOAL_ALIASES = {"maintain": "general_fitness"}


def experience_level(weeks: float) -> str:
    if weeks <= 8:
        return "beginner"
    if weeks <= 20:
        return "intermediate"
    return "advanced"


def normalize_goal(goal: str) -> str:
    return GOAL_ALIASES.get(goal, goal)


def fallback_tiers(goal: str, level: str) -> List[Tuple[str, Callable[[WorkoutPlan], bool]]]:
    """Named predicates in the order they are tried; the last one accepts everything."""
    return [
        ("goal_and_level", lambda w: w.goal == goal and w.level == level),
        ("goal", lambda w: w.goal == goal),
        ("level", lambda w: w.level == level),
        ("all", lambda w: True),
    ]


@dataclass(frozen=True)
class WorkoutSelection:
    plans: Tuple[WorkoutPlan, ...]
    goal: str
    level: str
    tier: Optional[str]

    @property
    def is_empty(self) -> bool:
        return not self.plans

    def to_dict(self) -> dict:
        return {
            "goal": self.goal,
            "level": self.level,
            "tier": self.tier,
            "plans": [w.to_dict() for w in self.plans],
        }


def select_workouts(catalog: Sequence[WorkoutPlan], goal: str, weeks: float) -> WorkoutSelection:
    level = experience_level(weeks)
    goal = normalize_goal(goal)
    for tier, predicate in fallback_tiers(goal, level):
        plans = tuple(w for w in catalog if predicate(w))
        if plans:
            return WorkoutSelection(plans=plans, goal=goal, level=level, tier=tier)
    return WorkoutSelection(plans=(), goal=goal, level=level, tier=None)
