import math
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .errors import InvalidProfile, UnknownActivityLevel
from .services.macros import ACTIVITY_FACTORS

SEXES = ("male", "female")
GOALS = ("fat_loss", "muscle_gain", "maintain", "endurance")
DIET_PREFS = ("balanced", "indian_veg", "indian_nonveg", "vegan", "nonveg_global")
MIN_MEALS_PER_DAY, MAX_MEALS_PER_DAY = 1, 5

# Starting values of the profile form
DEFAULT_PROFILE = {
    "name": "",
    "sex": "male",
    "age": 30,
    "height_cm": 175,
    "weight_kg": 90,
    "activity": "light",
    "target_weight_kg": 75,
    "weeks": 16,
    "goal": "fat_loss",
    "meals_per_day": 2,
    "diet_pref": "indian_veg",
    "restrictions": "",
}


def parse_restrictions(text: Optional[str]) -> List[str]:
    """Split a comma separated restriction string into lower-cased allergen keywords."""
    return [x.strip().lower() for x in (text or "").split(",") if x.strip()]


def _required(data: Mapping[str, Any], name: str):
    raw = data.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidProfile(name, "is required")
    return raw


def _coerce(data: Mapping[str, Any], name: str, cast: Callable[[Any], Any]):
    raw = _required(data, name)
    if isinstance(raw, bool):
        raise InvalidProfile(name, "must be a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidProfile(name, f"must be a number, got {raw!r}")
    if not math.isfinite(value):
        raise InvalidProfile(name, "must be a finite number")
    if cast is int:
        if not value.is_integer():
            raise InvalidProfile(name, f"must be a whole number, got {raw!r}")
        return int(value)
    return value


def _choice(data: Mapping[str, Any], name: str, allowed) -> str:
    value = str(_required(data, name)).strip().lower()
    if value not in allowed:
        raise InvalidProfile(name, f"must be one of {', '.join(allowed)}; got {value!r}")
    return value


@dataclass(frozen=True)
class Profile:
    sex: str
    age: int
    height_cm: float
    weight_kg: float
    activity: str
    target_weight_kg: float
    weeks: float
    goal: str
    meals_per_day: int
    diet_pref: str
    restrictions: str = ""
    name: str = ""

    def __post_init__(self):
        if self.sex not in SEXES:
            raise InvalidProfile("sex", f"must be one of {', '.join(SEXES)}")
        if self.activity not in ACTIVITY_FACTORS:
            raise UnknownActivityLevel(self.activity)
        if self.goal not in GOALS:
            raise InvalidProfile("goal", f"must be one of {', '.join(GOALS)}")
        if self.diet_pref not in DIET_PREFS:
            raise InvalidProfile("diet_pref", f"must be one of {', '.join(DIET_PREFS)}")
        for name in ("age", "meals_per_day"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidProfile(name, f"must be a whole number, got {value!r}")
        for name in ("age", "height_cm", "weight_kg", "target_weight_kg"):
            if getattr(self, name) <= 0:
                raise InvalidProfile(name, "must be positive")
        if self.weeks < 1:
            raise InvalidProfile("weeks", "must be at least 1")
        if not MIN_MEALS_PER_DAY <= self.meals_per_day <= MAX_MEALS_PER_DAY:
            raise InvalidProfile(
                "meals_per_day",
                f"must be between {MIN_MEALS_PER_DAY} and {MAX_MEALS_PER_DAY}",
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Profile":
        """Build a profile from form or JSON fields.

        Numbers may arrive as strings. Every field except `restrictions` and
        `name` is required; a missing or blank field, or one that does not
        coerce or falls outside its allowed range, raises InvalidProfile
        naming the field.
        """
        activity = str(_required(data, "activity")).strip().lower()
        if activity not in ACTIVITY_FACTORS:
            raise UnknownActivityLevel(activity)
        return cls(
            sex=_choice(data, "sex", SEXES),
            age=_coerce(data, "age", int),
            height_cm=_coerce(data, "height_cm", float),
            weight_kg=_coerce(data, "weight_kg", float),
            activity=activity,
            target_weight_kg=_coerce(data, "target_weight_kg", float),
            weeks=_coerce(data, "weeks", float),
            goal=_choice(data, "goal", GOALS),
            meals_per_day=_coerce(data, "meals_per_day", int),
            diet_pref=_choice(data, "diet_pref", DIET_PREFS),
            restrictions=str(data.get("restrictions") or ""),
            name=str(data.get("name") or "").strip(),
        )

    @property
    def allergens(self) -> List[str]:
        return parse_restrictions(self.restrictions)

    def as_form(self) -> dict:
        """Field values for re-rendering the profile form."""
        return {
            "name": self.name,
            "sex": self.sex,
            "age": self.age,
            "height_cm": _display_number(self.height_cm),
            "weight_kg": _display_number(self.weight_kg),
            "activity": self.activity,
            "target_weight_kg": _display_number(self.target_weight_kg),
            "weeks": _display_number(self.weeks),
            "goal": self.goal,
            "meals_per_day": self.meals_per_day,
            "diet_pref": self.diet_pref,
            "restrictions": self.restrictions,
        }


def _display_number(value: float):
    return int(value) if float(value).is_integer() else value


@dataclass(frozen=True)
class Meal:
    id: str
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    link: str = ""
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id, "name": self.name, "calories": self.calories,
            "protein": self.protein, "carbs": self.carbs, "fat": self.fat,
            "link": self.link, "tags": list(self.tags),
        }


@dataclass(frozen=True)
class WorkoutBlock:
    name: str
    sets: Optional[str] = None
    duration: Optional[str] = None
    rest: Optional[str] = None
    tip: Optional[str] = None
    link: Optional[str] = None

    @property
    def summary(self) -> str:
        text = self.sets or self.duration or ""
        if self.rest:
            text += f" • Rest: {self.rest}"
        return text

    def to_dict(self) -> dict:
        return {k: v for k, v in (
            ("name", self.name), ("sets", self.sets), ("duration", self.duration),
            ("rest", self.rest), ("tip", self.tip), ("link", self.link),
        ) if v is not None}


@dataclass(frozen=True)
class WorkoutPlan:
    id: str
    title: str
    goal: str
    level: str
    blocks: Tuple[WorkoutBlock, ...] = field(default_factory=tuple)
    type: Optional[str] = None
    link: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.id, "title": self.title, "goal": self.goal, "level": self.level,
            "blocks": [b.to_dict() for b in self.blocks],
        }
        if self.type:
            out["type"] = self.type
        if self.link:
            out["link"] = self.link
        return out
