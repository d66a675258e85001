import math
from dataclasses import dataclass
from typing import Dict

from ..errors import InvalidProfile, UnknownActivityLevel

ACTIVITY_FACTORS: Dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very": 1.9,
}

# Energy equivalent of one kilogram of body mass
KCAL_PER_KG = 7700

# Largest daily deficit/surplus allowed per goal; other goals hold weight
GOAL_DAILY_CAPS: Dict[str, float] = {"fat_loss": 1000, "muscle_gain": 600}


def round_half_up(x: float) -> int:
    """Round .5 towards positive infinity, unlike the built-in round()."""
    return int(math.floor(x + 0.5))


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def _finite(value: float, field: str) -> float:
    if not math.isfinite(value):
        raise InvalidProfile(field, "is too large to compute a calorie target")
    return value


def mifflin_st_jeor(sex: str, age: int, height_cm: float, weight_kg: float) -> float:
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex.lower() == "male" else base - 161


def compute_tdee(bmr: float, activity: str) -> float:
    if activity not in ACTIVITY_FACTORS:
        raise UnknownActivityLevel(activity)
    return bmr * ACTIVITY_FACTORS[activity]


@dataclass(frozen=True)
class CalorieTargets:
    bmr: int
    tdee: int
    target_calories: int
    daily_change: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "bmr": self.bmr,
            "tdee": self.tdee,
            "target_calories": self.target_calories,
            "daily_change": self.daily_change,
        }


def daily_calorie_target(sex: str, age: int, height_cm: float, weight_kg: float,
                         activity: str, target_weight_kg: float, weeks: float,
                         goal: str) -> CalorieTargets:
    """Daily calories needed to move from the current to the target weight in `weeks`.

    The implied daily change is capped per goal (see GOAL_DAILY_CAPS). TDEE
    is derived from the unrounded BMR; all four outputs are rounded once at
    the end. A timeframe under one day counts as one day. Inputs too large
    to give finite calories raise InvalidProfile naming the field.
    """
    # blame the input with the largest term when the BMR overflows
    terms = {"weight_kg": 10 * weight_kg, "height_cm": 6.25 * height_cm, "age": 5 * age}
    culprit = max(terms, key=lambda k: abs(terms[k]))
    bmr = _finite(mifflin_st_jeor(sex, age, height_cm, weight_kg), culprit)
    tdee = _finite(compute_tdee(bmr, activity), culprit)
    days = max(1, round_half_up(_finite(weeks * 7, "weeks")))
    delta_kg = target_weight_kg - weight_kg
    daily_change = delta_kg * KCAL_PER_KG / days
    cap = GOAL_DAILY_CAPS.get(goal, 0)
    applied = _finite(clamp(daily_change, -cap, cap), "target_weight_kg")
    return CalorieTargets(
        bmr=round_half_up(bmr),
        tdee=round_half_up(tdee),
        target_calories=round_half_up(tdee + applied),
        daily_change=round_half_up(applied),
    )
