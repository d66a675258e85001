import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import CatalogError
from ..models import Meal, WorkoutBlock, WorkoutPlan

logger = logging.getLogger(__name__)

ASSETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")
DEFAULT_MEALS_PATH = os.path.join(ASSETS_DIR, "meals.json")
DEFAULT_WORKOUTS_PATH = os.path.join(ASSETS_DIR, "workouts.json")


@dataclass(frozen=True)
class Catalog:
    """Meal and workout tables, loaded once and shared read-only."""
    meals: Tuple[Meal, ...]
    workouts: Tuple[WorkoutPlan, ...]


def _read_records(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"cannot read catalog {path}: {e}") from e
    if not isinstance(data, list):
        raise CatalogError(f"{path}: expected a JSON array of records")
    return data


def _opt_str(value) -> Optional[str]:
    return None if value in (None, "") else str(value)


def meal_from_record(r: Dict[str, Any]) -> Meal:
    return Meal(
        id=str(r["id"]),
        name=r["name"],
        calories=float(r["calories"]),
        protein=float(r.get("protein", 0)),
        carbs=float(r.get("carbs", 0)),
        fat=float(r.get("fat", 0)),
        link=r.get("link", ""),
        tags=tuple(str(t) for t in r.get("tags", [])),
    )


def _block_from_exercise(ex: Dict[str, Any]) -> WorkoutBlock:
    # older records list exercises as {name, sets, reps, rest}
    sets = ex.get("sets")
    reps = ex.get("reps")
    volume = f"{sets} × {reps}" if sets is not None and reps is not None else _opt_str(sets)
    return WorkoutBlock(name=ex["name"], sets=volume, rest=_opt_str(ex.get("rest")))


def workout_from_record(r: Dict[str, Any]) -> WorkoutPlan:
    if r.get("blocks"):
        blocks = tuple(
            WorkoutBlock(
                name=b["name"],
                sets=_opt_str(b.get("sets")),
                duration=_opt_str(b.get("duration")),
                rest=_opt_str(b.get("rest")),
                tip=_opt_str(b.get("tip")),
                link=_opt_str(b.get("link")),
            )
            for b in r["blocks"]
        )
    else:
        blocks = tuple(_block_from_exercise(ex) for ex in r.get("exercises", []))
    return WorkoutPlan(
        id=str(r["id"]),
        title=r.get("title") or r.get("name") or str(r["id"]),
        goal=r["goal"],
        level=r["level"],
        blocks=blocks,
        type=_opt_str(r.get("type")),
        link=_opt_str(r.get("link")),
    )


def _convert(path: str, records: List[Dict[str, Any]], convert) -> tuple:
    out = []
    for i, r in enumerate(records):
        try:
            out.append(convert(r))
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"{path}: record {i} is malformed ({e!r})") from e
    return tuple(out)


def load_meals(path: str = DEFAULT_MEALS_PATH) -> Tuple[Meal, ...]:
    meals = _convert(path, _read_records(path), meal_from_record)
    logger.info("Loaded %d meals from %s", len(meals), path)
    return meals


def load_workouts(path: str = DEFAULT_WORKOUTS_PATH) -> Tuple[WorkoutPlan, ...]:
    workouts = _convert(path, _read_records(path), workout_from_record)
    logger.info("Loaded %d workout plans from %s", len(workouts), path)
    return workouts


def load_catalog(meals_path: str = DEFAULT_MEALS_PATH,
                 workouts_path: str = DEFAULT_WORKOUTS_PATH) -> Catalog:
    return Catalog(meals=load_meals(meals_path), workouts=load_workouts(workouts_path))
