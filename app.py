"""
Smart Fit Planner - calorie targets, a meal plan and workouts from one profile
- Inputs: sex, age, height, weight, activity, target weight, timeframe, goal, meals/day, diet, restrictions
- Output: BMR/TDEE/target calories, a meal plan near the target, workouts for goal + level, optional PDF

How to run:
1) Install once:
   python -m pip install -e .
2) Run server locally:
   python app.py --port 5000

Gunicorn:
   gunicorn -w 1 -t 60 -b 0.0.0.0:$PORT app:app

Offline (no server), prints the plan as JSON:
   python app.py --offline --weight_kg 80 --target_weight_kg 72 --weeks 12 --diet_pref vegan --meals_per_day 3

Notes:
- Set ALLOWED_EMBED_DOMAIN to the site that frames this app (e.g. "https://app.gohighlevel.com").
- Catalog files can be swapped with FITPLANNER_MEALS_PATH / FITPLANNER_WORKOUTS_PATH.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from fitplanner import create_app
from fitplanner.config import PlannerConfig
from fitplanner.errors import PlannerError
from fitplanner.models import DEFAULT_PROFILE, DIET_PREFS, GOALS, SEXES, Profile
from fitplanner.services.macros import ACTIVITY_FACTORS
from fitplanner.services.pdf import build_plan_pdf

logger = logging.getLogger(__name__)

config = PlannerConfig()
logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO),
                    format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app(config)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Smart Fit Planner")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    parser.add_argument("--debug", action="store_true")
    parser.add_argument("--offline", action="store_true", help="Compute one plan without a web server")
    parser.add_argument("--name", type=str, default=DEFAULT_PROFILE["name"])
    parser.add_argument("--sex", type=str, default=DEFAULT_PROFILE["sex"], choices=list(SEXES))
    parser.add_argument("--age", type=int, default=DEFAULT_PROFILE["age"])
    parser.add_argument("--height_cm", type=float, default=DEFAULT_PROFILE["height_cm"])
    parser.add_argument("--weight_kg", type=float, default=DEFAULT_PROFILE["weight_kg"])
    parser.add_argument("--activity", type=str, default=DEFAULT_PROFILE["activity"], choices=list(ACTIVITY_FACTORS.keys()))
    parser.add_argument("--target_weight_kg", type=float, default=DEFAULT_PROFILE["target_weight_kg"])
    parser.add_argument("--weeks", type=float, default=DEFAULT_PROFILE["weeks"])
    parser.add_argument("--goal", type=str, default=DEFAULT_PROFILE["goal"], choices=list(GOALS))
    parser.add_argument("--meals_per_day", type=int, default=DEFAULT_PROFILE["meals_per_day"], help="1-5")
    parser.add_argument("--diet_pref", type=str, default=DEFAULT_PROFILE["diet_pref"], choices=list(DIET_PREFS))
    parser.add_argument("--restrictions", type=str, default=DEFAULT_PROFILE["restrictions"], help="Comma-separated keywords, e.g. peanut, egg")
    parser.add_argument("--out_json", type=str, default=None, help="Write the plan JSON here instead of stdout")
    parser.add_argument("--out", type=str, default=None, help="Also write a PDF to this path")
    args = parser.parse_args(argv)

    if not args.offline:
        app.run(host=args.host, port=args.port, debug=args.debug)
        return 0

    fields = {k: getattr(args, k) for k in DEFAULT_PROFILE}
    try:
        profile = Profile.from_mapping(fields)
        planner = app.extensions["fitplanner"]
        result = planner.plan(profile)
    except PlannerError as e:
        logger.error("Cannot build plan: %s", e)
        return 2

    payload = json.dumps(result.to_dict(), indent=2)
    if args.out_json:
        with open(args.out_json, "w", encoding="utf-8") as f:
            f.write(payload)
        print(f"Wrote JSON: {args.out_json}")
    else:
        print(payload)
    if args.out:
        with open(args.out, "wb") as f:
            f.write(build_plan_pdf(result, config.app_name))
        print(f"Wrote PDF: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
