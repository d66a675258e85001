import datetime
import io
import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from flask import (Blueprint, current_app, jsonify, make_response, redirect, render_template,
                   request, send_file, url_for)

from ..errors import InsufficientCatalog, InvalidProfile, PlannerError
from ..models import DEFAULT_PROFILE, Profile
from ..services.macros import ACTIVITY_FACTORS, CalorieTargets
from ..services.pdf import build_plan_pdf
from ..services.pipeline import FitnessPlanner, PlanResult

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="../templates")

ACTIVITY_LABELS = {
    "sedentary": "Sedentary",
    "light": "Light (1–3 d/w)",
    "moderate": "Moderate (3–5 d/w)",
    "active": "Active (6–7 d/w)",
    "very": "Very active",
}
GOAL_LABELS = {
    "fat_loss": "Fat Loss",
    "muscle_gain": "Muscle Gain",
    "maintain": "Maintain / General Fitness",
    "endurance": "Endurance",
}
DIET_LABELS = {
    "balanced": "Balanced",
    "indian_veg": "Indian Vegetarian",
    "indian_nonveg": "Indian Non-Veg",
    "vegan": "Vegan",
    "nonveg_global": "Global Non-Veg",
}


def _planner() -> FitnessPlanner:
    return current_app.extensions["fitplanner"]


def _error_status(err: PlannerError) -> int:
    if isinstance(err, InvalidProfile):
        return 400
    if isinstance(err, InsufficientCatalog):
        return 422
    return 500


def _run(data: Mapping[str, Any]) -> Tuple[Optional[Profile], Optional[PlanResult], Optional[PlannerError]]:
    profile = None
    try:
        profile = Profile.from_mapping(data)
        return profile, _planner().plan(profile), None
    except PlannerError as e:
        logger.warning("Plan request rejected: %s", e)
        return profile, None, e


def _render(data: Mapping[str, Any]):
    profile, result, error = _run(data)
    form: Dict[str, Any] = dict(DEFAULT_PROFILE)
    form.update({k: v for k, v in data.items() if k in DEFAULT_PROFILE})
    if profile is not None:
        form = profile.as_form()
    metrics: Optional[CalorieTargets] = result.targets if result else None
    if metrics is None and isinstance(error, InsufficientCatalog):
        # profile was fine, only the meal pool was too small
        metrics = _planner().targets(profile)
    html = render_template(
        "index.html",
        app_name=current_app.config.get("APP_NAME", "Smart Fit Planner"),
        form=form,
        activities={k: ACTIVITY_LABELS.get(k, k.title()) for k in ACTIVITY_FACTORS},
        goals=GOAL_LABELS,
        diets=DIET_LABELS,
        metrics=metrics,
        result=result,
        error=error,
        year=datetime.datetime.now().year,
    )
    return make_response(html, _error_status(error) if error else 200)


@bp.after_app_request
def add_csp(resp):
    domain = current_app.config.get("ALLOWED_EMBED_DOMAIN")
    if domain:
        resp.headers["Content-Security-Policy"] = f"frame-ancestors {domain} 'self'"
    return resp


@bp.get("/")
def index():
    return _render(DEFAULT_PROFILE)


@bp.route("/plan", methods=["GET", "POST"])
def plan():
    if request.method == "GET":
        return redirect(url_for("web.index"), code=302)
    return _render(request.form)


@bp.post("/api/plan")
def api_plan():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify(error="request body must be a JSON object"), 400
    _, result, error = _run(data)
    if error is not None:
        body = {"error": str(error)}
        if isinstance(error, InvalidProfile):
            body["field"] = error.field
        return jsonify(body), _error_status(error)
    return jsonify(result.to_dict())


@bp.post("/pdf")
def pdf():
    _, result, error = _run(request.form)
    if error is not None:
        return make_response(str(error), _error_status(error))
    app_name = current_app.config.get("APP_NAME", "Smart Fit Planner")
    buf = io.BytesIO(build_plan_pdf(result, app_name))
    return send_file(buf, as_attachment=True, download_name="fit_plan.pdf", mimetype="application/pdf")
