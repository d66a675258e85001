"""Smart Fit Planner: calorie targets, meal plans and workout plans from one profile."""
import logging
from typing import Optional

from flask import Flask

from .config import PlannerConfig
from .services.catalog_loader import load_catalog
from .services.pipeline import FitnessPlanner

logger = logging.getLogger(__name__)


def create_app(config: Optional[PlannerConfig] = None) -> Flask:
    from .web.routes import bp

    config = config or PlannerConfig()
    app = Flask(__name__)
    app.config["APP_NAME"] = config.app_name
    app.config["ALLOWED_EMBED_DOMAIN"] = config.allowed_embed_domain
    catalog = load_catalog(config.meals_path, config.workouts_path)
    app.extensions["fitplanner"] = FitnessPlanner(catalog, config.allergen_policy)
    app.register_blueprint(bp)
    logger.info("%s ready (%d meals, %d workout plans)",
                config.app_name, len(catalog.meals), len(catalog.workouts))
    return app
