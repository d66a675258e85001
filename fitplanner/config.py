"""Runtime settings for the Smart Fit Planner app."""

import os
from dataclasses import dataclass, field
from typing import Optional

from .services.catalog_loader import DEFAULT_MEALS_PATH, DEFAULT_WORKOUTS_PATH


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or default


@dataclass
class PlannerConfig:
    """Configuration for the web app and the catalogs it serves."""
    app_name: str = field(default_factory=lambda: _env("FITPLANNER_APP_NAME", "Smart Fit Planner"))
    meals_path: str = field(default_factory=lambda: _env("FITPLANNER_MEALS_PATH", DEFAULT_MEALS_PATH))
    workouts_path: str = field(default_factory=lambda: _env("FITPLANNER_WORKOUTS_PATH", DEFAULT_WORKOUTS_PATH))
    # Site allowed to frame the app, e.g. "https://app.gohighlevel.com"
    allowed_embed_domain: Optional[str] = field(default_factory=lambda: _env("ALLOWED_EMBED_DOMAIN"))
    allergen_policy: str = field(default_factory=lambda: _env("FITPLANNER_ALLERGEN_POLICY", "substring"))
    log_level: str = field(default_factory=lambda: _env("FITPLANNER_LOG_LEVEL", "INFO"))
