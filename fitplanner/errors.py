"""Typed errors raised by the planning core."""


class PlannerError(Exception):
    """Base class for every error the planner reports to its caller."""


class InvalidProfile(PlannerError, ValueError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UnknownActivityLevel(InvalidProfile):
    def __init__(self, activity: str):
        super().__init__("activity", f"unknown activity level {activity!r}")
        self.activity = activity


class InsufficientCatalog(PlannerError):
    def __init__(self, available: int, requested: int):
        super().__init__(
            f"only {available} meal(s) match the diet and restrictions, "
            f"{requested} requested"
        )
        self.available = available
        self.requested = requested


class CatalogError(PlannerError):
    """A catalog file or record could not be read."""
