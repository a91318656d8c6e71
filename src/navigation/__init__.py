from .guard import AuthState, Decision, NavigationGuard, Route
from .routes import default_routes

__all__ = ["AuthState", "Decision", "NavigationGuard", "Route", "default_routes"]
