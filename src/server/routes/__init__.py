"""Route registration helpers."""

from .health import register_health_routes
from .state import register_state_routes

__all__ = [
    "register_health_routes",
    "register_state_routes",
]
