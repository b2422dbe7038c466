"""Route registration helpers."""

from .health import register_health_routes
from .i18n import register_i18n_routes
from .navigation import register_navigation_routes
from .reminders import register_reminder_routes
from .tags import register_tag_routes

__all__ = [
    "register_health_routes",
    "register_i18n_routes",
    "register_navigation_routes",
    "register_reminder_routes",
    "register_tag_routes",
]
