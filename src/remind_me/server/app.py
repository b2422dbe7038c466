"""FastAPI application bootstrap."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .routes import (
    register_health_routes,
    register_i18n_routes,
    register_navigation_routes,
    register_reminder_routes,
    register_tag_routes,
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Remind Me API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_health_routes(app)
    register_reminder_routes(app)
    register_tag_routes(app)
    register_i18n_routes(app)
    register_navigation_routes(app)

    return app


app = create_app()
