"""Health check endpoint."""

from __future__ import annotations

from fastapi import FastAPI

from ... import __version__
from ..dependencies import get_repository
from ..schemas import HealthResponse


def register_health_routes(app: FastAPI) -> None:
    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Simple health check endpoint."""
        return HealthResponse(status="ok", version=__version__, storage_ok=get_repository().last_save_ok)
