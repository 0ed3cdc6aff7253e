"""Liveness endpoint."""

from __future__ import annotations

from fastapi import FastAPI

from ..dependencies import get_env
from ..schemas import HealthResponse


def register_health_routes(app: FastAPI) -> None:
    """Register the health check endpoint."""

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(ok=True, env=get_env())
