"""FastAPI application bootstrap."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from .dependencies import get_planner_repository
from .routes import register_health_routes, register_state_routes

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Creating the repository seeds the default document if none exists.
    repo = get_planner_repository()
    logger.info("Planner API ready db=%s", repo.db_path)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Daily Planner API", version="1.0.0", lifespan=lifespan)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        return response

    register_health_routes(app)
    register_state_routes(app)

    return app


app = create_app()

__all__ = ["app", "create_app", "get_planner_repository"]
