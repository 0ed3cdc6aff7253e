"""Planner document endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request

from src.planner import PersistenceError

from ..dependencies import get_planner_repository
from ..schemas import PlannerStateResponse, SaveStateResponse

logger = logging.getLogger(__name__)


def register_state_routes(app: FastAPI) -> None:
    """Register GET/PUT for the single planner document."""

    @app.get(
        "/api/state",
        response_model=PlannerStateResponse,
        response_model_exclude_none=True,
    )
    async def get_state() -> Dict[str, Any]:
        """Return the normalized planner document."""
        repo = get_planner_repository()
        try:
            state = await asyncio.to_thread(repo.get)
        except PersistenceError as exc:
            logger.exception("Failed to load state: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to load state") from exc
        if state is None:
            raise HTTPException(status_code=404, detail="State not found")
        return state.to_dict()

    @app.put("/api/state", response_model=SaveStateResponse)
    async def put_state(request: Request) -> SaveStateResponse:
        """Normalize and persist a client-submitted document."""
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")

        repo = get_planner_repository()
        try:
            await asyncio.to_thread(repo.save, body)
        except PersistenceError as exc:
            logger.exception("Failed to persist state: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to persist state") from exc
        return SaveStateResponse(ok=True)
