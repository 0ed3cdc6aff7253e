"""HTTP client for the planner state API."""

from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from .exceptions import PersistenceError
from .models import PlannerState
from .normalizer import normalize

logger = logging.getLogger(__name__)

STATE_PATH = "/api/state"


class PlannerApiClient:
    """``DocumentStore`` backed by ``GET``/``PUT /api/state``."""

    def __init__(
        self,
        api_url: str = "http://localhost:8787",
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        """
        Args:
            api_url: base URL of the planner server
            timeout: per-request timeout in seconds
            session: optional pre-configured requests session
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def health(self) -> Dict[str, Any]:
        try:
            response = self._session.get(f"{self.api_url}/api/health", timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Health check failed: {e}")
            raise PersistenceError(f"Planner API unreachable: {e}") from e

    def load(self) -> PlannerState:
        """Fetch the document and normalize it again locally."""
        try:
            response = self._session.get(f"{self.api_url}{STATE_PATH}", timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to load state: {e}")
            raise PersistenceError(f"Failed to load state: {e}") from e
        except ValueError as e:
            # Unparseable body is treated like an empty document.
            logger.warning(f"State response was not JSON: {e}")
            payload = {}
        return normalize(payload)

    def save(self, state: PlannerState) -> None:
        safe_state = normalize(state)
        try:
            response = self._session.put(
                f"{self.api_url}{STATE_PATH}",
                json=safe_state.to_dict(),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to save state: {e}")
            raise PersistenceError(f"Failed to save state: {e}") from e
