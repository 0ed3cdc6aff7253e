from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol

from .exceptions import PersistenceError
from .models import PlannerState
from .normalizer import default_state, normalize

logger = logging.getLogger(__name__)

STATE_ROW_ID = 1
DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "data" / "planner.db"


class DocumentStore(Protocol):
    """Single-document persistence used by the planner session."""

    def load(self) -> PlannerState: ...

    def save(self, state: PlannerState) -> Optional[PlannerState]: ...


class PlannerRepository:
    """SQLite store holding the planner document in a single row."""

    def __init__(self, db_path: Optional[Path] = None):
        env_path = os.getenv("PLANNER_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        """Create the table and seed the default document if absent."""
        try:
            with self._connect() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS planner_state (
                        id INTEGER PRIMARY KEY CHECK (id = 1),
                        payload TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    "INSERT OR IGNORE INTO planner_state (id, payload, updated_at) VALUES (?, ?, ?)",
                    (STATE_ROW_ID, self._dump(default_state()), self._now()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to initialize {self.db_path}: {exc}") from exc
        logger.info("PlannerRepository ready db=%s", self.db_path)

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _dump(state: PlannerState) -> str:
        return json.dumps(state.to_dict(), ensure_ascii=False)

    def _write(self, state: PlannerState) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO planner_state (id, payload, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        payload = excluded.payload,
                        updated_at = excluded.updated_at
                    """,
                    (STATE_ROW_ID, self._dump(state), self._now()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to persist state: {exc}") from exc

    def get(self) -> Optional[PlannerState]:
        """Return the stored document, or None when no row exists.

        A payload that is not valid JSON is replaced by the default document.
        """
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT payload FROM planner_state WHERE id = ?", (STATE_ROW_ID,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to load state: {exc}") from exc

        if row is None:
            return None
        try:
            payload = json.loads(row["payload"])
        except (TypeError, ValueError):
            logger.warning("Stored planner document is corrupted; restoring default")
            repaired = default_state()
            self._write(repaired)
            return repaired
        return normalize(payload)

    def load(self) -> PlannerState:
        """Return the stored document, seeding a default one if missing."""
        state = self.get()
        if state is None:
            state = default_state()
            self._write(state)
        return state

    def save(self, state) -> PlannerState:
        """Normalize and persist ``state`` (a document or a raw mapping)."""
        safe_state = normalize(state)
        self._write(safe_state)
        logger.debug("Planner state saved tasks=%d", len(safe_state.tasks))
        return safe_state

    def updated_at(self) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT updated_at FROM planner_state WHERE id = ?", (STATE_ROW_ID,)
            ).fetchone()
        return row["updated_at"] if row else None
