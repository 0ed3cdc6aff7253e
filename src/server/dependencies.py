"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from src.planner import PlannerRepository
from src.planner.config import PROJECT_ROOT, Config
from src.planner.logger import setup_logger

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)


def resolve_db_path() -> Path:
    """``PLANNER_DB_PATH`` wins over the configured path."""
    env_path = os.getenv("PLANNER_DB_PATH")
    if env_path:
        return Path(env_path)
    path = Path(config.db_path)
    return path if path.is_absolute() else PROJECT_ROOT / path


@lru_cache(maxsize=1)
def get_planner_repository() -> PlannerRepository:
    """Singleton PlannerRepository."""
    return PlannerRepository(db_path=resolve_db_path())


def get_env() -> str:
    return os.getenv("PLANNER_ENV", config.server.env)
