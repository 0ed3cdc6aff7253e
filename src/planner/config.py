"""
Application configuration.

Values come from ``config/app_config.yaml``; ``Config.from_env`` reads the
same settings from environment variables for container deployments.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).parent.parent.parent


@dataclass
class ServerConfig:
    """HTTP server settings"""

    host: str = "0.0.0.0"
    port: int = 8787
    env: str = "development"


@dataclass
class ClientConfig:
    """Settings for talking to a remote planner API"""

    api_url: str = "http://localhost:8787"
    timeout_seconds: float = 5.0


@dataclass
class TimerConfig:
    """Countdown timer settings"""

    default_minutes: int = 30


@dataclass
class Config:
    """Application settings"""

    server: ServerConfig = None  # type: ignore
    client: ClientConfig = None  # type: ignore
    timer: TimerConfig = None  # type: ignore

    # Storage
    db_path: str = "data/planner.db"

    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/planner.log"

    def __post_init__(self):
        if self.server is None:
            self.server = ServerConfig()
        if self.client is None:
            self.client = ClientConfig()
        if self.timer is None:
            self.timer = TimerConfig()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """Load settings from a YAML file.

        Args:
            config_path: settings file (defaults to config/app_config.yaml)

        Returns:
            Config: loaded settings, or defaults when the file does not exist
        """
        if config_path is None:
            config_path = PROJECT_ROOT / "config" / "app_config.yaml"
        if not Path(config_path).exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        server_data = yaml_data.get("server", {})
        client_data = yaml_data.get("client", {})
        storage_data = yaml_data.get("storage", {})
        timer_data = yaml_data.get("timer", {})
        log_data = yaml_data.get("log", {})

        return cls(
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 8787)),
                env=server_data.get("env", "development"),
            ),
            client=ClientConfig(
                api_url=client_data.get("api_url", "http://localhost:8787"),
                timeout_seconds=float(client_data.get("timeout_seconds", 5.0)),
            ),
            timer=TimerConfig(default_minutes=int(timer_data.get("default_minutes", 30))),
            db_path=storage_data.get("db_path", "data/planner.db"),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/planner.log"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load settings from environment variables"""
        return cls(
            server=ServerConfig(
                host=os.getenv("HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "8787")),
                env=os.getenv("PLANNER_ENV", "development"),
            ),
            client=ClientConfig(
                api_url=os.getenv("PLANNER_API_URL", "http://localhost:8787"),
                timeout_seconds=float(os.getenv("PLANNER_API_TIMEOUT", "5.0")),
            ),
            timer=TimerConfig(default_minutes=int(os.getenv("PLANNER_TIMER_MINUTES", "30"))),
            db_path=os.getenv("PLANNER_DB_PATH", "data/planner.db"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/planner.log"),
        )
