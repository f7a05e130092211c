import json
import logging
import os
import pathlib
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class BackendConfig:
    base_url: str = "http://localhost:8080/api"
    timeout: float = 30.0


@dataclass
class SessionConfig:
    expire_minutes: int = 480
    secure_cookie: bool = True
    refresh_interval_seconds: float = 300.0
    idle_after_seconds: float = 900.0


@dataclass
class GridConfig:
    default_limit: int = 10
    page_size_options: list[int] = field(default_factory=lambda: [10, 20, 50, 100])

    @property
    def max_limit(self) -> int:
        return max(self.page_size_options)


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    grid: GridConfig = field(default_factory=GridConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        return cls(
            server=ServerConfig(**data.get("server", {})),
            backend=BackendConfig(**data.get("backend", {})),
            session=SessionConfig(**data.get("session", {})),
            grid=GridConfig(**data.get("grid", {})),
        )

    @classmethod
    def load(cls) -> "AppConfig":
        config_path = os.environ.get("CONFIG_FILE", "/run/secrets/config.json")
        path = pathlib.Path(config_path)

        if path.exists():
            with open(path) as f:
                data = json.load(f)
            return cls.from_dict(data)

        logger.warning("Config file not found at %s", config_path)
        return cls()
