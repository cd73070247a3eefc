"""
Application settings loaded from environment variables (+ optional .env).
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


@dataclass
class Settings:
    """Settings for storage selection, HTTP binding, logging and tracing."""
    storage_backend: str = "file"
    data_file: str = "data/todos.json"
    remote_url: Optional[str] = None
    remote_key: Optional[str] = None
    remote_table: str = "todos"
    remote_timeout: float = 10.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    tracing_enabled: bool = False
    otlp_endpoint: str = "http://localhost:4317"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Build settings from the process environment.

        Args:
            load_env_file: Load the nearest .env (searching up from the working
                directory) first; variables already set win
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True), override=False)
        return cls(
            storage_backend=os.getenv("TODO_STORAGE_BACKEND", "file").strip().lower(),
            data_file=os.getenv("TODO_DATA_FILE", "data/todos.json"),
            remote_url=os.getenv("SUPABASE_URL"),
            remote_key=os.getenv("SUPABASE_ANON_KEY"),
            remote_table=os.getenv("TODO_TABLE", "todos"),
            remote_timeout=float(os.getenv("TODO_REMOTE_TIMEOUT", "10")),
            cors_origins=_origins(os.getenv("CORS_ORIGIN", "*")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3001")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            tracing_enabled=_env_bool("TODO_TRACING_ENABLED", False),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"),
        )
