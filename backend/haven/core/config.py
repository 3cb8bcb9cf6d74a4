import os
from dataclasses import dataclass, field
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_DATABASE_PATH = PROJECT_ROOT / "haven.db"


def _to_bool(value: str, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_int(value: str | None, default: int) -> int:
    raw = (value or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


@dataclass(slots=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "Haven Assessment API")
    database_url: str = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DEFAULT_DATABASE_PATH}")
    database_echo: bool = _to_bool(os.getenv("DATABASE_ECHO"), False)

    # "database" persists history through SQLAlchemy, "memory" keeps it in-process.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "database").strip().lower()
    history_storage_key: str = os.getenv("HISTORY_STORAGE_KEY", "depressionTestHistory")
    history_capacity: int = _to_int(os.getenv("HISTORY_CAPACITY"), 50)

    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    cors_origins: list[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:8081,http://127.0.0.1:8081")
        )
    )


settings = Settings()
