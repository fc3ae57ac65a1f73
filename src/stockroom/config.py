"""Environment-driven configuration for the stockroom engine."""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_DATABASE_URL = "sqlite:///stockroom.db"
IN_MEMORY_URLS = ("memory://", "sqlite://", "sqlite:///:memory:")


def _env_int(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    """Runtime settings.

    Thresholds drive the replenishment advisor and the receiving defaults;
    `decision_store` and `worklist_path` select where operator decisions
    are persisted.
    """

    env: str = "development"
    database_url: str = DEFAULT_DATABASE_URL
    low_stock_threshold: int = 2
    expiry_window_days: int = 7
    default_min_stock: int = 5
    default_category: str = "Uncategorized"
    no_code_sentinel: str = "NO-CODE"
    decision_store: str = "json"
    worklist_path: Path = field(default_factory=lambda: Path("instance") / "worklist.json")
    log_file: Path | None = None

    @classmethod
    def from_env(cls, environ=None) -> "Config":
        environ = os.environ if environ is None else environ
        env = (environ.get("STOCKROOM_ENV") or environ.get("ENVIRONMENT") or "development").lower()
        log_file = environ.get("STOCKROOM_LOG_FILE") or (None if env == "test" else "logs/stockroom.log")
        return cls(
            env=env,
            database_url=environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
            low_stock_threshold=_env_int(environ, "STOCKROOM_LOW_STOCK_THRESHOLD", 2),
            expiry_window_days=_env_int(environ, "STOCKROOM_EXPIRY_WINDOW_DAYS", 7),
            default_min_stock=_env_int(environ, "STOCKROOM_DEFAULT_MIN_STOCK", 5),
            decision_store=(environ.get("STOCKROOM_DECISION_STORE") or ("memory" if env == "test" else "json")).lower(),
            worklist_path=Path(environ.get("STOCKROOM_WORKLIST_PATH") or Path("instance") / "worklist.json"),
            log_file=Path(log_file) if log_file else None,
        )

    @property
    def is_production(self) -> bool:
        return self.env in ("production", "staging")

    @property
    def database(self) -> dict:
        """Provider settings for the domain's default database.

        In-memory URLs use protean's memory provider: a private SQLite
        memory database would not survive across sessions.
        """
        if self.database_url in IN_MEMORY_URLS:
            return {"provider": "memory"}
        if self.database_url.startswith("sqlite"):
            return {"provider": "sqlite", "database_uri": self.database_url}
        if self.database_url.startswith("postgresql"):
            return {"provider": "postgresql", "database_uri": self.database_url}
        if self.database_url.startswith("postgres://"):
            # SQLAlchemy only accepts the postgresql scheme
            return {"provider": "postgresql", "database_uri": "postgresql://" + self.database_url[len("postgres://") :]}
        raise ValueError(f"Unsupported DATABASE_URL {self.database_url!r}; use sqlite:// or postgresql://")
