"""Application settings: single file, Pydantic-based.

DB selection:
  - DATABASE_URL set and non-empty -> PostgreSQL
  - DATABASE_URL absent/empty -> SQLite (DB_SQLITE_PATH, default data/payments.db)
"""

import re
from datetime import date
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _project_root() -> Path:
    """Project root. config.py lives at the root."""
    return Path(__file__).resolve().parent


def _ensure_env_loaded() -> None:
    """Load .env from project root (then its parent). Idempotent."""
    root: Path = _project_root()
    for candidate in (root / ".env", root.parent / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=False)


_ensure_env_loaded()


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=(str(_project_root() / ".env"), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = Field(
        default=None,
        description="PostgreSQL DSN; when set, uses Postgres.",
        validation_alias="DATABASE_URL",
    )
    sqlite_path: str | None = Field(default="data/payments.db")
    pool_size: int = Field(default=5, description="Postgres connection pool size")

    @property
    def use_postgres(self) -> bool:
        return bool((self.database_url or "").strip())

    @property
    def sqlite_file(self) -> Path:
        path: Path = Path((self.sqlite_path or "data/payments.db").strip())
        if not path.is_absolute():
            path = (_project_root() / path).resolve()
        return path

    @property
    def url(self) -> str:
        if self.use_postgres:
            return (self.database_url or "").strip()
        return f"sqlite:///{self.sqlite_file.as_posix()}"

    def db_info_for_logging(self) -> str:
        if self.use_postgres:
            redacted: str = re.sub(r":([^:@]+)@", r":***@", self.url)
            return f"PostgreSQL @ {redacted}"
        return f"SQLite @ {self.sqlite_file.as_posix()}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYEXPORT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="WARNING", description="Log level when not in debug mode")
    min_export_date: date = Field(
        default=date(1970, 1, 1),
        description="Explicit lower bound used when only an end date is given",
    )
    json_indent: int = Field(default=4, ge=0)

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)


@lru_cache
def get_settings() -> Settings:
    return Settings()
