# peoplebase/common/settings.py
from __future__ import annotations

from functools import lru_cache
from typing import Optional
from pydantic import BaseModel, Field, field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class DBConfig(BaseModel):
    driver: str = "postgresql+psycopg"
    host: str = "localhost"
    port: int = 5432
    name: str = "person"
    user: str = "person"
    password: str = "person"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20
    pool_pre_ping: bool = True
    pool_recycle: int = 1800

    @computed_field  # type: ignore[misc]
    @property
    def effective_url(self) -> str:
        return f"{self.driver}://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class SearchConfig(BaseModel):
    # the original service always answered with at most 50 people
    default_limit: int = Field(50, ge=1)
    # upper bound for one search; larger requests are rejected, not clamped
    max_limit: int = Field(1000, ge=1)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "peoplebase"
    app_env: str = "development"  # development|test|staging|production
    log_level: str = "INFO"

    # -------- Sub-configs (DB__HOST, SEARCH__DEFAULT_LIMIT, ...) --------
    db: DBConfig = DBConfig()
    search: SearchConfig = SearchConfig()

    # Optional single URL (if set, it takes precedence over db.*)
    database_url_override: Optional[str] = Field(default=None, alias="DATABASE_URL")
    db_schema_name: str = Field(default="public", alias="DB_SCHEMA")

    # -------- Testcontainers / CI toggles --------
    use_testcontainers: bool = False
    test_db_image: str = "postgres:15-alpine"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("use_testcontainers", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v)

    # ===== Convenience: DB URL & schema =====
    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return self.db.effective_url

    @computed_field  # type: ignore[misc]
    @property
    def db_schema(self) -> Optional[str]:
        """Schema for the metadata, or None when tables live in the default schema."""
        name = (self.db_schema_name or "").strip()
        if not name or name.lower() == "public":
            return None
        return name


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from peoplebase.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()  # pydantic_settings will read from .env automatically
