from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from pydantic import Field, ValidationError, field_validator
import sys


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:5173",
    ]

    # Performance instrumentation
    SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS: int = 300

    # Quizzes
    QUIZ_DEFAULT_PASSING_SCORE: int = Field(default=70, ge=0, le=100)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        """Make sure Postgres URLs go through the asyncpg driver.

        Managed Postgres providers still hand out ``postgres://`` URLs, which
        SQLAlchemy no longer understands. Those, as well as plain
        ``postgresql://`` and psycopg variants, are rewritten to
        ``postgresql+asyncpg://``. SQLite URLs are left alone.
        """

        if not isinstance(value, str):
            return value

        if "+asyncpg" in value:
            return value

        replacements = {
            "postgres://": "postgresql+asyncpg://",
            "postgresql://": "postgresql+asyncpg://",
            "postgresql+psycopg2://": "postgresql+asyncpg://",
            "postgresql+psycopg://": "postgresql+asyncpg://",
        }

        for prefix, target in replacements.items():
            if value.startswith(prefix):
                return target + value[len(prefix) :]

        return value


def _log_settings_validation_error(exc: ValidationError) -> None:
    """Print every missing or invalid variable before the import fails."""

    print("Configuration error while loading environment variables:", file=sys.stderr)

    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "Unknown validation error")
        type_name = error.get("type")
        hint = f"{message} (type={type_name})" if type_name else message
        print(f"  - {location}: {hint}", file=sys.stderr)


try:
    settings = Settings()
except ValidationError as exc:  # pragma: no cover - exercised at runtime
    _log_settings_validation_error(exc)
    raise
