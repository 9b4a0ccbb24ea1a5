from functools import lru_cache
from typing import Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    TASK_API_VERSION: str = "v1.0.x"
    API_NAME: str = "Task API"
    API_SUMMARY: str = "Authenticated task list backend with cached reads"
    API_PREFIX: str = "/api"

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # Authentication
    JWT_SECRET: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_IN: int = 24 * 60 * 60

    # Response Cache
    CACHE_TTL: int = 300
    CACHE_CHECK_PERIOD: int = 600

    # Database Configuration
    STORE_BACKEND: Literal["postgres", "redis"] = "postgres"
    REDIS_URL: str = "redis://localhost:6379"
    POSTGRES_URL: str = "postgresql://localhost:5432/task_api"  # Assumes a local Postgres db named 'task_api' exists

    TASKS_NAMESPACE: str = "tasks"
    USERS_NAMESPACE: str = "users"
    AUDIT_NAMESPACE: str = "audit_logs"

    AUDIT_ENABLED: bool = True

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "task-api"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    @field_validator("CACHE_TTL", "CACHE_CHECK_PERIOD", "JWT_EXPIRES_IN")
    def validate_positive(cls, v: int):
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
