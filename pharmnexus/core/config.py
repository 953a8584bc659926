from __future__ import annotations

from typing import List, Any, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AnyUrl, AliasChoices, field_validator


class Settings(BaseSettings):
    # .env is optional; unknown keys are rejected so typos surface early
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    # General
    APP_NAME: str = "PharmNexus Backend"
    API_V1_PREFIX: str = "/api/v1"
    APP_ENV: str = Field(
        "dev",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Application environment: dev|staging|prod",
    )
    LOG_LEVEL: str = Field(
        "INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
        description="Root logging level",
    )

    BACKEND_PORT: int = Field(
        8000,
        validation_alias=AliasChoices("BACKEND_PORT", "app_port"),
        description="Backend port to bind",
    )

    # Supabase
    SUPABASE_URL: AnyUrl = Field(
        ...,
        validation_alias=AliasChoices("SUPABASE_URL", "supabase_url"),
        description="Supabase project URL (a bare project id is accepted)",
    )
    SUPABASE_SERVICE_ROLE_KEY: str = Field(
        ...,
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY", "supabase_service_role_key"),
        description="Service role key (server-side)",
    )
    SUPABASE_ANON_KEY: str | None = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "supabase_anon_key"),
        description="Public anon key, handed to the web client",
    )
    SUPABASE_SCHEMA: str = Field(
        "public",
        validation_alias=AliasChoices("SUPABASE_SCHEMA", "supabase_schema"),
        description="Supabase schema name",
    )

    # Redis (active quiz registry)
    REDIS_URL: str = Field(
        "redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "redis_url"),
        description="redis:// or rediss:// connection URL",
    )
    ACTIVE_ATTEMPT_TTL_SECONDS: int = Field(
        6 * 60 * 60,
        validation_alias=AliasChoices("ACTIVE_ATTEMPT_TTL_SECONDS", "active_attempt_ttl_seconds"),
        gt=0,
    )

    # Quiz progress writes: "optimistic" logs failures and keeps going,
    # "confirmed" refuses the transition when the write fails.
    QUIZ_PERSISTENCE_POLICY: Literal["optimistic", "confirmed"] = Field(
        "optimistic",
        validation_alias=AliasChoices("QUIZ_PERSISTENCE_POLICY", "quiz_persistence_policy"),
    )

    # CORS origins
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @field_validator("SUPABASE_URL", mode="before")
    @classmethod
    def _repair_supabase_url(cls, v: Any) -> Any:
        """
        Accepts a full URL, a bare host (``db.example.org``) or a bare
        project id (``abcdefgh``), which becomes ``https://abcdefgh.supabase.co``.
        """
        if not isinstance(v, str):
            return v
        s = v.strip()
        if not s or s.startswith("http"):
            return s
        if "." in s:
            return f"https://{s}"
        return f"https://{s}.supabase.co"

    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _parse_origins(cls, v: Any) -> Any:
        """
        FRONTEND_ORIGINS may be given in .env as:
        - a JSON array: ["http://localhost:5173","http://localhost:3000"]
        - a comma separated string: http://localhost:5173,http://localhost:3000
        - the same with ; as separator
        """
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                import json
                try:
                    return json.loads(s)
                except ValueError:
                    # malformed JSON falls through to plain splitting
                    pass
            return [item.strip() for item in s.replace(";", ",").split(",") if item.strip()]
        return v


settings = Settings()
