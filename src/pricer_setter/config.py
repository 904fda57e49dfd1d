from __future__ import annotations

import os
from typing import Literal, Mapping, Sequence

from pydantic import BaseModel, Field, SecretStr

from .secrets import get_secret


class Settings(BaseModel):
    """Runtime configuration, read once at start-up and passed to ``create_app``."""

    environment: str = "dev"
    project_id: str | None = None
    database_url: str = "sqlite:///data/pricer_setter.db"

    llm_provider: Literal["openai", "zai", "vertex"] = "openai"
    llm_model: str | None = None
    llm_api_key: SecretStr | None = None
    llm_base_url: str | None = None
    vertex_location: str = "asia-southeast1"

    auth_mode: Literal["password", "access_code"] = "password"
    access_code: SecretStr | None = None
    token_secret: SecretStr | None = None
    token_ttl_minutes: int = 720

    cors_origins: Sequence[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        project_id = env.get("PROJECT_ID") or None

        def secret(var: str, secret_id: str) -> str | None:
            value = env.get(var)
            if not value and project_id:
                value = get_secret(project_id, secret_id)
            return value or None

        values: dict[str, object] = {
            "environment": env.get("ENVIRONMENT", "dev"),
            "project_id": project_id,
            "llm_provider": env.get("LLM_PROVIDER", "openai"),
            "auth_mode": env.get("AUTH_MODE", "password"),
        }
        optional = {
            "database_url": env.get("DATABASE_URL"),
            "llm_model": env.get("LLM_MODEL"),
            "llm_base_url": env.get("LLM_BASE_URL"),
            "vertex_location": env.get("VERTEX_LOCATION"),
            "token_ttl_minutes": env.get("TOKEN_TTL_MINUTES"),
            "llm_api_key": secret("LLM_API_KEY", "llm-api-key"),
            "access_code": secret("ACCESS_CODE", "access-code"),
            "token_secret": secret("TOKEN_SECRET", "token-secret"),
        }
        values.update({key: value for key, value in optional.items() if value is not None})
        if env.get("CORS_ORIGINS"):
            values["cors_origins"] = [
                origin.strip() for origin in env["CORS_ORIGINS"].split(",") if origin.strip()
            ]
        return cls.model_validate(values)


__all__ = ["Settings"]
