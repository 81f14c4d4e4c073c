from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "staging", "test"]


def _resolve_env_files() -> tuple[str, ...]:
    env = os.getenv("HANDLECRAFT_ENVIRONMENT", "development").lower()
    if env in {"prod", "production"}:
        return (".env", ".env.prod")
    if env in {"dev", "development"}:
        return (".env", ".env.dev")
    if env in {"test", "testing"}:
        return (".env", ".env.test")
    return (".env",)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HANDLECRAFT_",
        env_file=_resolve_env_files(),
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    environment: Environment = "development"
    project_name: str = "HandleCraft"
    api_prefix: str = "/api"
    log_level: str = "INFO"
    log_json: bool = False
    rate_limit: str = "10/minute"
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = []
    enable_docs: bool = True

    deepseek_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("HANDLECRAFT_DEEPSEEK_API_KEY", "DEEPSEEK_API_KEY"),
    )
    deepseek_base_url: str = "https://api.deepseek.com/v1"
    deepseek_model: str = "deepseek-chat"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    @property
    def api_key(self) -> str | None:
        if self.deepseek_api_key is None:
            return None
        return self.deepseek_api_key.get_secret_value().strip() or None


@lru_cache
def get_settings() -> Settings:
    return Settings()
