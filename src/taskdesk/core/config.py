"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal, Sequence

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .. import __version__ as package_version

EnvironmentName = Literal["development", "test", "ci"]
StorageBackendName = Literal["file", "memory"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "reload": True,
    },
    "test": {
        "log_level": "WARNING",
        "reload": False,
    },
    "ci": {
        "log_level": "INFO",
        "reload": False,
    },
}


class AdminAccount(BaseModel):
    """Credentials for an administrator that has no stored user record."""

    username: str = Field(min_length=1)
    password: SecretStr


class Settings(BaseSettings):
    """Runtime configuration for the task service."""

    model_config = SettingsConfigDict(
        env_prefix="TASKDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "Taskdesk"
    environment: EnvironmentName = "development"
    api_prefix: str = "/api"
    version: str = package_version
    storage_backend: StorageBackendName = "file"
    data_file: Path = Path("data.json")
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = False
    cors_allow_methods: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"])
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"
    reload: bool = True

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    password_min_length: int = Field(default=6, ge=1)
    admin_accounts: Annotated[list[AdminAccount], NoDecode] = Field(default_factory=list)

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        if not normalized:
            normalized = "development"
        mapped = _ENVIRONMENT_ALIASES.get(normalized)
        if mapped is not None:
            return mapped
        return "development"

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _coerce_comma_separated(cls, value: object) -> list[str]:
        """Allow comma separated strings for CORS configuration."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Sequence):
            return [str(item) for item in value if str(item).strip()]
        return []

    @field_validator("admin_accounts", mode="before")
    @classmethod
    def _parse_admin_accounts(cls, value: object) -> object:
        """Accept a JSON array or ``name:password`` pairs separated by commas."""

        if not isinstance(value, str):
            return value
        raw = value.strip()
        if not raw:
            return []
        if raw.startswith("["):
            return json.loads(raw)
        accounts: list[dict[str, str]] = []
        for item in raw.split(","):
            username, separator, password = item.strip().partition(":")
            if not separator or not username.strip():
                raise ValueError("Admin accounts must be formatted as 'name:password'.")
            accounts.append({"username": username.strip(), "password": password})
        return accounts

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = ["AdminAccount", "EnvironmentName", "Settings", "StorageBackendName", "get_settings"]
