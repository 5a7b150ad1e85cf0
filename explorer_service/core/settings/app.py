"""Process-level settings (``APP_*``)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """Identity of the running explorer and where uvicorn binds.

    ``environment="production"`` is what switches GraphQL error masking on.
    """

    service_name: str = Field(default="explorer-service", pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$")
    title: str = "Ledger Explorer GraphQL API"
    version: str = Field(default="0.1.0", pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$")
    environment: Environment = "development"
    debug: bool = False

    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"
