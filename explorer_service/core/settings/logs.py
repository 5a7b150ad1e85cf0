"""Log output settings (``LOG_*``).

The explorer logs to stderr by default. A rotating JSONL file can be switched
on for hosts that ship files rather than container output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Where explorer logs go and how they are rendered.

    ``LOG_JSON`` (note: no ``_LOGS`` suffix) toggles JSON Lines output.
    """

    service_name: str = Field(default="explorer-service", description="Static `service` field on records")
    level: LogLevel = "INFO"
    json_logs: bool = Field(default=True, alias="json", description="Render records as JSON Lines")

    console_enabled: bool = True
    console_level: LogLevel | None = Field(default=None, description="Falls back to `level`")

    file_enabled: bool = False
    file_path: Path = Path("logs/explorer-service.jsonl")
    file_level: LogLevel | None = Field(default=None, description="Falls back to `level`")
    file_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)
    file_backup_count: int = Field(default=5, ge=0, le=100)

    include_context: bool = Field(
        default=True,
        description="Attach correlation id and operation name to every record",
    )
    capture_warnings: bool = True

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
    )

    @field_validator("level", "console_level", "file_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``infra.logging.configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "console_level": self.console_level or self.level,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_level": self.file_level or self.level,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }
