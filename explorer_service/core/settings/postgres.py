"""Connection settings for the indexed ledger database (``DB_*``).

The explorer never writes: it reads tables filled by a separate indexer.
Either give a complete ``DATABASE_URL`` (no prefix) or the individual
``DB_HOST``/``DB_PORT``/... parts. A URL wins and is split back into the parts
so that logs and ``url`` always agree.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus, unquote, urlparse

from pydantic import Field, SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    """Where the ledger lives and how hard the explorer may lean on it.

    ``statement_timeout`` bounds every explorer query on the server side, so a
    pathological ``tokenTransfers`` page cannot hold a replica connection
    indefinitely.
    """

    enabled: bool = Field(default=True, description="False skips the startup connectivity check")
    dsn: str | None = Field(default=None, alias="DATABASE_URL")

    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=5432, ge=1, le=65535)
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    name: str = Field(default="explorer", min_length=1)
    driver: str = Field(default="psycopg", description="Async SQLAlchemy dialect driver")
    application_name: str = Field(default="explorer-service", description="Shown in pg_stat_activity")

    pool_size: int = Field(default=10, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0, le=100)
    pool_pre_ping: bool = True
    pool_timeout: float = Field(default=30.0, gt=0, le=300.0)
    pool_recycle: int = Field(default=1800, ge=0)
    connect_timeout: float = Field(default=5.0, gt=0, le=60.0)
    statement_timeout: float | None = Field(default=15.0, gt=0, le=600.0, description="Seconds; None disables")
    echo: bool = False

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _split_dsn(self) -> PostgresSettings:
        if not self.dsn:
            return self

        parts = urlparse(self.dsn)
        overrides: dict[str, Any] = {
            "host": parts.hostname,
            "port": parts.port,
            "user": unquote(parts.username) if parts.username else None,
            "password": SecretStr(unquote(parts.password)) if parts.password else None,
            "name": parts.path.lstrip("/") or None,
            "driver": parts.scheme.partition("+")[2] or None,
        }
        # frozen model: bypass the pydantic setattr guard
        for field, value in overrides.items():
            if value is not None:
                object.__setattr__(self, field, value)
        return self

    @computed_field  # type: ignore[misc]
    @property
    def url(self) -> str:
        secret = quote_plus(self.password.get_secret_value())
        return (
            f"postgresql+{self.driver}://{self.user}:{secret}@{self.host}:{self.port}/{self.name}"
            f"?application_name={quote_plus(self.application_name)}"
        )

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.host and self.name)

    def sqlalchemy_engine_kwargs(self) -> dict[str, Any]:
        """Pool and driver options for ``create_async_engine``.

        A statement that outlives ``statement_timeout`` is cancelled by
        PostgreSQL and reaches the repositories as ``OperationalError``.
        """
        connect_args: dict[str, Any] = {"connect_timeout": int(self.connect_timeout)}
        if self.statement_timeout is not None:
            connect_args["options"] = f"-c statement_timeout={int(self.statement_timeout * 1000)}"

        return {
            "echo": self.echo,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_recycle": self.pool_recycle,
            "pool_pre_ping": self.pool_pre_ping,
            "connect_args": connect_args,
        }
