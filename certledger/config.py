"""
CertLedger -- Configuration System

All configuration is Pydantic-validated and loaded from:
1. a YAML file (defaults)
2. Environment variables (overrides)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from certledger.systems.ledger.schema import DEFAULT_TABLE, validate_table_name

# ─── Sub-configs ──────────────────────────────────────────────────


class PostgresConfig(BaseModel):
    host: str = "postgres"
    port: int = 5432
    database: str = "certledger"
    username: str = "certledger"
    password: str = "certledger_dev"
    pool_size: int = 10
    ssl: bool = False
    # asyncpg command_timeout for every statement on pooled connections
    statement_timeout_s: float | None = 30.0

    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{self.username}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class LedgerConfig(BaseModel):
    table: str = DEFAULT_TABLE
    # Default deadline for store calls; None = unbounded
    timeout_s: float | None = None

    @field_validator("table")
    @classmethod
    def _check_table(cls, value: str) -> str:
        return validate_table_name(value)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"  # "console" | "json"


# ─── Root Configuration ──────────────────────────────────────────


class CertLedgerConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="CERTLEDGER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    instance_id: str = "certledger-default"

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: str | Path | None = None) -> CertLedgerConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    # Secrets and deployment overrides win over the file
    env: dict[str, Any] = {}
    if pg_host := os.environ.get("CERTLEDGER_POSTGRES__HOST"):
        env.setdefault("postgres", {})["host"] = pg_host
    if pg_port := os.environ.get("CERTLEDGER_POSTGRES__PORT"):
        env.setdefault("postgres", {})["port"] = int(pg_port)
    if pg_db := os.environ.get("CERTLEDGER_POSTGRES__DATABASE"):
        env.setdefault("postgres", {})["database"] = pg_db
    if pg_user := os.environ.get("CERTLEDGER_POSTGRES__USERNAME"):
        env.setdefault("postgres", {})["username"] = pg_user
    if pg_pw := os.environ.get("CERTLEDGER_POSTGRES_PASSWORD"):
        env.setdefault("postgres", {})["password"] = pg_pw.strip()
    if pg_ssl := os.environ.get("CERTLEDGER_POSTGRES__SSL"):
        env.setdefault("postgres", {})["ssl"] = pg_ssl.lower() in ("true", "1", "yes")
    if ledger_table := os.environ.get("CERTLEDGER_LEDGER__TABLE"):
        env.setdefault("ledger", {})["table"] = ledger_table
    if log_level := os.environ.get("CERTLEDGER_LOGGING__LEVEL"):
        env.setdefault("logging", {})["level"] = log_level
    if instance_id := os.environ.get("CERTLEDGER_INSTANCE_ID"):
        env["instance_id"] = instance_id

    return CertLedgerConfig(**_deep_merge(raw, env))
