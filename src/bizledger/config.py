"""
BizLedger configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """Transaction store configuration."""

    type: str = Field(default="memory", description="Store type: memory, sql, or a dotted class path")
    url: str | None = Field(default=None, description="SQLAlchemy database URL (sql store)")
    options: dict[str, Any] = Field(default_factory=dict)
    max_retries: int = Field(default=3, ge=1, description="Attempts per query before giving up")
    retry_backoff: float = Field(default=2.0, ge=0.0, description="Seconds, multiplied by the attempt number")
    retry_on: str = Field(
        default="endpoint is disabled",
        description="Substring of a driver error message that marks it as retryable",
    )


class EngineConfig(BaseModel):
    """Aggregation engine settings."""

    trailing_days: int = Field(default=7, ge=1, description="Length of the weekly window")
    cash_flow_days: int = Field(default=7, ge=1, description="Number of daily cash-flow points")
    recent_limit: int = Field(default=5, ge=0, description="Size of the recent-transactions slice")
    cash_flow_anchor: Literal["window", "opening_balance"] = Field(
        default="window",
        description="Start the cash-flow series at 0 or at the balance before the trailing window",
    )
    category_order: Literal["amount", "insertion"] = "amount"
    uncategorized_label: str = "Uncategorized"


class ApiConfig(BaseModel):
    """HTTP API settings."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1)


class BizLedgerConfig(BaseModel):
    """Root configuration for BizLedger."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    currency: str = Field(default="IDR")
    log_level: str = Field(default="INFO")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> BizLedgerConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_url = os.environ.get("BIZLEDGER_DATABASE_URL") or os.environ.get("DATABASE_URL")
        env_level = os.environ.get("BIZLEDGER_LOG_LEVEL")
        env_currency = os.environ.get("BIZLEDGER_CURRENCY")

        if env_url:
            store = data.get("store", {})
            store["type"] = "sql"
            store["url"] = env_url
            data["store"] = store

        if env_level:
            data["log_level"] = env_level.upper()
        if env_currency:
            data["currency"] = env_currency.upper()

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
