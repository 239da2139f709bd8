"""
Centralized configuration for perfbudget.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (PERFBUDGET_*)
3. .env file
4. Default values

Example:
    from perfbudget.config import get_config

    config = get_config()
    print(config.log_level)  # From PERFBUDGET_LOG_LEVEL or default

    # Override at runtime
    config = get_config(log_format="json")
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PerfBudgetConfig(BaseSettings):
    """
    Central configuration for perfbudget.

    Example:
        export PERFBUDGET_LOG_LEVEL=debug
        export PERFBUDGET_BUDGETS_FILE=ci/budgets.yaml
    """

    model_config = SettingsConfigDict(
        env_prefix="PERFBUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for perfbudget",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for log shippers, text for console)",
    )

    # Budgets
    budgets_file: Optional[str] = Field(
        default=None,
        description="YAML budget file the CLI registers on top of the standard budgets",
    )

    # Reporting
    emit_span_events: bool = Field(
        default=True,
        description="Add OTel span events for each evaluated measurement",
    )
    fail_on_unregistered: bool = Field(
        default=False,
        description="Gate fails when a measurement names an operation with no budget",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("budgets_file")
    @classmethod
    def expand_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and environment variables in paths."""
        if v is None:
            return v
        return os.path.expanduser(os.path.expandvars(v))

    def get_budgets_path(self) -> Optional[Path]:
        return Path(self.budgets_file) if self.budgets_file else None


# Global singleton
_config: Optional[PerfBudgetConfig] = None


def get_config(**overrides) -> PerfBudgetConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.
    """
    global _config

    if overrides or _config is None:
        _config = PerfBudgetConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
