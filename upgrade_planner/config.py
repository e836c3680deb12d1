"""Environment-based configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .model.report import ReportFormat


class Settings(BaseSettings):
    """Runtime settings, overridable through UPGRADE_PLANNER_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="UPGRADE_PLANNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Inventory
    kube_context: Optional[str] = None
    max_workers: int = 8
    snapshot_deadline_seconds: float = 30.0

    # Lifecycle metadata
    lifecycle_cache_ttl_seconds: int = 3600
    lifecycle_data_file: Optional[Path] = None

    # Planning
    support_horizon_months: int = 18
    # "lifecycle" uses the support dates of the versions a path lands on
    support_estimator: Literal["fixed", "lifecycle"] = "fixed"
    report_format: ReportFormat = ReportFormat.TEXT

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("max_workers")
    @classmethod
    def _positive_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
