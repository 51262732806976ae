"""
Application configuration using Pydantic Settings.
Values come from ``PRICING_*`` environment variables or a ``.env`` file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Catalog ──────────────────────────────────────────
    catalog_path: Path | None = None  # JSON catalog; seed presets only when unset

    # ── Pricing ──────────────────────────────────────────
    currency: str = "CAD"
    default_area_width_in: float = 24.0
    default_area_height_in: float = 36.0

    # ── API ──────────────────────────────────────────────
    api_title: str = "Print Pricing API"

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PRICING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def default_area_size(self) -> tuple[float, float]:
        return (self.default_area_width_in, self.default_area_height_in)


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
