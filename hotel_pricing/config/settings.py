"""Application settings and configuration management."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Currency handling for computed prices."""

    currency: str = "COP"
    currency_decimals: int = 0  # Nightly prices are rounded to whole currency units

    model_config = SettingsConfigDict(env_prefix="PRICING_")


class PMSAPISettings(BaseSettings):
    """PMS REST API configuration (room types, rooms, reservations, price rules)."""

    base_url: str = "http://localhost:3000"
    api_key: str = ""
    request_timeout: int = 30
    max_retries: int = 3

    model_config = SettingsConfigDict(env_prefix="PMS_API_")


class DataSourceSettings(BaseSettings):
    """Which collaborator supplies room, booking and rule records."""

    kind: Literal["file", "api"] = "file"
    snapshot_path: str = "snapshot.json"

    model_config = SettingsConfigDict(env_prefix="DATA_SOURCE_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    pricing: PricingSettings = PricingSettings()
    pms_api: PMSAPISettings = PMSAPISettings()
    data_source: DataSourceSettings = DataSourceSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated env vars (e.g., DATABASE_URL of the PMS)
    )

    @property
    def pms_api_base_url(self) -> str:
        """PMS API base URL without trailing slash."""
        return self.pms_api.base_url.rstrip("/")


# Global settings instance
settings = Settings()
