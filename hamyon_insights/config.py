"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables (HAMYON_*)"""

    model_config = SettingsConfigDict(
        env_prefix="HAMYON_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "hamyon-insights"
    log_level: str = "INFO"

    # Forecasting
    forecast_horizon_days: int = 30  # Cash-flow projection length (today + N days)

    # Alerts
    bill_reminder_days: int = 3  # Default reminder window for bills and subscriptions


settings = Settings()
