"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "finrec"
    log_level: str = "INFO"

    # Defaults applied when a request omits them
    default_currency: str = "KES"
    default_extra_payment: float = 0.0
    default_emergency_fund_months: int = 6


settings = Settings()
