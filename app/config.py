"""Application configuration.

Loads settings from environment variables (prefix ``KASIR_``) with sensible
defaults.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="KASIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_version: str = "1.0.0"
    service_name: str = "kasir-api"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Rendering
    fragment_header: str = "HX-Request"

    # CORS
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


settings = Settings()
