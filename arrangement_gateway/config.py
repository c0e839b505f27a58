"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External Services
    arrangements_api_base: str = "http://localhost:5000"
    arrangements_api_token: str | None = None  # Sent as Bearer token when set

    # Service
    service_name: str = "arrangement-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
