"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "HealthChat"
    app_version: str = "1.0.0"
    debug: bool = True

    # Calendar
    timezone: Optional[str] = None  # IANA name, e.g. "Europe/Berlin"; system local time if unset
    week_start_day: int = 0  # 0 = Monday (ISO-8601), 6 = Sunday

    # Health data storage
    storage_type: str = "memory"  # memory, local
    local_storage_path: str = "./data"
    health_data_file: str = "health_samples.json"
    authorize_by_default: bool = True

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/healthchat.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
