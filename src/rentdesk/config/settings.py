"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_data_dir() -> Path:
    """Return the default data directory for session state."""
    return Path.home() / ".rentdesk"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Rentdesk Dashboard Core"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Data directory (persisted session token lives here)
    data_dir: Optional[Path] = None

    # Remote backend
    api_base_url: str = "http://localhost:4002/api"
    request_timeout_seconds: float = 15.0
    use_stub_api: bool = False

    # Data cache
    cache_ttl_seconds: int = 300
    auto_refresh_enabled: bool = True
    auto_refresh_interval_seconds: float = 120.0

    # Notifications
    notification_polling_enabled: bool = True
    notification_poll_interval_seconds: float = 30.0
    simulate_maintenance: bool = False
    maintenance_probability: float = 0.2

    timezone: str = "Europe/Paris"

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_token_path(self) -> Path:
        """Get the path of the persisted session file."""
        return self.get_data_dir() / "session.json"

    def get_backend_base_url(self) -> str:
        """Backend origin: the API base URL without its /api suffix."""
        return self.api_base_url.replace("/api", "", 1)


# Global settings instance (can be replaced at runtime)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
