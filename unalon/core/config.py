"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Unalon"
    debug: bool = False
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Store
    database_url: str = "sqlite://"  # In-memory; state is lost on restart
    seed_demo_data: bool = True

    # Sessions
    session_cookie_name: str = "unalon.sid"
    session_ttl_hours: int = 24
    session_sweep_minutes: int = 15

    # Logging
    log_dir: str = "~/.logs/unalon"


settings = Settings()
