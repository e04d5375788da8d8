# Trading Dashboard - Configuration
# Database location and logging are overridable via environment or .env; defaults resolve a per-user data dir.
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings; overridable via environment."""

    # Full SQLAlchemy URL; when empty the SQLite file lives in the resolved data directory
    database_url: str = ""
    # Explicit data directory; skips the fallback chain in app.paths
    data_dir: str = ""
    app_dir_name: str = "TradingDashboard"
    database_filename: str = "trading_dashboard.db"

    sql_echo: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
