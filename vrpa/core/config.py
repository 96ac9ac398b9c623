"""
Configuration settings for the vRPA Manager
"""

from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """Application settings"""

    # Database
    db_host: str = "postgres"
    db_port: str = "5432"
    db_name: str = "vrpa_db"
    db_user: str = "vrpa_user"
    db_password: str = "vrpa_password"
    database_url: str = ""  # overrides the components above, e.g. sqlite:///./vrpa.db

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    # Authentication
    jwt_secret: str = "default-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440  # 24 hours
    min_password_length: int = 8
    default_admin_username: str = "admin"
    default_admin_password: str = "admin"

    # Ping monitoring
    ping_interval_seconds: float = 30.0
    ping_timeout_seconds: float = 5.0
    ping_retention_days: int = 30
    probe_mode: str = "simulated"  # simulated, http
    probe_port: Optional[int] = None
    simulated_delay_scale: float = 1.0
    monitor_autostart: bool = False

    # Email
    email_link_placeholder: str = "[Insert Link Here]"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "VRPA_"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build database_url from components unless given explicitly
        if not self.database_url:
            self.database_url = f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

# Global settings instance
settings = Settings()
