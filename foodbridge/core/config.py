from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):

    database_url: str = "sqlite:///./foodbridge.db"

    # Connection pool
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 30  # seconds to wait for a pooled connection
    db_pool_recycle: int = 3600
    db_connect_timeout: int = 10
    db_statement_timeout_ms: int = 15000

    # Security
    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440
    bcrypt_rounds: int = 12
    admin_api_key: str = "change-me-admin-key"

    # Email settings
    smtp_server: Optional[str] = None
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_timeout: int = 10
    from_email: Optional[str] = None
    admin_email: Optional[str] = None

    # Frontend URL for login links in notification emails
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = []

    # Registration
    otp_ttl_minutes: int = 5
    otp_delivery_required: bool = False
    pending_registration_ttl_hours: int = 24
    cleanup_enabled: bool = True
    cleanup_interval_seconds: int = 3600

    # Donations
    require_acceptance_before_completion: bool = True

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
