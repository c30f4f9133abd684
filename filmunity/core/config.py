"""Application configuration settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Film Unity API"
    app_env: str = "development"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api"

    # Database
    database_url: str = "sqlite+aiosqlite:///./filmunity.db"

    # Session tokens (JWT carried in a cookie)
    jwt_secret_key: str = "your-super-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    session_expire_minutes: int = 120
    session_cookie_name: str = "token"

    # Password hashing - 10 rounds is roughly 100ms per verify
    bcrypt_rounds: int = 10

    # Login lockout
    login_max_attempts: int = 5
    login_lockout_minutes: int = 15
    # Records idle this long are evicted once no lock is active
    login_record_ttl_minutes: int = 60

    # Password reset
    password_reset_expire_minutes: int = 60
    frontend_url: str = "http://localhost:5173"

    # SMTP
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_email: str = "no-reply@filmunity.app"
    smtp_from_name: str = "Film Unity"
    smtp_use_tls: bool = True

    # Pexels video search
    pexels_api_key: str = ""
    pexels_base_url: str = "https://api.pexels.com/videos"
    pexels_timeout_seconds: float = 10.0

    # CORS
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Security
    allowed_hosts: str = "*"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Get allowed hosts as a list."""
        return [host.strip() for host in self.allowed_hosts.split(",")]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def session_max_age_seconds(self) -> int:
        return self.session_expire_minutes * 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
