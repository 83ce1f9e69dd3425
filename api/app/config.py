"""Application configuration."""

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    postgres_host: str = "postgres"
    postgres_port: int = 5432
    postgres_user: str = "artwork_admin"
    postgres_password: str = "changeme"
    postgres_db: str = "artwork_admin_db"
    database_url_override: Optional[str] = None

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True

    # Security
    secret_key: str = "changeme-use-a-secure-random-key-in-production"
    session_ttl_seconds: int = 7 * 24 * 3600
    session_cookie_name: str = "admin_session"
    admin_emails: str = ""
    admin_password: str = ""

    # Storage
    storage_provider: str = "local"
    storage_bucket: str = "artworks"
    storage_base_path: str = "/tmp/artwork-admin-storage"
    storage_public_base_url: str = "http://localhost:8000"
    storage_public_marker: str = "/storage/v1/object/public/"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_endpoint_url: Optional[str] = None

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        """Build database URL."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def admin_email_list(self) -> List[str]:
        """Allow-listed admin emails, lowercased."""
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]


settings = Settings()
