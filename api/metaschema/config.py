"""Application configuration."""

from typing import List

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
    postgres_user: str = "metaschema"
    postgres_password: str = "changeme"
    postgres_db: str = "metaschema_db"

    # Redis
    redis_url: str = "redis://redis:6379/0"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True

    # Schema cache: redis | memory | none
    schema_cache_backend: str = "redis"
    schema_cache_prefix: str = "metadata_schema"
    schema_cache_lock_timeout: int = 30

    # Metadata
    metadata_asset_types: List[str] = ["image", "video", "document"]
    metadata_editor_roles: List[str] = ["owner", "admin", "brand_manager", "contributor"]

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def database_url(self) -> str:
        """Build database URL."""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
