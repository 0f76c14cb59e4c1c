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
    database_url: str = "sqlite:///./asset_catalog.db"
    auto_create_tables: bool = True

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True
    api_prefix: str = "/api"
    cors_origins: str = "*"

    # Authentication
    environment: str = "development"
    allow_local_auth: bool = False
    trusted_identity_providers: str = "aad,azureactivedirectory,microsoft"

    # Blob storage
    blob_provider: str = "local"
    blob_container: str = "asset-images"
    blob_base_path: str = "./blob-data"
    public_base_url: str = "http://localhost:8000"
    signed_url_ttl_days: int = 365
    s3_bucket: Optional[str] = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Security
    secret_key: str = "changeme-use-a-secure-random-key-in-production"

    # Insurance advice (LLM)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 500

    # Logging
    log_level: str = "INFO"

    @property
    def is_local_development(self) -> bool:
        """Whether the development-only identity header is honoured."""
        return self.environment.lower() == "development" or self.allow_local_auth

    @property
    def trusted_providers(self) -> List[str]:
        return [
            p.strip().lower()
            for p in self.trusted_identity_providers.split(",")
            if p.strip()
        ]

    @property
    def cors_origin_list(self) -> List[str]:
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]


settings = Settings()
