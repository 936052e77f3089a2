import uuid
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Configuration
    PROJECT_NAME: str = "Resident Document Store"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Object Store Configuration
    OBJECT_STORE_BACKEND: str = Field(
        default="memory",
        description="Object store backend: 'memory' (default) or 'gcs'",
    )

    @field_validator("OBJECT_STORE_BACKEND")
    @classmethod
    def validate_object_store_backend(cls, v: str) -> str:
        """Validate the object store backend name."""
        v = v.strip().lower()
        if v not in ("memory", "gcs"):
            raise ValueError(
                f"OBJECT_STORE_BACKEND must be 'memory' or 'gcs', got '{v}'"
            )
        return v

    # Google Cloud Platform Configuration
    GCP_PROJECT_ID: Optional[str] = None
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None  # Path to service account file
    GCS_BUCKET_NAME: str = "resident-document-store"
    DOCUMENT_STORE_BASE_PATH: str = ""  # Base path within bucket (empty for root)

    # Document Configuration
    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB in bytes

    # RFC 4122 OID namespace
    DOCUMENT_ID_NAMESPACE: str = Field(
        default=str(uuid.NAMESPACE_OID),
        description="UUID namespace used to derive document identifiers",
    )

    @field_validator("DOCUMENT_ID_NAMESPACE")
    @classmethod
    def validate_document_id_namespace(cls, v: str) -> str:
        """Validate that the namespace is a well-formed UUID."""
        try:
            return str(uuid.UUID(v))
        except (ValueError, AttributeError, TypeError):
            raise ValueError(f"DOCUMENT_ID_NAMESPACE must be a valid UUID, got '{v}'")

    DOCUMENT_LISTING_SKIP_CORRUPT: bool = Field(
        default=False,
        description="Skip listed objects with corrupt metadata instead of failing the whole listing",
    )

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def document_id_namespace(self) -> uuid.UUID:
        """Get the document identifier namespace as a UUID."""
        return uuid.UUID(self.DOCUMENT_ID_NAMESPACE)

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]


# Global settings instance
settings = Settings()
