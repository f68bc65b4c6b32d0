# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# Settings come from the process environment, then a .env file in the
# working directory. get_settings() builds the frozen instance once; the app
# factory, the Celery app and each service receive it explicitly:
#
#   settings = get_settings()
#   app = create_app(settings)
#   catalog = CatalogService(ModelRepository(client), settings)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    ModelHub configuration.

    Only SUPABASE_URL and SUPABASE_SERVICE_KEY are required; everything
    else has a development default. Instances are frozen.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    MODELS_BUCKET: str = Field(
        default="models",
        description="Storage bucket for uploaded model files"
    )

    IMAGES_BUCKET: str = Field(
        default="images",
        description="Storage bucket for model preview images and avatars"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (for Celery)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for Celery broker"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    FRONTEND_URL: str = Field(
        default="http://localhost:5173",
        description="Base URL used when building links in emails"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing access and refresh tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="Signing algorithm for issued tokens"
    )

    JWT_EXPIRE_HOURS: int = Field(
        default=24,
        ge=1,
        description="Access token lifetime in hours"
    )

    JWT_REFRESH_EXPIRE_DAYS: int = Field(
        default=7,
        ge=1,
        description="Refresh token lifetime in days"
    )

    RESET_TOKEN_TTL_MINUTES: int = Field(
        default=60,
        ge=1,
        description="Lifetime of password reset tokens"
    )

    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # Optional account created on startup when the user table is empty
    BOOTSTRAP_ADMIN_EMAIL: str | None = Field(default=None)
    BOOTSTRAP_ADMIN_USERNAME: str = Field(default="admin")
    BOOTSTRAP_ADMIN_PASSWORD: str | None = Field(default=None)

    # -------------------------------------------------------------------------
    # File Upload Settings
    # -------------------------------------------------------------------------

    MAX_UPLOAD_SIZE_MB: int = Field(
        default=100,
        ge=1,
        le=2048,
        description="Maximum model file upload size in MB (images get a tenth)"
    )

    ALLOWED_MODEL_EXTENSIONS: str = Field(
        default=".ysm,.zip",
        description="Allowed model file extensions (comma-separated)"
    )

    ALLOWED_IMAGE_EXTENSIONS: str = Field(
        default=".png,.jpg,.jpeg,.gif,.webp",
        description="Allowed image extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    DEFAULT_PAGE_SIZE: int = Field(default=12, ge=1, le=100)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1, le=500)

    # -------------------------------------------------------------------------
    # Email (SMTP)
    # -------------------------------------------------------------------------
    # Email is disabled unless both SMTP_HOST and SMTP_USER are set

    SMTP_HOST: str = Field(default="")
    SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    SMTP_USER: str = Field(default="")
    SMTP_PASSWORD: str = Field(default="")
    SMTP_FROM: str = Field(default="")

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @staticmethod
    def _split(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        return self._split(self.CORS_ORIGINS)

    @property
    def allowed_model_extensions_list(self) -> list[str]:
        return [ext.lower() for ext in self._split(self.ALLOWED_MODEL_EXTENSIONS)]

    @property
    def allowed_image_extensions_list(self) -> list[str]:
        return [ext.lower() for ext in self._split(self.ALLOWED_IMAGE_EXTENSIONS)]

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def max_image_size_bytes(self) -> int:
        return self.max_upload_size_bytes // 10

    def clamp_page_size(self, page_size: int | None) -> int:
        """Resolve a requested page size against the configured default and cap."""
        if not page_size or page_size < 1:
            return self.DEFAULT_PAGE_SIZE
        return min(page_size, self.MAX_PAGE_SIZE)

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER)

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """Settings from the environment, parsed and validated once per process."""
    return Settings()
