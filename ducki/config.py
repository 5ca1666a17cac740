from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List


class MediaHostConfig(BaseModel):
    """Upload target on the media host (one per upload flow)"""
    cloud_account: str
    upload_preset: str
    folder: Optional[str] = None
    timeout: float = 60.0

    def upload_url(self, resource: str = "image") -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloud_account}/{resource}/upload"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App
    APP_NAME: str = "Ducki Closet"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # Database - REQUIRED from environment
    DATABASE_URL: str = Field(
        ...,  # No default - must be provided via environment variable
        description="Database connection URL (REQUIRED)"
    )

    # Security - REQUIRED from environment
    SECRET_KEY: str = Field(
        ...,
        min_length=32,
        description="Secret key for JWT tokens (REQUIRED - minimum 32 characters)"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    MIN_PASSWORD_LENGTH: int = 6

    # Media host (Cloudinary) - one place for every upload flow
    CLOUDINARY_CLOUD_NAME: str = "dr3btabmo"
    CLOUDINARY_UPLOAD_PRESET: str = "ducki_items"
    CLOUDINARY_FOLDER: Optional[str] = None
    CLOUDINARY_AVATAR_PRESET: Optional[str] = None  # Falls back to CLOUDINARY_UPLOAD_PRESET
    CLOUDINARY_AVATAR_FOLDER: str = "ducki/avatars"
    MEDIA_UPLOAD_TIMEOUT: float = 60.0
    MAX_UPLOAD_SIZE: int = 100 * 1024 * 1024  # 100MB, videos included

    # CORS
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ])

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: str = "120/minute"

    # Redis (token blacklist)
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _assemble_cors_origins(cls, value):
        """Ensure CORS origins env value always becomes a list of strings."""
        if isinstance(value, str):
            # Support JSON-style lists or simple comma-separated strings
            value = value.strip()
            if value.startswith("[") and value.endswith("]"):
                import json
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, (list, tuple)):
            return list(value)
        return value

    @property
    def item_media(self) -> MediaHostConfig:
        """Upload target for item photos and outfit media"""
        return MediaHostConfig(
            cloud_account=self.CLOUDINARY_CLOUD_NAME,
            upload_preset=self.CLOUDINARY_UPLOAD_PRESET,
            folder=self.CLOUDINARY_FOLDER,
            timeout=self.MEDIA_UPLOAD_TIMEOUT,
        )

    @property
    def avatar_media(self) -> MediaHostConfig:
        """Upload target for profile avatars"""
        return MediaHostConfig(
            cloud_account=self.CLOUDINARY_CLOUD_NAME,
            upload_preset=self.CLOUDINARY_AVATAR_PRESET or self.CLOUDINARY_UPLOAD_PRESET,
            folder=self.CLOUDINARY_AVATAR_FOLDER,
            timeout=self.MEDIA_UPLOAD_TIMEOUT,
        )


settings = Settings()
