"""Application configuration."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from restaurant_media.services.preprocessor import ImagePolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Restaurant Media Uploads"
    MAX_FILE_SIZE_MB: int = 20

    # Google Cloud Storage
    GCS_BUCKET: str = ""
    GCS_CLIENT_EMAIL: str = ""
    GCS_PRIVATE_KEY: str = ""
    GCS_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
    GCS_SCOPE: str = "https://www.googleapis.com/auth/devstorage.read_write"

    # Object naming
    UPLOAD_PREFIX: str = "restaurants"
    OBJECT_SUFFIX_ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyz"
    OBJECT_SUFFIX_LENGTH: int = 6

    # Image processing
    IMAGE_POLICY: ImagePolicy = ImagePolicy.COMPRESS
    IMAGE_MAX_DIM: int = 1920
    JPEG_QUALITY: float = 0.85

    # HTTP
    HTTP_TIMEOUT_S: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("GCS_PRIVATE_KEY")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        # Keys pasted into .env files carry literal "\n" sequences
        return value.replace("\\n", "\n")

    @property
    def storage_configured(self) -> bool:
        return bool(self.GCS_BUCKET and self.GCS_CLIENT_EMAIL and self.GCS_PRIVATE_KEY)


# Global settings instance
settings = Settings()
