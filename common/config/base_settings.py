"""
Shared environment configuration.

Infrastructure settings every CourseHub process needs (database, identity
provider, server, CORS, logging). Application settings extend this class.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        CLOUDINARY_CLOUD_NAME: str = ""

    settings = Settings()
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

AUTH_PROVIDERS = ("firebase", "jwt")


class BaseAppSettings(BaseSettings):
    """Loaded from the environment and an optional ``.env`` file."""

    # ==========================================================================
    # Database
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "coursehub"

    # ==========================================================================
    # Identity provider
    # ==========================================================================
    AUTH_PROVIDER: str = "firebase"

    # AUTH_PROVIDER = "jwt"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # AUTH_PROVIDER = "firebase"
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None

    # ==========================================================================
    # Server
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "*"  # Comma-separated, or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    def get_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def validate_required(self) -> None:
        """
        Fail fast on settings the API cannot start without.

        Raises:
            ValueError: Listing every problem found
        """
        errors = []

        if self.AUTH_PROVIDER not in AUTH_PROVIDERS:
            errors.append(f"Unknown AUTH_PROVIDER: {self.AUTH_PROVIDER}")

        if self.AUTH_PROVIDER == "jwt" and not self.JWT_SECRET:
            errors.append("JWT_SECRET is required when AUTH_PROVIDER is jwt")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
