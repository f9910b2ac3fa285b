"""
CourseHub application settings.

Extends the base settings with CourseHub-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """CourseHub-specific settings."""

    # ==========================================================================
    # Identity Provider Webhook
    # ==========================================================================
    # Shared secret used to sign user provisioning events
    IDENTITY_WEBHOOK_SECRET: Optional[str] = None

    # ==========================================================================
    # Media Host (Cloudinary)
    # ==========================================================================
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    # Number of latest enrollments shown on the educator dashboard
    DASHBOARD_LATEST_LIMIT: int = 10

    # ==========================================================================
    # Client Settings
    # ==========================================================================
    BACKEND_URL: str = "http://localhost:8000"

    # User record provisioning retry
    USER_FETCH_MAX_ATTEMPTS: int = 3
    USER_FETCH_RETRY_DELAY_SECONDS: float = 2.0


# Global settings instance
settings = Settings()
