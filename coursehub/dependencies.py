"""
FastAPI dependencies for CourseHub application.

Provides dependency injection for all services.
"""

import logging
from typing import Annotated, Optional, Dict, Any

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import AuthProvider, JWTAuth, FirebaseAuth, create_auth_dependency
from common.utils.exceptions import ForbiddenException

from coursehub.config import Settings

# Course services
from coursehub.services.course.course_service import CourseService

# User services
from coursehub.services.user.user_service import UserService

# Progress services
from coursehub.services.progress.course_progress_service import CourseProgressService

# Media services
from coursehub.services.media.thumbnail_service import ThumbnailService

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Auth
_auth_provider: Optional[AuthProvider] = None

# Stores
_course_service: Optional[CourseService] = None
_user_service: Optional[UserService] = None
_progress_service: Optional[CourseProgressService] = None

# Media
_thumbnail_service: Optional[ThumbnailService] = None

# Settings used at startup
_settings: Optional[Settings] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_auth_services(settings: Settings) -> None:
    """Initialize the identity provider selected by AUTH_PROVIDER."""
    global _auth_provider

    if settings.AUTH_PROVIDER == "jwt":
        _auth_provider = JWTAuth(
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )
    else:
        _auth_provider = FirebaseAuth(
            credentials_path=settings.FIREBASE_CREDENTIALS_PATH,
            project_id=settings.FIREBASE_PROJECT_ID
        )

    logger.info(f"Identity provider: {settings.AUTH_PROVIDER}")


def init_store_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize course, user and progress stores."""
    global _course_service, _user_service, _progress_service

    _course_service = CourseService(db=db)
    _user_service = UserService(db=db)
    _progress_service = CourseProgressService(db=db)


def init_media_services(settings: Settings) -> None:
    """Initialize media services."""
    global _thumbnail_service

    _thumbnail_service = ThumbnailService(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET
    )


def init_all_services(
    db: AsyncIOMotorDatabase,
    settings: Settings,
    auth_provider: Optional[AuthProvider] = None,
) -> None:
    """
    Initialize all services at application startup.

    Args:
        db: Main MongoDB database connection
        settings: Application settings
        auth_provider: Pre-built identity provider (skips AUTH_PROVIDER lookup)
    """
    global _settings, _auth_provider
    _settings = settings

    if auth_provider is not None:
        _auth_provider = auth_provider
    else:
        init_auth_services(settings)

    init_store_services(db)
    init_media_services(settings)


# ─────────────────────────────────────────────────────────────────
# Auth getters
# ─────────────────────────────────────────────────────────────────

def get_auth_provider() -> AuthProvider:
    """Get the identity provider."""
    if _auth_provider is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_provider


def get_settings() -> Settings:
    """Get the settings the services were initialized with."""
    if _settings is None:
        raise RuntimeError("Services not initialized.")
    return _settings


require_auth = create_auth_dependency(get_auth_provider)


# ─────────────────────────────────────────────────────────────────
# Store getters
# ─────────────────────────────────────────────────────────────────

def get_course_service() -> CourseService:
    """Get course service instance."""
    if _course_service is None:
        raise RuntimeError("Store services not initialized.")
    return _course_service


def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("Store services not initialized.")
    return _user_service


def get_progress_service() -> CourseProgressService:
    """Get course progress service instance."""
    if _progress_service is None:
        raise RuntimeError("Store services not initialized.")
    return _progress_service


# ─────────────────────────────────────────────────────────────────
# Media getters
# ─────────────────────────────────────────────────────────────────

def get_thumbnail_service() -> ThumbnailService:
    """Get thumbnail service instance."""
    if _thumbnail_service is None:
        raise RuntimeError("Media services not initialized.")
    return _thumbnail_service


# ─────────────────────────────────────────────────────────────────
# Role checks
# ─────────────────────────────────────────────────────────────────

async def require_educator(
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> Dict[str, Any]:
    """
    Dependency that requires the educator role.

    The role claim on the token is checked first; tokens issued before the
    role change fall back to the stored user role.
    """
    if claims.get("role") == "educator":
        return claims

    user = await user_service.get_user_by_id(claims["sub"])
    if user and user.get("role") == "educator":
        return claims

    raise ForbiddenException(message="Unauthorized Access", code="NOT_EDUCATOR")
