"""
Shared infrastructure for the CourseHub API.

- database: Motor client ownership and the main database singleton
- auth: identity provider adapters (Firebase, shared-secret JWT)
- utils: response bodies and the API exception taxonomy
- config: environment settings shared by every process
"""

from common.database import MongoDB
from common.auth import AuthProvider, JWTAuth, FirebaseAuth, create_auth_dependency
from common.utils import (
    success_response,
    error_response,
    APIException,
    InvalidInputException,
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
    ServerException,
)
from common.config import BaseAppSettings

__all__ = [
    "MongoDB",
    "AuthProvider",
    "JWTAuth",
    "FirebaseAuth",
    "create_auth_dependency",
    "success_response",
    "error_response",
    "APIException",
    "InvalidInputException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ServerException",
    "BaseAppSettings",
]
