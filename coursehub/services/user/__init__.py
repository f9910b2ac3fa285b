"""User services."""

from coursehub.services.user.user_service import UserService

__all__ = [
    "UserService",
]
