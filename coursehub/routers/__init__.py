"""
CourseHub API Routers.

All routers are imported here for easy access.
"""

from coursehub.routers.course import router as course_router
from coursehub.routers.user import router as user_router
from coursehub.routers.educator import router as educator_router
from coursehub.routers.webhooks import router as webhooks_router

__all__ = [
    "course_router",
    "user_router",
    "educator_router",
    "webhooks_router",
]
