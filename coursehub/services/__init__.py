"""
CourseHub Services.

All service classes organized by feature.
"""

# Course services
from coursehub.services.course.course_service import CourseService

# User services
from coursehub.services.user.user_service import UserService

# Progress services
from coursehub.services.progress.course_progress_service import CourseProgressService

# Media services
from coursehub.services.media.thumbnail_service import ThumbnailService

__all__ = [
    "CourseService",
    "UserService",
    "CourseProgressService",
    "ThumbnailService",
]
