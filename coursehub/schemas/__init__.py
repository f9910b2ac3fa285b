"""
Pydantic models for CourseHub documents and request bodies.
"""

from coursehub.schemas.course import (
    Lecture,
    Chapter,
    CourseRating,
    Course,
    CourseCreateRequest,
)
from coursehub.schemas.user import (
    UserRecord,
    CourseProgressRecord,
    EnrollRequest,
    ProgressUpdateRequest,
    ProgressQueryRequest,
    RatingRequest,
)
from coursehub.schemas.webhooks import IdentityEvent

__all__ = [
    "Lecture",
    "Chapter",
    "CourseRating",
    "Course",
    "CourseCreateRequest",
    "UserRecord",
    "CourseProgressRecord",
    "EnrollRequest",
    "ProgressUpdateRequest",
    "ProgressQueryRequest",
    "RatingRequest",
    "IdentityEvent",
]
