"""Course services."""

from coursehub.services.course.course_service import CourseService, to_object_id

__all__ = [
    "CourseService",
    "to_object_id",
]
