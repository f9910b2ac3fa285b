"""Progress services."""

from coursehub.services.progress.course_progress_service import CourseProgressService

__all__ = [
    "CourseProgressService",
]
