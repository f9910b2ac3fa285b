"""
Course progress pipeline functions.
"""

import logging
from typing import Dict, Any, Optional

from common.utils.exceptions import InvalidInputException
from coursehub.services.progress.course_progress_service import CourseProgressService

logger = logging.getLogger(__name__)


async def update_course_progress_pipeline(
    progress_service: CourseProgressService,
    user_id: str,
    course_id: str,
    lecture_id: str,
) -> Dict[str, Any]:
    """
    Mark a lecture as completed.

    Args:
        progress_service: For progress persistence
        user_id: Current user's ID
        course_id: Course the lecture belongs to
        lecture_id: Completed lecture

    Returns:
        Response dict with message
    """
    if not course_id or not lecture_id:
        raise InvalidInputException(message="Invalid Details")

    added = await progress_service.mark_lecture_complete(user_id, course_id, lecture_id)

    if not added:
        return {"message": "Lecture Already Completed"}

    return {"message": "Progress Updated"}


async def get_course_progress_pipeline(
    progress_service: CourseProgressService,
    user_id: str,
    course_id: str,
) -> Optional[Dict[str, Any]]:
    """Get the user's progress record for a course, None if nothing completed."""
    if not course_id:
        raise InvalidInputException(message="Invalid Details")

    return await progress_service.get_progress(user_id, course_id)
