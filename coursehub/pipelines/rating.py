"""
Course rating pipeline functions.
"""

import logging
from typing import Dict, Any, Optional

from common.utils.exceptions import (
    InvalidInputException,
    NotFoundException,
    ForbiddenException,
)
from coursehub.services.course.course_service import CourseService

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def is_valid_rating(rating: Any) -> bool:
    """Ratings are integers from 1 to 5."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        return False
    return MIN_RATING <= rating <= MAX_RATING


async def add_rating_pipeline(
    course_service: CourseService,
    user_id: str,
    course_id: str,
    rating: Optional[int],
) -> Dict[str, Any]:
    """
    Add or replace the user's rating of a course.

    Only enrolled users may rate. A user holds at most one rating per course;
    rating again overwrites the earlier value.

    Args:
        course_service: For course lookup and rating persistence
        user_id: Current user's ID
        course_id: Course being rated
        rating: Integer 1-5

    Returns:
        Response dict with message
    """
    if not course_id or not user_id or not is_valid_rating(rating):
        raise InvalidInputException(message="Invalid Details")

    course = await course_service.get_course(course_id)
    if not course:
        raise NotFoundException(message="Course not found.", code="COURSE_NOT_FOUND")

    if user_id not in course.get("enrolledStudents", []):
        raise ForbiddenException(
            message="User is not enrolled in this course.",
            code="NOT_ENROLLED"
        )

    await course_service.upsert_rating(course["_id"], user_id, rating)

    return {"message": "Rating added"}
