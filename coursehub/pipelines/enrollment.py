"""
Enrollment pipeline functions.

Stateless orchestration logic for enrolling users in courses.
"""

import logging
from typing import Dict, Any, List

from common.utils.exceptions import NotFoundException
from coursehub.services.course.course_service import CourseService
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)


async def enroll_course_pipeline(
    user_service: UserService,
    course_service: CourseService,
    user_id: str,
    course_id: str,
) -> Dict[str, Any]:
    """
    Enroll a user in a course.

    Both sides of the relation are written with $addToSet, so repeated or
    concurrent requests leave exactly one entry on each side.

    Args:
        user_service: For the user's enrolled-course set
        course_service: For the course's enrolled-student set
        user_id: Current user's ID
        course_id: Course to enroll in

    Returns:
        Response dict with message
    """
    user = await user_service.get_user_by_id(user_id)
    course = await course_service.get_course(course_id)

    if not user or not course:
        raise NotFoundException(message="Data Not Found", code="DATA_NOT_FOUND")

    course_id = course["_id"]

    if course_id in user["enrolledCourses"]:
        return {"message": "Already Enrolled"}

    added = await user_service.add_enrolled_course(user_id, course_id)
    await course_service.add_enrolled_student(course_id, user_id)

    if not added:
        # Another request enrolled the user between the read and the write
        logger.warning(f"Concurrent enrollment for user {user_id} in course {course_id}")
        return {"message": "Already Enrolled"}

    logger.info(f"User {user_id} enrolled in course {course_id}")
    return {"message": "Enrollment Successful"}


async def get_enrolled_courses_pipeline(
    user_service: UserService,
    course_service: CourseService,
    user_id: str,
) -> List[Dict[str, Any]]:
    """
    Get full course documents for every course the user is enrolled in.

    Returns:
        Courses in enrollment order
    """
    user = await user_service.get_user_by_id(user_id)
    if not user:
        raise NotFoundException(message="User Not Found", code="USER_NOT_FOUND")

    return await course_service.get_courses_by_ids(user["enrolledCourses"])
