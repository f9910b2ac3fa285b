"""
Educator pipeline functions.

Stateless orchestration logic for course publishing and the educator
dashboard.
"""

import json
import logging
from typing import Dict, Any, List, Optional, Tuple

from pydantic import ValidationError

from common.auth.base import AuthProvider
from common.utils.exceptions import InvalidInputException, NotFoundException
from coursehub.schemas.course import CourseCreateRequest
from coursehub.services.course.course_service import CourseService
from coursehub.services.media.thumbnail_service import ThumbnailService
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)

EDUCATOR_ROLE = "educator"


async def update_role_to_educator_pipeline(
    auth_provider: AuthProvider,
    user_service: UserService,
    user_id: str,
) -> Dict[str, Any]:
    """
    Grant the educator role.

    The role is written to the identity provider's public claims and mirrored
    on the stored user record.
    """
    try:
        await auth_provider.set_user_role(user_id, EDUCATOR_ROLE)
    except ValueError as e:
        logger.warning(f"Role update rejected for {user_id}: {e}")
        raise NotFoundException(message="User Not Found", code="USER_NOT_FOUND")

    await user_service.set_role(user_id, EDUCATOR_ROLE)

    logger.info(f"User {user_id} is now an educator")
    return {"message": "You can publish a course now"}


def parse_course_data(raw: Optional[str]) -> CourseCreateRequest:
    """
    Parse the ``courseData`` form field.

    Raises:
        InvalidInputException: If the field is missing, not JSON, or not a
            valid course payload
    """
    if not raw:
        raise InvalidInputException(message="Invalid Details")

    try:
        return CourseCreateRequest.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as e:
        logger.warning(f"Rejected course payload: {e}")
        raise InvalidInputException(message="Invalid Details")


async def add_course_pipeline(
    course_service: CourseService,
    thumbnail_service: ThumbnailService,
    educator_id: str,
    course_data: Optional[str],
    image_filename: Optional[str],
    image_content: Optional[bytes],
    image_content_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Publish a new course with its thumbnail.

    Args:
        course_service: For course persistence
        thumbnail_service: For the media host upload
        educator_id: Current educator's ID
        course_data: JSON string with title, description and content tree
        image_filename: Uploaded thumbnail file name
        image_content: Uploaded thumbnail bytes
        image_content_type: Uploaded thumbnail MIME type

    Returns:
        Response dict with message and the created course
    """
    if not image_content:
        raise InvalidInputException(message="Thumbnail Not Attached", code="THUMBNAIL_MISSING")

    payload = parse_course_data(course_data)

    thumbnail_url = await thumbnail_service.upload(
        image_filename or "thumbnail",
        image_content,
        image_content_type
    )

    course = await course_service.create_course(
        educator_id=educator_id,
        course_data=payload.model_dump(),
        thumbnail_url=thumbnail_url
    )

    return {"message": "Course Added", "course": course}


async def get_educator_courses_pipeline(
    course_service: CourseService,
    educator_id: str,
) -> List[Dict[str, Any]]:
    """Get the educator's own courses."""
    courses = await course_service.get_courses_by_educator(educator_id)
    for course in courses:
        course.pop("enrollmentDates", None)
    return courses


async def _collect_enrollments(
    course_service: CourseService,
    user_service: UserService,
    educator_id: str,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Build one entry per (course, enrolled student) pair.

    Students whose user record is missing are skipped.

    Returns:
        Tuple of (courses, enrollments sorted newest first)
    """
    courses = await course_service.get_courses_by_educator(educator_id)

    student_ids = {
        student_id
        for course in courses
        for student_id in course.get("enrolledStudents", [])
    }
    students = await user_service.get_users_by_ids(list(student_ids))

    enrollments = []
    for course in courses:
        dates = course.get("enrollmentDates", {})
        for student_id in course.get("enrolledStudents", []):
            student = students.get(student_id)
            if not student:
                continue
            enrollments.append({
                "student": {
                    "_id": student["_id"],
                    "name": student.get("name"),
                    "imageUrl": student.get("imageUrl"),
                },
                "courseTitle": course["courseTitle"],
                "enrollmentDate": dates.get(student_id),
            })

    # Entries without a recorded date sort last
    enrollments.sort(
        key=lambda e: (e["enrollmentDate"] is not None, e["enrollmentDate"]),
        reverse=True
    )
    return courses, enrollments


async def get_educator_dashboard_pipeline(
    course_service: CourseService,
    user_service: UserService,
    educator_id: str,
    latest_limit: int = 10,
) -> Dict[str, Any]:
    """
    Aggregate the educator dashboard.

    Args:
        course_service: For the educator's courses
        user_service: For student details
        educator_id: Current educator's ID
        latest_limit: Number of latest enrollments to include

    Returns:
        Dict with totalCourses, totalEnrollments and enrolledStudentsData
    """
    courses, enrollments = await _collect_enrollments(course_service, user_service, educator_id)

    return {
        "totalCourses": len(courses),
        "totalEnrollments": len(enrollments),
        "enrolledStudentsData": [
            {"courseTitle": e["courseTitle"], "student": e["student"]}
            for e in enrollments[:latest_limit]
        ],
    }


async def get_enrolled_students_pipeline(
    course_service: CourseService,
    user_service: UserService,
    educator_id: str,
) -> List[Dict[str, Any]]:
    """Every enrollment across the educator's courses, newest first."""
    _, enrollments = await _collect_enrollments(course_service, user_service, educator_id)
    return enrollments
