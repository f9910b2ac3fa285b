"""
FastAPI router for the public course catalogue.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from common.utils import success_response, NotFoundException
from coursehub.dependencies import get_course_service
from coursehub.services.course.course_service import CourseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/course", tags=["course"])


@router.get("/all")
async def get_all_courses(
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """List published courses, newest first."""
    courses = await course_service.get_published_courses()
    return success_response(courses=courses)


@router.get("/{course_id}")
async def get_course_by_id(
    course_id: str,
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """Get course details. Only free-preview lectures keep their URL."""
    course = await course_service.get_course_details(course_id)
    if not course:
        raise NotFoundException(message="Course not found", code="COURSE_NOT_FOUND")

    return success_response(courseData=course)
