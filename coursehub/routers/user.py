"""
FastAPI router for user endpoints.

Provides endpoints for user data, enrollment, progress and ratings.
"""

import logging
from typing import Annotated, Dict, Any

from fastapi import APIRouter, Depends

from common.utils import success_response, NotFoundException
from coursehub.dependencies import (
    require_auth,
    get_course_service,
    get_user_service,
    get_progress_service,
)
from coursehub.pipelines.enrollment import (
    enroll_course_pipeline,
    get_enrolled_courses_pipeline,
)
from coursehub.pipelines.progress import (
    update_course_progress_pipeline,
    get_course_progress_pipeline,
)
from coursehub.pipelines.rating import add_rating_pipeline
from coursehub.schemas.user import (
    EnrollRequest,
    ProgressUpdateRequest,
    ProgressQueryRequest,
    RatingRequest,
)
from coursehub.services.course.course_service import CourseService
from coursehub.services.progress.course_progress_service import CourseProgressService
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/data")
async def get_user_data(
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """
    Get the current user's record.

    Returns "User Not Found" until the provisioning webhook has created it.
    """
    user = await user_service.get_user_by_id(claims["sub"])
    if not user:
        raise NotFoundException(message="User Not Found", code="USER_NOT_FOUND")

    return success_response(user=user)


@router.post("/enroll")
async def enroll_course(
    body: EnrollRequest,
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """Enroll the current user in a course."""
    result = await enroll_course_pipeline(
        user_service=user_service,
        course_service=course_service,
        user_id=claims["sub"],
        course_id=body.courseId
    )
    return success_response(message=result["message"])


@router.get("/enrolled-courses")
async def get_enrolled_courses(
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """Get full course data for every enrolled course."""
    courses = await get_enrolled_courses_pipeline(
        user_service=user_service,
        course_service=course_service,
        user_id=claims["sub"]
    )
    return success_response(enrolledCourses=courses)


@router.post("/update-course-progress")
async def update_course_progress(
    body: ProgressUpdateRequest,
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    progress_service: Annotated[CourseProgressService, Depends(get_progress_service)],
):
    """Mark a lecture as completed."""
    result = await update_course_progress_pipeline(
        progress_service=progress_service,
        user_id=claims["sub"],
        course_id=body.courseId,
        lecture_id=body.lectureId
    )
    return success_response(message=result["message"])


@router.post("/get-course-progress")
async def get_course_progress(
    body: ProgressQueryRequest,
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    progress_service: Annotated[CourseProgressService, Depends(get_progress_service)],
):
    """Get the current user's progress in a course."""
    progress = await get_course_progress_pipeline(
        progress_service=progress_service,
        user_id=claims["sub"],
        course_id=body.courseId
    )
    return success_response(progressData=progress)


@router.post("/add-rating")
async def add_rating(
    body: RatingRequest,
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """Add or replace the current user's rating of a course."""
    result = await add_rating_pipeline(
        course_service=course_service,
        user_id=claims["sub"],
        course_id=body.courseId,
        rating=body.rating
    )
    return success_response(message=result["message"])
